"""Custom exception classes for the grammar coach.

Transport failures are always recovered by falling back to the local rule
engine; only correction errors reach the caller.
"""

from typing import Optional


class TransportError(Exception):
    """Raised when the remote grammar service cannot be used.

    This typically occurs when:
    - The service is unreachable or the request timed out
    - The service answered with a non-success status
    - The local LanguageTool server failed to start or answer
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(TransportError):
    """Raised when the remote service answers with an unexpected payload.

    Handled exactly like a TransportError.
    """

    def __init__(self, message: str, payload_excerpt: Optional[str] = None) -> None:
        self.payload_excerpt = payload_excerpt
        super().__init__(message)


class CorrectionError(Exception):
    """Base class for errors raised while applying a correction."""

    def __init__(self, message: str, issue_id: Optional[str] = None) -> None:
        self.issue_id = issue_id
        super().__init__(message)


class InvalidCorrectionIndexError(CorrectionError):
    """Raised when a correction index is outside the issue's options."""

    def __init__(
        self, message: str, issue_id: Optional[str] = None, index: Optional[int] = None
    ) -> None:
        self.index = index
        super().__init__(message, issue_id=issue_id)


class StaleIssueError(CorrectionError):
    """Raised when an issue is applied to text it was not detected in.

    Offsets are never shifted after an edit. Re-run detection instead.
    """
