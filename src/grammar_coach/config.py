"""Configuration dataclasses for the grammar coach.

Settings are grouped by concern (remote checker, analysis, session) and can
be loaded from a YAML file. Missing keys keep their defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml  # type: ignore[import-untyped]

from grammar_coach.models import WritingStyle

logger = structlog.get_logger()

REMOTE_BACKENDS = ("http", "language_tool_server")
WRITING_STYLES = tuple(style.value for style in WritingStyle)


def normalize_style(style: Any) -> str:
    """Lower-case a configured style name and check it is a known style.

    Raises:
        ValueError: If the style is unknown.
    """
    normalized = str(style).strip().lower()
    if normalized not in WRITING_STYLES:
        raise ValueError(
            f"Unknown writing style {style!r}; expected one of {', '.join(WRITING_STYLES)}"
        )
    return normalized


@dataclass
class RemoteConfig:
    """Remote grammar service configuration."""

    enabled: bool = True
    backend: str = "http"  # "http" or "language_tool_server"
    api_url: str = "https://api.languagetool.org"
    language: str = "en-US"
    timeout_seconds: float = 10.0


@dataclass
class AnalysisConfig:
    """Local analysis configuration."""

    style: str = "formal"
    disabled_rules: List[str] = field(default_factory=list)


@dataclass
class SessionConfig:
    """Interactive session configuration."""

    debounce_seconds: float = 0.5


@dataclass
class CoachConfig:
    """Main configuration for the grammar coach.

    Example:
        config = CoachConfig.from_yaml(Path("settings.yaml"))
        config.remote.enabled = False  # offline mode
    """

    remote: RemoteConfig = field(default_factory=RemoteConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoachConfig":
        """Create a CoachConfig from a dictionary (e.g., from YAML).

        Args:
            data: Dictionary with configuration values.

        Returns:
            CoachConfig instance with values from the dictionary.

        Raises:
            ValueError: If the remote backend or the writing style is unknown.
        """
        config = cls()

        if "remote" in data:
            remote_data = data["remote"] or {}
            config.remote.enabled = bool(remote_data.get("enabled", config.remote.enabled))
            config.remote.backend = remote_data.get("backend", config.remote.backend)
            config.remote.api_url = remote_data.get("api_url", config.remote.api_url)
            config.remote.language = remote_data.get("language", config.remote.language)
            config.remote.timeout_seconds = float(
                remote_data.get("timeout_seconds", config.remote.timeout_seconds)
            )

        if "analysis" in data:
            analysis_data = data["analysis"] or {}
            config.analysis.style = normalize_style(
                analysis_data.get("style", config.analysis.style)
            )
            config.analysis.disabled_rules = list(
                analysis_data.get("disabled_rules", config.analysis.disabled_rules)
            )

        if "session" in data:
            session_data = data["session"] or {}
            config.session.debounce_seconds = float(
                session_data.get("debounce_seconds", config.session.debounce_seconds)
            )

        if config.remote.backend not in REMOTE_BACKENDS:
            raise ValueError(
                f"Unknown remote backend {config.remote.backend!r}; "
                f"expected one of {', '.join(REMOTE_BACKENDS)}"
            )

        return config

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "CoachConfig":
        """Load configuration from a YAML file, falling back to defaults."""
        if config_path and config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            logger.info("config_loaded", path=str(config_path))
            return cls.from_dict(data)

        logger.warning("using_default_config")
        return cls()
