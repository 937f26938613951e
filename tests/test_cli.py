"""
Tests for the grammar-coach command line interface.

All commands run with --offline so no request leaves the machine.
"""

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grammar_coach.cli import app, generate_issue_report
from grammar_coach.pipeline import WritingPipeline

runner = CliRunner()


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    path = tmp_path / "essay.txt"
    path.write_text("He are happy", encoding="utf-8")
    return path


# ============================================================================
# check
# ============================================================================


class TestCheckCommand:
    """Tests for 'grammar-coach check'."""

    def test_check_offline(self, text_file: Path):
        result = runner.invoke(app, ["check", str(text_file), "--offline"])

        assert result.exit_code == 0
        assert "Using local rules:" in result.output
        assert "Quality score: 0%" in result.output

    def test_check_clean_file(self, tmp_path: Path):
        path = tmp_path / "clean.txt"
        path.write_text("The committee reviewed the proposal.", encoding="utf-8")
        result = runner.invoke(app, ["check", str(path), "--offline"])

        assert result.exit_code == 0
        assert "No issues found" in result.output
        assert "Quality score: 100%" in result.output

    def test_check_json(self, text_file: Path):
        result = runner.invoke(app, ["check", str(text_file), "--offline", "--json"])

        assert result.exit_code == 0
        assert '"matched_text": "He are"' in result.output
        assert '"source": "local"' in result.output

    def test_check_style_case_insensitive(self, text_file: Path):
        result = runner.invoke(
            app, ["check", str(text_file), "--offline", "--style", "CASUAL", "--json"]
        )
        assert result.exit_code == 0
        assert '"style": "casual"' in result.output

    def test_check_report(self, text_file: Path):
        result = runner.invoke(app, ["check", str(text_file), "--offline", "--report"])
        report_path = text_file.parent / "essay_grammar_report.txt"

        assert result.exit_code == 0
        assert report_path.exists()
        content = report_path.read_text(encoding="utf-8")
        assert "GRAMMAR CHECK REPORT" in content
        assert "Issue ID: local-issue-0" in content
        assert 'Option 0: "He is"' in content

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["check", str(tmp_path / "missing.txt"), "--offline"])
        assert result.exit_code != 0


# ============================================================================
# fix
# ============================================================================


class TestFixCommand:
    """Tests for 'grammar-coach fix'."""

    def test_fix_in_place(self, text_file: Path):
        result = runner.invoke(
            app, ["fix", str(text_file), "--issue", "local-issue-0", "--offline"]
        )

        assert result.exit_code == 0
        assert text_file.read_text(encoding="utf-8") == "He is happy"

    def test_fix_second_option_to_output(self, text_file: Path, tmp_path: Path):
        output = tmp_path / "fixed.txt"
        result = runner.invoke(
            app,
            [
                "fix", str(text_file),
                "--issue", "local-issue-0",
                "--option", "1",
                "--output", str(output),
                "--offline",
            ],
        )

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "He was happy"
        assert text_file.read_text(encoding="utf-8") == "He are happy"

    def test_fix_bad_option(self, text_file: Path):
        result = runner.invoke(
            app, ["fix", str(text_file), "-i", "local-issue-0", "-n", "7", "--offline"]
        )

        assert result.exit_code == 1
        assert text_file.read_text(encoding="utf-8") == "He are happy"

    def test_fix_unknown_issue(self, text_file: Path):
        result = runner.invoke(
            app, ["fix", str(text_file), "--issue", "local-issue-9", "--offline"]
        )

        assert result.exit_code == 1
        assert text_file.read_text(encoding="utf-8") == "He are happy"


# ============================================================================
# rules / report
# ============================================================================


class TestRulesCommand:
    def test_lists_rules(self):
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "MISSPELLING_ALOT" in result.output
        assert "THIRD_PERSON_DONT" in result.output


class TestIssueReport:
    def test_report_sections(self, tmp_path: Path, offline_pipeline: WritingPipeline):
        input_path = tmp_path / "notes.txt"
        report = offline_pipeline.run("She don't likes to go outside when it's rain.")

        report_path = generate_issue_report(report, input_path)
        content = report_path.read_text(encoding="utf-8")

        assert report_path.name == "notes_grammar_report.txt"
        assert "Total Issues Found: 3" in content
        assert "Fallback reason: remote checker disabled" in content
        assert "SENTENCES" in content
        assert "grammar: 3" in content
