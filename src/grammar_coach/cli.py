"""
CLI Entrypoint for the grammar coach

Checks text files for grammar, spelling and style issues and applies
corrections one at a time.

Usage:
    grammar-coach check INPUT_PATH [OPTIONS]
    grammar-coach fix INPUT_PATH --issue ID [OPTIONS]
    grammar-coach rules
    grammar-coach warmup
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from grammar_coach.corrections import apply_correction
from grammar_coach.errors import CorrectionError
from grammar_coach.models import AnalysisReport, WritingStyle
from grammar_coach.pipeline import create_pipeline
from grammar_coach.rules import DEFAULT_RULES


def generate_issue_report(report: AnalysisReport, input_path: Path) -> Path:
    """
    Write a plain-text report of every issue, sentence score and statistic.

    Args:
        report: The analysis report for the file's text
        input_path: Path to the checked file

    Returns:
        Path to the generated report file
    """
    report_path = input_path.parent / f"{input_path.stem}_grammar_report.txt"
    stats = report.stats

    lines = []
    lines.append("=" * 70)
    lines.append("GRAMMAR CHECK REPORT")
    lines.append("=" * 70)
    lines.append(f"Document: {input_path.name}")
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"Style: {report.style.value}")
    lines.append(f"Checked by: {report.detection.source}")
    if report.detection.fallback_reason:
        lines.append(f"Fallback reason: {report.detection.fallback_reason}")
    lines.append(f"Words: {stats.words}  Characters: {stats.characters}  Sentences: {stats.sentences}")
    lines.append(f"Total Issues Found: {stats.total_issues}")
    lines.append(f"Quality Score: {stats.overall_score:.0f}%")
    lines.append("=" * 70)
    lines.append("")

    lines.append("ISSUES:")
    lines.append("")
    for i, issue in enumerate(report.issues, 1):
        lines.append(f"  {i}. [{issue.kind.value}/{issue.severity.value}] {issue.explanation}")
        lines.append(f"     Error: \"{issue.matched_text}\"")
        lines.append(f"     Location: character {issue.span.start}-{issue.span.end}")
        lines.append(f"     Issue ID: {issue.id}")
        if issue.rule_id:
            lines.append(f"     Rule: {issue.rule_id}")
        for n, option in enumerate(issue.corrections):
            lines.append(
                f"     Option {n}: \"{option.replacement_text}\" "
                f"({option.confidence}%) - {option.rationale}"
            )
        lines.append("")

    lines.append("=" * 70)
    lines.append("SENTENCES")
    lines.append("=" * 70)
    for sentence in report.sentences:
        lines.append(f"  \"{sentence.sentence_text}\"")
        lines.append(
            f"     grammar={sentence.grammar_score} tone={sentence.tone_score} "
            f"clarity={sentence.clarity_score} words={sentence.word_count} "
            f"complexity={sentence.complexity.value}"
            + (" passive" if sentence.is_passive else "")
        )
    lines.append("")

    lines.append("=" * 70)
    lines.append("SUMMARY BY ISSUE TYPE")
    lines.append("=" * 70)
    lines.append(f"  grammar: {stats.grammar_errors}")
    lines.append(f"  spelling: {stats.spelling_errors}")
    lines.append(f"  style: {stats.style_issues}")
    lines.append(f"  punctuation: {stats.punctuation_issues}")
    lines.append(f"  tone: {stats.tone_issues}")
    lines.append(f"  passive: {stats.passive_voice}")
    lines.append(f"  clarity: {stats.clarity_issues}")
    lines.append("")
    lines.append("=" * 70)
    lines.append("END OF REPORT")
    lines.append("=" * 70)

    report_path.write_text("\n".join(lines), encoding="utf-8")

    return report_path


app = typer.Typer(
    name="grammar-coach",
    help="Grammar, spelling and style checker with ranked corrections",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info-level log events"),
) -> None:
    """Configure logging for every command."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _run_check(
    input_path: Path,
    style: Optional[WritingStyle],
    config: Optional[Path],
    offline: bool,
) -> AnalysisReport:
    text = input_path.read_text(encoding="utf-8")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Checking text...", total=None)
        pipeline = create_pipeline(
            config_path=str(config) if config else None,
            offline=offline,
        )
        try:
            return pipeline.run(text, style)
        finally:
            pipeline.close()


def _print_issues(report: AnalysisReport) -> None:
    if not report.issues:
        console.print("[green]Excellent! No issues found in your text.[/]")
        return

    table = Table(show_header=True, header_style="bold", title="Grammar & Style Issues")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Text")
    table.add_column("Suggestions")
    table.add_column("Explanation")

    severity_styles = {"high": "red", "medium": "yellow", "low": "blue"}
    for issue in report.issues:
        colour = severity_styles[issue.severity.value]
        suggestions = ", ".join(f'"{c.replacement_text}"' for c in issue.corrections) or "-"
        table.add_row(
            issue.id,
            issue.kind.value,
            f"[{colour}]{issue.severity.value}[/]",
            f'"{issue.matched_text}"',
            suggestions,
            issue.explanation,
        )
    console.print(table)


def _print_sentences(report: AnalysisReport) -> None:
    if not report.sentences:
        return

    table = Table(show_header=True, header_style="bold", title="Sentence Analysis")
    table.add_column("#", style="dim", width=4)
    table.add_column("Sentence")
    table.add_column("Grammar", justify="right")
    table.add_column("Tone", justify="right")
    table.add_column("Clarity", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Passive")

    for idx, sentence in enumerate(report.sentences, 1):
        table.add_row(
            str(idx),
            sentence.sentence_text,
            str(sentence.grammar_score),
            str(sentence.tone_score),
            str(sentence.clarity_score),
            f"{sentence.word_count} ({sentence.complexity.value})",
            "yes" if sentence.is_passive else "",
        )
    console.print(table)


def _print_stats(report: AnalysisReport) -> None:
    stats = report.stats
    console.print("\n[bold]Summary:[/]")
    console.print(f"  Words: {stats.words}")
    console.print(f"  Characters: {stats.characters}")
    console.print(f"  Sentences: {stats.sentences}")
    console.print(f"  Errors (grammar + spelling): {stats.total_errors}")
    console.print(f"  Total issues: {stats.total_issues}")
    console.print(f"  Quality score: {stats.overall_score:.0f}%")


@app.command()
def check(
    input_path: Path = typer.Argument(
        ...,
        help="Path to a UTF-8 text file",
        exists=True,
        dir_okay=False,
    ),
    style: Optional[WritingStyle] = typer.Option(
        None,
        "--style",
        "-s",
        help="Writing style (defaults to the configured style)",
        case_sensitive=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to settings.yaml configuration file",
        exists=True,
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Use local rules only; never contact LanguageTool",
    ),
    report: bool = typer.Option(
        False,
        "--report",
        "-r",
        help="Write a plain-text report next to the input file",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the full analysis as JSON",
    ),
) -> None:
    """
    Check a text file for grammar, spelling and style issues.
    """
    result = _run_check(input_path, style, config, offline)

    if json_output:
        typer.echo(result.model_dump_json(indent=2))
        return

    console.print(f"[bold blue]Checked:[/] {input_path} [dim]({result.style.value})[/]")
    if result.detection.used_fallback:
        console.print(
            f"[yellow]Using local rules:[/] {result.detection.fallback_reason}"
        )

    _print_issues(result)
    _print_sentences(result)
    _print_stats(result)

    if report:
        report_path = generate_issue_report(result, input_path)
        console.print(f"\n[blue]Report:[/] {report_path}")


@app.command()
def fix(
    input_path: Path = typer.Argument(
        ...,
        help="Path to a UTF-8 text file",
        exists=True,
        dir_okay=False,
    ),
    issue_id: str = typer.Option(
        ...,
        "--issue",
        "-i",
        help="Issue ID from 'grammar-coach check'",
    ),
    option: int = typer.Option(
        0,
        "--option",
        "-n",
        help="Correction option to apply (0 = best)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the corrected text here instead of overwriting the input",
    ),
    style: Optional[WritingStyle] = typer.Option(
        None,
        "--style",
        "-s",
        help="Writing style (defaults to the configured style)",
        case_sensitive=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to settings.yaml configuration file",
        exists=True,
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Use local rules only; never contact LanguageTool",
    ),
) -> None:
    """
    Apply one correction to a text file.

    The file is re-checked first so the issue is bound to its current
    text. Issue IDs change after every edit; run 'check' again before the
    next fix.
    """
    result = _run_check(input_path, style, config, offline)

    issue = result.detection.get_issue(issue_id)
    if issue is None:
        console.print(f"[red]No issue with ID {issue_id} in {input_path.name}[/]")
        raise typer.Exit(code=1)

    try:
        new_text = apply_correction(result.text, issue, option)
    except CorrectionError as e:
        console.print(f"[red]Cannot apply correction:[/] {e}")
        raise typer.Exit(code=1) from e

    target = output or input_path
    target.write_text(new_text, encoding="utf-8")

    replacement = issue.corrections[option].replacement_text
    console.print(
        f"[green]Applied:[/] \"{issue.matched_text}\" -> \"{replacement}\" in {target}"
    )
    console.print("[dim]Issue IDs have changed; run 'check' again before the next fix.[/]")


@app.command()
def rules() -> None:
    """
    List the local rules used when LanguageTool is unavailable.
    """
    table = Table(show_header=True, header_style="bold", title="Local Rules")
    table.add_column("#", style="dim", width=4)
    table.add_column("Rule ID", no_wrap=True)
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Explanation")

    for idx, rule in enumerate(DEFAULT_RULES, 1):
        table.add_row(str(idx), rule.rule_id, rule.kind.value, rule.severity.value, rule.explanation)

    console.print(table)


@app.command()
def warmup(
    language: str = typer.Option("en-US", "--language", "-l", help="LanguageTool language code"),
) -> None:
    """
    Download and start the local LanguageTool server once.

    Only useful with the 'language_tool_server' backend: the first start
    fetches LanguageTool and later starts skip that download. Starting the
    Java server takes 10-30 seconds.
    """
    from grammar_coach.errors import TransportError
    from grammar_coach.remote import BASIC_CATEGORIES, LanguageToolServerTransport

    console.print("[bold blue]Warming up LanguageTool...[/]")

    transport = LanguageToolServerTransport(language=language)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Starting LanguageTool Java server...", total=None)

        try:
            _ = transport.tool
            progress.update(task, description="Verifying server is responsive...")
            _ = transport.check("Test sentence.", language, BASIC_CATEGORIES)
        except TransportError as e:
            console.print(f"[red]Failed to warm up LanguageTool: {e}[/]")
            raise typer.Exit(code=1) from e
        finally:
            transport.close()

    console.print("[bold green]LanguageTool ready.[/]")


if __name__ == "__main__":
    app()
