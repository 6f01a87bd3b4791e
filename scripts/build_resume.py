#!/usr/bin/env python3
"""
Resume Build CLI

Renders resume YAML/JSON files to PDF, DOCX and LaTeX, writes the live preview,
and asks the AI collaborator for summaries and ATS feedback.

Commands:
    export    - Export a resume as PDF, DOCX and/or LaTeX
    preview   - Write the live-preview HTML
    analyze   - Score a resume for ATS compatibility
    summarize - Draft a resume summary
    themes    - List theme presets
    init      - Write the template-default resume as YAML

Examples:\n

    build_resume.py init data/resume.yaml                          # Start from the default resume

    build_resume.py export data/resume.yaml                        # PDF (default format)

    build_resume.py export data/resume.yaml --format all           # PDF, DOCX and LaTeX

    build_resume.py export data/resume.yaml --theme "Classic Serif"

    build_resume.py analyze data/resume.yaml --job-description job.txt
"""

import asyncio
import os
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from cvscriptly.contexts.advising import SUMMARY_FALLBACK, ResumeAdvisor
from cvscriptly.contexts.advising.logger import setup_advising_logger
from cvscriptly.contexts.composing import (
    InvalidResumeDataError,
    apply_theme,
    default_resume,
    list_theme_names,
    load_resume,
    save_resume,
)
from cvscriptly.contexts.rendering import ExportFormat, ResumeExporter, render_preview
from cvscriptly.contexts.rendering.logger import setup_rendering_logger

load_dotenv()
OUTPUT_PATH = Path(os.getenv("CVSCRIPTLY_OUTPUT_PATH", "outs/resumes"))
LOGS_PATH = Path(os.getenv("CVSCRIPTLY_LOGS_PATH", "outs/logs"))


class FormatChoice(str, Enum):
    pdf = "pdf"
    docx = "docx"
    tex = "tex"
    all = "all"


def _session_dir(prefix: str) -> Path:
    return LOGS_PATH / f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"


def _load(resume_file: Path, theme: Optional[str] = None):
    """Load a resume (optionally themed) or exit with a readable error."""
    try:
        resume = load_resume(resume_file)
        if theme:
            resume = apply_theme(resume, theme)
    except (FileNotFoundError, InvalidResumeDataError, ValueError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return resume


app = typer.Typer(
    help="Render resumes to PDF, DOCX and LaTeX, preview them, and get AI feedback",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("export")
def export_command(
    resume_file: Annotated[
        Path,
        typer.Argument(help="Resume file (YAML or JSON, camelCase wire format)"),
    ],
    export_format: Annotated[
        FormatChoice,
        typer.Option("--format", "-f", help="Output format, or 'all' for every format"),
    ] = FormatChoice.pdf,
    theme: Annotated[
        Optional[str],
        typer.Option("--theme", "-t", help="Apply a theme preset before rendering"),
    ] = None,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory for exported files"),
    ] = OUTPUT_PATH,
):
    """
    Export a resume to <Name>_Resume.<ext>.

    Examples:\n

        $ build_resume.py export data/resume.yaml                   # PDF

        $ build_resume.py export data/resume.yaml -f docx           # DOCX

        $ build_resume.py export data/resume.yaml -f all -o out/    # Every format into out/
    """
    if export_format is FormatChoice.all:
        formats = list(ExportFormat)
    else:
        formats = [ExportFormat(export_format.value)]

    log_file = setup_rendering_logger(
        _session_dir("export"),
        resume_file=resume_file,
        formats=[fmt.label for fmt in formats],
        theme=theme,
    )
    resume = _load(resume_file, theme)

    typer.secho(f"\nExporting: {resume.personal_details.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Formats: {', '.join(fmt.label for fmt in formats)}")
    typer.echo("")

    exporter = ResumeExporter()
    failures = 0
    for fmt in formats:
        result = asyncio.run(exporter.export_to_file(resume, fmt, output_dir))
        if result.success:
            pages = f" ({result.page_count} page(s))" if result.page_count else ""
            typer.secho(f"✓ {result.format_name}: {result.path}{pages}", fg=typer.colors.GREEN)
        else:
            failures += 1
            typer.secho(f"✗ {result.error}", fg=typer.colors.RED)

    typer.echo(f"\n  Log: {log_file}")
    typer.echo("")
    raise typer.Exit(code=1 if failures else 0)


@app.command("preview")
def preview_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (YAML or JSON)")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="HTML file to write (default: preview.html)"),
    ] = None,
    theme: Annotated[
        Optional[str],
        typer.Option("--theme", "-t", help="Apply a theme preset before rendering"),
    ] = None,
):
    """Write the live-preview HTML for a resume."""
    resume = _load(resume_file, theme)
    output = output or OUTPUT_PATH / "preview.html"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_preview(resume), encoding="utf-8")
    typer.secho(f"✓ Preview written to {output}", fg=typer.colors.GREEN)


@app.command("analyze")
def analyze_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (YAML or JSON)")],
    job_description: Annotated[
        Optional[Path],
        typer.Option("--job-description", "-j", help="Text file with the target job description"),
    ] = None,
):
    """
    Score a resume for ATS compatibility.

    Uses LLM_PROVIDER (anthropic or openai) and its API key from the environment.
    """
    setup_advising_logger(_session_dir("analyze"), resume_file=resume_file, task="analysis")
    resume = _load(resume_file)
    job_text = job_description.read_text(encoding="utf-8") if job_description else None

    feedback = ResumeAdvisor().analyze_resume(resume, job_description=job_text)

    color = typer.colors.GREEN if feedback.score >= 70 else typer.colors.YELLOW
    typer.secho(f"\nATS score: {feedback.score}/100", fg=color, bold=True)
    typer.echo(f"\n{feedback.summary}\n")
    if feedback.suggestions:
        typer.echo("Suggestions:")
        for suggestion in feedback.suggestions:
            typer.echo(f"  - {suggestion}")
    typer.echo("")


@app.command("summarize")
def summarize_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (YAML or JSON)")],
    write: Annotated[
        bool,
        typer.Option("--write", "-w", help="Save the drafted summary back into the resume file"),
    ] = False,
):
    """Draft a 2-3 sentence summary from experience, projects and skills."""
    setup_advising_logger(_session_dir("summarize"), resume_file=resume_file, task="summary")
    resume = _load(resume_file)
    summary = ResumeAdvisor().generate_summary(resume)

    typer.echo(f"\n{summary}\n")
    if write and summary != SUMMARY_FALLBACK:
        save_resume(resume.replace(summary=summary), resume_file)
        typer.secho(f"✓ Summary saved to {resume_file}", fg=typer.colors.GREEN)


@app.command("themes")
def themes_command():
    """List the available theme presets."""
    for name in list_theme_names():
        typer.echo(name)


@app.command("init")
def init_command(
    path: Annotated[Path, typer.Argument(help="Where to write the resume YAML")],
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing file"),
    ] = False,
):
    """Write the template-default resume as a starting point."""
    if path.exists() and not force:
        typer.secho(f"Error: {path} already exists (use --force)\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    save_resume(default_resume(), path)
    typer.secho(f"✓ Default resume written to {path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
