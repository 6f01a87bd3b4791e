"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv
from loguru import logger

from cvscriptly.utils.logger import format_list
from cvscriptly.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(
    log_dir: Path,
    resume_file: Optional[Path] = None,
    formats: Iterable[str] = (),
    theme: Optional[str] = None,
    console: bool = True,
) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        resume_file: Resume being exported
        formats: Format labels requested ('PDF', 'DOCX', 'LaTeX')
        theme: Theme preset applied before rendering, if any
        console: Also echo INFO and above to stdout

    Returns:
        Path to log file

    Example:
        from cvscriptly.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir, resume_file, formats=["PDF"])
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        resume_file=resume_file,
        extra_provenance={
            "Formats": format_list(formats),
            "Theme": theme or "as saved",
            "Output path": os.getenv("CVSCRIPTLY_OUTPUT_PATH", "outs/resumes"),
            "DOCX library timeout": os.getenv("DOCX_LIBRARY_TIMEOUT", "5"),
        },
        console=console,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_export_start(resume_name: str, format_name: str, filename: str) -> None:
    """Log start of an export with context."""
    _log_info(f"Starting {format_name} export: {resume_name}")
    _log_debug(f"  Target: {filename}")


def log_export_result(result, elapsed_time: float) -> None:
    """
    Log export result.

    Args:
        result: ExportResult from ResumeExporter.export()
        elapsed_time: Time taken to render
    """
    if result.success:
        _log_success(f"{result.format_name} export succeeded ({elapsed_time:.2f}s)")
        _log_debug(f"  File: {result.filename} ({len(result.content)} bytes)")
        if result.page_count is not None:
            _log_debug(f"  Pages: {result.page_count}")
    else:
        _log_error(f"{result.format_name} export failed ({elapsed_time:.2f}s)")
        _log_error(f"  {result.error}")


def log_library_attempt(source: str, attempt: int, max_attempts: int, reason: str) -> None:
    """Log a failed library acquisition attempt."""
    _log_warning(f"Loading {source} failed (attempt {attempt}/{max_attempts}): {reason}")
