"""
Advising context logger.

Provides logging interface for advising context with automatic [advise] prefix.
All advising modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import Optional

from loguru import logger

from cvscriptly.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[advise]"


def setup_advising_logger(
    log_dir: Path, resume_file: Optional[Path] = None, task: str = None, console: bool = True
) -> Path:
    """
    Setup logger for advising context.

    Args:
        log_dir: Directory for this session
        resume_file: Resume sent to the AI collaborator
        task: 'summary' or 'analysis'
        console: Also echo INFO and above to stdout

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="advise",
        log_dir=log_dir,
        resume_file=resume_file,
        extra_provenance={
            "Task": task or "unspecified",
            "LLM provider": os.getenv("LLM_PROVIDER", "openai"),
            "LLM model": os.getenv("LLM_MODEL", "provider default"),
        },
        console=console,
    )


# Wrapper functions with automatic [advise] prefix


def _log_info(message: str) -> None:
    """Log info message with [advise] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [advise] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [advise] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [advise] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_llm_usage(task: str, response) -> None:
    """Log which model answered and how many tokens it used."""
    _log_debug(
        f"{task}: {response.model} "
        f"(in={response.input_tokens}, out={response.output_tokens} tokens)"
    )


def log_feedback(feedback) -> None:
    """Log a one-line summary of ATS feedback."""
    _log_success(f"ATS score {feedback.score}/100 with {len(feedback.suggestions)} suggestion(s)")
