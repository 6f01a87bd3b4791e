"""
Composing context logger.

Provides logging interface for composing context with automatic [compose] prefix.
All composing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[compose]"


# Wrapper functions with automatic [compose] prefix


def _log_info(message: str) -> None:
    """Log info message with [compose] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [compose] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_resume_loaded(source: Path, resume) -> None:
    """Log a summary of a resume loaded from disk."""
    _log_info(f"Loaded resume for {resume.personal_details.name!r} from {source}")
    _log_debug(
        f"  experience={len(resume.experience)} education={len(resume.education)} "
        f"projects={len(resume.projects)} skills={len(resume.skills)} "
        f"custom={len(resume.custom_sections)}"
    )
    _log_debug(f"  section order: {', '.join(resume.section_order)}")


def log_theme_applied(theme_name: str) -> None:
    """Log application of a theme preset."""
    _log_info(f"Applied theme preset: {theme_name}")
