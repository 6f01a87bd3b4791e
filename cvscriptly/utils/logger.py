"""
Session logger setup shared by all contexts.

Each CLI session gets its own log directory with one <context>.log file. The
file opens with a provenance header naming the CVSCRIPTLY version, the command
line and the resume being processed, so an exported file can be traced back to
the session that produced it. Context-specific wrappers live in
contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from dotenv import load_dotenv
from loguru import logger

from cvscriptly import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

LEVEL_COLORS = {
    "SUCCESS": "<green>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    resume_file: Optional[Union[str, Path]] = None,
    extra_provenance: dict = None,
    console: bool = True,
) -> Path:
    """
    Route loguru output to a session log file (DEBUG) and the console (INFO).

    Args:
        context_name: Context identifier ("render", "advise"), used as the file name
        log_dir: Directory for this session
        resume_file: Resume being processed, recorded in the provenance header
        extra_provenance: Additional key-value pairs for the provenance header
        console: Also echo INFO and above to stdout

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger(
            context_name="render",
            log_dir=Path("outs/logs/export_20251114_123456"),
            resume_file="data/resume.yaml",
            extra_provenance={"Formats": "PDF, DOCX"},
        )
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    if console:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    provenance = {}
    if resume_file is not None:
        provenance["Resume file"] = Path(resume_file).resolve()
    provenance.update(extra_provenance or {})
    log_provenance(context_name, provenance)

    return log_file


def format_list(values: Iterable) -> str:
    """Join values for a provenance line ('none' when empty)."""
    values = [str(value) for value in values]
    return ", ".join(values) if values else "none"


def log_provenance(context_name: str, extra_context: dict = None) -> None:
    """
    Write the session header: version, context, command line, then extra facts.

    Args:
        context_name: Context the session logs for
        extra_context: Additional key-value pairs (resume file, formats, theme, ...)
    """
    logger.info("=" * 80)
    logger.info(f"CVSCRIPTLY {__version__} [{context_name}]")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
