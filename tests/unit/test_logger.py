"""Unit tests for session logger setup and provenance headers."""

import sys

import pytest
from loguru import logger

from cvscriptly import __version__
from cvscriptly.contexts.advising.logger import setup_advising_logger
from cvscriptly.contexts.rendering.logger import _log_info, setup_rendering_logger
from cvscriptly.utils.logger import format_list


@pytest.fixture(autouse=True)
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


def read_log(log_file):
    # Removing the sinks closes the file so everything is flushed
    logger.remove()
    return log_file.read_text(encoding="utf-8")


@pytest.mark.unit
def test_rendering_session_header(tmp_path):
    """Test the export log records version, resume file, formats and theme."""
    resume_file = tmp_path / "resume.yaml"
    log_file = setup_rendering_logger(
        tmp_path / "logs",
        resume_file=resume_file,
        formats=["PDF", "DOCX"],
        theme="Classic Serif",
        console=False,
    )
    _log_info("Starting PDF export: John Doe")

    assert log_file == tmp_path / "logs" / "render.log"
    text = read_log(log_file)
    assert f"CVSCRIPTLY {__version__} [render]" in text
    assert f"Resume file: {resume_file.resolve()}" in text
    assert "Formats: PDF, DOCX" in text
    assert "Theme: Classic Serif" in text
    assert "[render] Starting PDF export: John Doe" in text


@pytest.mark.unit
def test_rendering_header_defaults(tmp_path):
    """Test an export without a theme or formats says so."""
    text = read_log(setup_rendering_logger(tmp_path, console=False))

    assert "Formats: none" in text
    assert "Theme: as saved" in text
    assert "Resume file" not in text


@pytest.mark.unit
def test_advising_session_header(tmp_path, monkeypatch):
    """Test the advising log records the task and configured provider."""
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    log_file = setup_advising_logger(
        tmp_path, resume_file="resume.yaml", task="analysis", console=False
    )

    text = read_log(log_file)
    assert log_file.name == "advise.log"
    assert "Task: analysis" in text
    assert "LLM provider: anthropic" in text


@pytest.mark.unit
def test_format_list():
    """Test provenance lists join with commas and mark empties."""
    assert format_list(["PDF", "LaTeX"]) == "PDF, LaTeX"
    assert format_list([]) == "none"
