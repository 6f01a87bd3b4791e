"""Integration tests for export orchestration."""

import asyncio
import importlib
import time

import pytest

from cvscriptly.contexts.rendering import (
    ExportFormat,
    ExportInProgressError,
    ExportResult,
    LibraryLoader,
    ResumeExporter,
    resume_filename,
)


def broken_import(name):
    raise ImportError(f"No module named '{name}'")


def slow_import(name):
    time.sleep(0.2)
    return importlib.import_module(name)


@pytest.mark.unit
def test_resume_filename():
    """Test filenames replace each whitespace character with an underscore."""
    assert resume_filename("Jane  Q Doe", "pdf") == "Jane__Q_Doe_Resume.pdf"
    assert resume_filename("John Doe", ExportFormat.DOCX) == "John_Doe_Resume.docx"
    assert resume_filename("John Doe", "tex") == "John_Doe_Resume.tex"


@pytest.mark.unit
def test_unknown_format_rejected():
    """Test an unsupported format is refused before any rendering."""
    with pytest.raises(ValueError):
        resume_filename("John Doe", "odt")


@pytest.mark.integration
def test_export_pdf(sample_resume):
    """Test a PDF export succeeds with a page count and derived filename."""
    result = asyncio.run(ResumeExporter().export(sample_resume, "pdf"))

    assert result.success
    assert result.error is None
    assert result.format_name == "PDF"
    assert result.filename == "John_Doe_Resume.pdf"
    assert result.content.startswith(b"%PDF")
    assert result.page_count >= 1


@pytest.mark.integration
def test_export_tex(sample_resume):
    """Test a LaTeX export carries the UTF-8 source."""
    result = asyncio.run(ResumeExporter().export(sample_resume, ExportFormat.TEX))

    assert result.success
    assert result.format_name == "LaTeX"
    assert result.page_count is None
    assert result.text.startswith(r"\documentclass")


@pytest.mark.integration
def test_export_docx_library_failure(sample_resume, tmp_path):
    """Test an unavailable python-docx yields a readable failure and no file."""
    loader = LibraryLoader(["docx"], attempts=2, base_delay=0, importer=broken_import)
    exporter = ResumeExporter(docx_loader=loader)

    result = asyncio.run(exporter.export_to_file(sample_resume, "docx", output_dir=tmp_path))

    assert not result.success
    assert result.error.startswith("Failed to generate the DOCX file.")
    assert "pip install python-docx" in result.error
    assert result.content == b""
    assert list(tmp_path.iterdir()) == []
    assert not exporter.is_pending(result.filename)


@pytest.mark.integration
def test_duplicate_export_rejected(sample_resume):
    """Test a second export of the same artifact is refused while the first is pending."""
    loader = LibraryLoader(["docx"], base_delay=0, importer=slow_import)
    exporter = ResumeExporter(docx_loader=loader)

    async def export_twice():
        return await asyncio.gather(
            exporter.export(sample_resume, "docx"),
            exporter.export(sample_resume, "docx"),
            return_exceptions=True,
        )

    first, second = asyncio.run(export_twice())

    assert isinstance(first, ExportResult) and first.success
    assert isinstance(second, ExportInProgressError)
    assert second.filename == "John_Doe_Resume.docx"
    assert not exporter.is_pending("John_Doe_Resume.docx")


@pytest.mark.integration
def test_different_formats_export_concurrently(sample_resume):
    """Test exports of different artifacts do not block each other."""
    exporter = ResumeExporter()

    async def export_both():
        return await asyncio.gather(
            exporter.export(sample_resume, "pdf"),
            exporter.export(sample_resume, "tex"),
        )

    pdf, tex = asyncio.run(export_both())
    assert pdf.success and tex.success


@pytest.mark.integration
def test_save_failed_result_raises(tmp_path):
    """Test saving a failed export is refused."""
    failed = ExportResult(success=False, format_name="PDF", filename="x.pdf", error="boom")

    with pytest.raises(ValueError):
        ResumeExporter.save(failed, tmp_path)
    assert not (tmp_path / "x.pdf").exists()


@pytest.mark.integration
def test_export_to_file(sample_resume, tmp_path):
    """Test a successful export is written under the output directory."""
    output_dir = tmp_path / "resumes"
    result = asyncio.run(ResumeExporter().export_to_file(sample_resume, "tex", output_dir))

    assert result.path == output_dir / "John_Doe_Resume.tex"
    assert result.path.read_text(encoding="utf-8") == result.text
