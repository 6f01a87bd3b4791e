"""
Resume Export

Orchestrates one export: picks the renderer for the requested format, guards
against a duplicate export of the same artifact while one is pending, and turns
any renderer failure into an ExportResult carrying a readable message. Nothing
is written to disk unless rendering succeeded.
"""

import dataclasses
import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Set, Union

from dotenv import load_dotenv

from cvscriptly.contexts.composing.resume_data_structure import ResumeData
from cvscriptly.contexts.rendering.docx_renderer import render_docx
from cvscriptly.contexts.rendering.exceptions import ExportInProgressError
from cvscriptly.contexts.rendering.latex_renderer import render_latex
from cvscriptly.contexts.rendering.library_loader import LibraryLoader
from cvscriptly.contexts.rendering.logger import (
    _log_info,
    log_export_result,
    log_export_start,
)
from cvscriptly.contexts.rendering.pdf_renderer import render_pdf
from cvscriptly.utils.pdf_processing import page_count
from cvscriptly.utils.text_processing import replace_whitespace

load_dotenv()
OUTPUT_PATH = Path(os.getenv("CVSCRIPTLY_OUTPUT_PATH", "outs/resumes"))


class ExportFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TEX = "tex"

    @property
    def label(self) -> str:
        """Human-readable format name used in messages."""
        return {"pdf": "PDF", "docx": "DOCX", "tex": "LaTeX"}[self.value]

    @property
    def extension(self) -> str:
        return self.value


def resume_filename(name: str, export_format: Union[ExportFormat, str]) -> str:
    """
    Derive the download filename from the person's name.

    Example:
        >>> resume_filename("Jane  Q Doe", "pdf")
        'Jane__Q_Doe_Resume.pdf'
    """
    return f"{replace_whitespace(name, '_')}_Resume.{ExportFormat(export_format).extension}"


@dataclass
class ExportResult:
    """
    Result of one export.

    Attributes:
        success: Whether rendering produced an artifact
        format_name: 'PDF', 'DOCX' or 'LaTeX'
        filename: Download filename (<Name>_Resume.<ext>)
        content: Artifact bytes (empty on failure)
        error: User-facing message on failure
        page_count: Pages in the PDF (PDF exports only)
        path: Where the artifact was saved, once saved
    """

    success: bool
    format_name: str
    filename: str
    content: bytes = b""
    error: Optional[str] = None
    page_count: Optional[int] = None
    path: Optional[Path] = None

    @property
    def text(self) -> str:
        """Content decoded as UTF-8 (LaTeX exports)."""
        return self.content.decode("utf-8")


class ResumeExporter:
    """
    Exports resume snapshots, one pending export per artifact.

    Args:
        docx_loader: Library loader for python-docx (defaults to the shared loader)

    Example:
        >>> exporter = ResumeExporter()
        >>> result = asyncio.run(exporter.export(resume, "pdf"))
        >>> result.filename
        'John_Doe_Resume.pdf'
    """

    def __init__(self, docx_loader: LibraryLoader = None):
        self.docx_loader = docx_loader
        self._pending: Set[str] = set()

    def is_pending(self, filename: str) -> bool:
        return filename in self._pending

    async def _render(self, resume: ResumeData, export_format: ExportFormat) -> bytes:
        if export_format is ExportFormat.PDF:
            return render_pdf(resume)
        if export_format is ExportFormat.DOCX:
            return await render_docx(resume, loader=self.docx_loader)
        return render_latex(resume).encode("utf-8")

    async def export(
        self, resume: ResumeData, export_format: Union[ExportFormat, str]
    ) -> ExportResult:
        """
        Render one artifact.

        Args:
            resume: Snapshot to export
            export_format: 'pdf', 'docx' or 'tex'

        Returns:
            ExportResult; on failure success is False and error reads
            "Failed to generate the <FORMAT> file. <cause>"

        Raises:
            ExportInProgressError: If the same artifact is already being exported
        """
        export_format = ExportFormat(export_format)
        filename = resume_filename(resume.personal_details.name, export_format)

        if filename in self._pending:
            raise ExportInProgressError(export_format.label, filename)

        self._pending.add(filename)
        log_export_start(resume.personal_details.name, export_format.label, filename)
        start_time = time.time()

        try:
            content = await self._render(resume, export_format)
        except Exception as e:
            result = ExportResult(
                success=False,
                format_name=export_format.label,
                filename=filename,
                error=f"Failed to generate the {export_format.label} file. {e}",
            )
        else:
            result = ExportResult(
                success=True,
                format_name=export_format.label,
                filename=filename,
                content=content,
                page_count=page_count(content) if export_format is ExportFormat.PDF else None,
            )
        finally:
            self._pending.discard(filename)

        log_export_result(result, time.time() - start_time)
        return result

    @staticmethod
    def save(result: ExportResult, output_dir: Path = OUTPUT_PATH) -> ExportResult:
        """
        Write a successful result to output_dir/filename.

        Returns:
            The result with path set

        Raises:
            ValueError: If the export failed (no partial file is written)
        """
        if not result.success:
            raise ValueError(f"Nothing to save for a failed export: {result.error}")

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / result.filename
        path.write_bytes(result.content)
        _log_info(f"Saved {path}")
        return dataclasses.replace(result, path=path)

    async def export_to_file(
        self,
        resume: ResumeData,
        export_format: Union[ExportFormat, str],
        output_dir: Path = OUTPUT_PATH,
    ) -> ExportResult:
        """Export and, when successful, save to output_dir."""
        result = await self.export(resume, export_format)
        return self.save(result, output_dir) if result.success else result
