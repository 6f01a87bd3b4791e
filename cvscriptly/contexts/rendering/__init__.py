"""
Rendering Context

Responsibilities:
- Renders resume snapshots to PDF, DOCX and LaTeX source
- Renders the live HTML preview
- Acquires optional rendering libraries lazily, with bounded retries
- Orchestrates exports and names output files

Owns: Output artifacts, export orchestration, rendering library acquisition
Never: Decides which sections or entries are visible (composing does)
"""

from cvscriptly.contexts.rendering.docx_renderer import build_docx, render_docx
from cvscriptly.contexts.rendering.exceptions import (
    ExportInProgressError,
    LibraryUnavailableError,
    RenderingLibraryMissingError,
    ResumeRenderError,
    TemplateRenderError,
)
from cvscriptly.contexts.rendering.export import (
    ExportFormat,
    ExportResult,
    ResumeExporter,
    resume_filename,
)
from cvscriptly.contexts.rendering.latex_renderer import escape_latex, render_latex, unescape_latex
from cvscriptly.contexts.rendering.library_loader import LibraryFailed, LibraryLoader, LibraryReady
from cvscriptly.contexts.rendering.pdf_renderer import render_pdf
from cvscriptly.contexts.rendering.preview_renderer import LivePreview, render_preview

__all__ = [
    # Renderers
    "render_pdf",
    "render_docx",
    "build_docx",
    "render_latex",
    "render_preview",
    "LivePreview",
    # LaTeX escaping
    "escape_latex",
    "unescape_latex",
    # Library acquisition
    "LibraryLoader",
    "LibraryReady",
    "LibraryFailed",
    # Export orchestration
    "ExportFormat",
    "ExportResult",
    "ResumeExporter",
    "resume_filename",
    # Errors
    "ResumeRenderError",
    "RenderingLibraryMissingError",
    "LibraryUnavailableError",
    "ExportInProgressError",
    "TemplateRenderError",
]
