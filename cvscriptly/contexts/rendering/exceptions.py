"""Custom exceptions for the rendering context."""

from pathlib import Path
from typing import Optional


class ResumeRenderError(Exception):
    """
    Base class for failures while producing an output artifact.

    Attributes:
        message: Error description
        format_name: Output format being produced ('PDF', 'DOCX', 'LaTeX', ...)
    """

    def __init__(self, message: str, format_name: Optional[str] = None):
        self.message = message
        self.format_name = format_name
        super().__init__(message)


class RenderingLibraryMissingError(ResumeRenderError):
    """
    Exception raised when a rendering library cannot be imported at all.

    Raised before any output is produced; there is no degraded fallback.

    Attributes:
        library: Distribution name (e.g., 'reportlab')
    """

    def __init__(self, library: str, format_name: str, original_error: Optional[Exception] = None):
        self.library = library
        self.original_error = original_error

        parts = [
            f"The {format_name} renderer requires the '{library}' package, which is not installed.",
            f"Install it with: pip install {library}",
        ]
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__(" ".join(parts), format_name=format_name)


class LibraryUnavailableError(ResumeRenderError):
    """
    Exception raised when lazy library acquisition gives up.

    Attributes:
        library: Distribution name (e.g., 'python-docx')
        reason: What the last attempt reported
        attempts: Number of attempts made
    """

    def __init__(self, library: str, reason: str, attempts: int = 0, format_name: str = "DOCX"):
        self.library = library
        self.reason = reason
        self.attempts = attempts

        message = (
            f"The {format_name} library ({library}) is unavailable after {attempts} attempt(s): "
            f"{reason}. Likely causes: the package is not installed in this environment, or "
            f"importing it timed out or was blocked. Install it with: pip install {library}, "
            f"then retry the export."
        )
        super().__init__(message, format_name=format_name)


class ExportInProgressError(ResumeRenderError):
    """Exception raised when an export of the same artifact is already pending."""

    def __init__(self, format_name: str, filename: str):
        self.filename = filename
        super().__init__(
            f"An export of {filename} is already in progress. Wait for it to finish.",
            format_name=format_name,
        )


class TemplateRenderError(ResumeRenderError):
    """
    Exception raised when template rendering fails.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.template_name = template_name
        self.template_path = template_path
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if template_name and template_path:
            parts.append(f"\nTemplate: {template_path}")
            parts.append(f"Name: {template_name}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))
        self.message = message
