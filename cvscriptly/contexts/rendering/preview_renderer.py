"""
Live Preview Renderer

Renders the shared layout plan as one continuous HTML document with inline
styles taken from the same resolved styles the exporters use. There is no
pagination and no LaTeX escaping; Jinja2 HTML autoescaping protects the markup.

LivePreview wraps the renderer for interactive use: update() is called on every
edit and reuses the previous output when the snapshot is unchanged.
"""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from cvscriptly.contexts.composing.resume_data_structure import ResumeData
from cvscriptly.contexts.composing.section_filtering import (
    SUMMARY_TITLE,
    EntryBlock,
    SkillLine,
    build_layout,
)
from cvscriptly.contexts.composing.style_resolution import (
    FONT_FAMILIES,
    ResolvedFontStyle,
    resolve_styling,
)
from cvscriptly.contexts.rendering.exceptions import TemplateRenderError
from cvscriptly.contexts.rendering.logger import _log_debug

PREVIEW_TEMPLATE_PATH = Path(__file__).parent / "template" / "preview"
PREVIEW_TEMPLATE = "resume.html.jinja"


def _generic_family(role: ResolvedFontStyle) -> str:
    return "serif" if FONT_FAMILIES[role.family].pdf_bucket == "serif" else "sans-serif"


def _item_kind(item) -> str:
    if isinstance(item, EntryBlock):
        return "entry"
    if isinstance(item, SkillLine):
        return "skill"
    return "bullets"


class PreviewRenderer:
    """Renders ResumeData snapshots to HTML."""

    def __init__(self, template_path: Path = PREVIEW_TEMPLATE_PATH):
        self.template_path = Path(template_path)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_path)),
            undefined=StrictUndefined,
            autoescape=select_autoescape(["html", "jinja"]),
        )
        self.env.filters["num"] = lambda value: f"{float(value):g}"
        self.env.globals["generic_family"] = _generic_family
        self.env.globals["item_kind"] = _item_kind

    def render(self, resume: ResumeData) -> str:
        """
        Render a snapshot to an HTML fragment.

        Raises:
            TemplateRenderError: If the preview template fails to render
        """
        try:
            template = self.env.get_template(PREVIEW_TEMPLATE)
            return template.render(
                layout=build_layout(resume),
                styling=resolve_styling(resume.styling),
                summary_title=SUMMARY_TITLE,
            )
        except TemplateError as e:
            raise TemplateRenderError(
                "Failed to render live preview",
                template_name=PREVIEW_TEMPLATE,
                template_path=self.template_path / PREVIEW_TEMPLATE,
                original_error=e,
            ) from e


def render_preview(resume: ResumeData) -> str:
    """Render a snapshot to preview HTML."""
    return PreviewRenderer().render(resume)


class LivePreview:
    """
    Synchronous preview that re-renders on each change.

    Example:
        >>> preview = LivePreview()
        >>> html = preview.update(resume)
        >>> preview.update(resume.replace(summary=resume.summary)) is html
        True
    """

    def __init__(self, renderer: PreviewRenderer = None):
        self.renderer = renderer or PreviewRenderer()
        self.render_count = 0
        self._resume: Optional[ResumeData] = None
        self._html: Optional[str] = None

    @property
    def html(self) -> Optional[str]:
        """Most recent preview output (None before the first update)."""
        return self._html

    def update(self, resume: ResumeData) -> str:
        """Render the snapshot, reusing the last output for a value-equal snapshot."""
        if self._html is not None and resume == self._resume:
            return self._html

        self._html = self.renderer.render(resume)
        self._resume = resume
        self.render_count += 1
        _log_debug(f"Preview re-rendered ({self.render_count})")
        return self._html
