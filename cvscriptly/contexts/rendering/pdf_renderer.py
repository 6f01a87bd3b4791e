"""
PDF Renderer

Draws the shared layout plan onto Letter pages with reportlab's canvas, placing
every line at absolute coordinates. Pagination is driven by a LayoutCursor: each
block reserves its height first and a new page starts when it would pass the
bottom margin.

Only the two built-in PDF families are used (Helvetica and Times), chosen by the
serif/sans bucket of each role's resolved family.
"""

import io
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from cvscriptly.contexts.composing.resume_data_structure import ResumeData
from cvscriptly.contexts.composing.section_filtering import (
    SUMMARY_TITLE,
    BulletList,
    EntryBlock,
    HeaderBlock,
    ResumeLayout,
    SectionItem,
    SkillLine,
    build_layout,
)
from cvscriptly.contexts.composing.style_resolution import (
    ResolvedFontStyle,
    ResolvedStyling,
    resolve_styling,
)
from cvscriptly.contexts.rendering.exceptions import RenderingLibraryMissingError
from cvscriptly.contexts.rendering.logger import _log_debug
from cvscriptly.contexts.rendering.pdf_layout import (
    LayoutCursor,
    PageGeometry,
    Run,
    line_advance,
    runs_width,
    wrap_runs,
    wrap_text,
)

SECTION_SPACING = 16
HEADING_SPACING = 4
SUBHEADING_SPACING = 2
LIST_ITEM_SPACING = 2
LIST_INDENT = 20
BULLET_INDENT = 6
BULLET = "•"
COLUMN_GAP = 12
RULE_WIDTH = 0.75

# Contact line and project links are drawn slightly smaller than body text
SMALL_TEXT_SCALE = 0.9
LINK_COLOR = (0, 123, 255)


@dataclass
class EntryHeading:
    """
    Measured heading of one entry, before drawing.

    Attributes:
        left_lines: Wrapped title and detail lines
        right_text: Date or link text ('' when absent)
        right_style: (font, size, rgb) of the right column
        right_width: Width of right_text in points
        same_line: Whether right_text fits beside the first left line
        height: Vertical space of the heading, including a date moved below it
    """

    left_lines: List[List[Run]]
    right_text: str
    right_style: Tuple[str, float, Tuple[int, int, int]]
    right_width: float
    same_line: bool
    height: float


def _load_reportlab():
    """Import reportlab pieces, failing before any drawing starts."""
    try:
        from reportlab.lib.pagesizes import LETTER
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfgen import canvas
    except ImportError as e:
        raise RenderingLibraryMissingError("reportlab", "PDF", original_error=e) from e
    return LETTER, pdfmetrics, canvas


class PdfResumeWriter:
    """
    Emits a ResumeLayout onto a reportlab canvas.

    Args:
        pdf: reportlab Canvas
        string_width: Width function (text, font name, size) -> points
        styling: Resolved styles for the four roles
        geometry: Page geometry matching the canvas page size
    """

    def __init__(
        self,
        pdf,
        string_width: Callable[[str, str, float], float],
        styling: ResolvedStyling,
        geometry: PageGeometry,
    ):
        self.pdf = pdf
        self.string_width = string_width
        self.styling = styling
        self.geometry = geometry
        self.cursor = LayoutCursor(geometry, on_new_page=self._start_page)
        self._rgb = (0, 0, 0)

    # --- Primitives ---

    def _advance_for(self, size: float) -> float:
        return line_advance(size, self.styling.line_height)

    def _measure(self, size: float):
        return lambda text, font: self.string_width(text, font, size)

    def _baseline(self, size: float) -> float:
        """PDF y coordinate of a line whose top sits at the cursor."""
        return self.geometry.height - self.cursor.y - size

    def _start_page(self) -> None:
        # showPage resets the graphics state
        self.pdf.showPage()
        self._fill(self._rgb)

    def _fill(self, rgb: Tuple[int, int, int]) -> None:
        self._rgb = rgb
        self.pdf.setFillColorRGB(*(channel / 255 for channel in rgb))

    def _draw_runs(self, runs: Sequence[Run], x: float, size: float) -> None:
        baseline = self._baseline(size)
        for text, font in runs:
            self.pdf.setFont(font, size)
            self.pdf.drawString(x, baseline, text)
            x += self.string_width(text, font, size)

    def _lines(self, runs: Sequence[Run], size: float, x: float, max_width: float) -> None:
        """Wrap runs and draw them one line at a time, breaking pages as needed."""
        advance = self._advance_for(size)
        for line in wrap_runs(runs, max_width, self._measure(size)):
            self.cursor.reserve(advance)
            self._draw_runs(line, x, size)
            self.cursor.advance(advance)

    def _centered(self, text: str, font: str, size: float) -> None:
        advance = self._advance_for(size)
        measure = self._measure(size)
        for line in wrap_text(text, self.geometry.content_width, lambda t: measure(t, font)):
            self.cursor.reserve(advance)
            self.pdf.setFont(font, size)
            self.pdf.drawCentredString(self.geometry.width / 2, self._baseline(size), line)
            self.cursor.advance(advance)

    # --- Blocks ---

    def write_header(self, header: HeaderBlock) -> None:
        heading = self.styling.heading
        self._fill(heading.rgb)
        self._centered(header.name, heading.pdf_font, heading.size)

        if header.contacts:
            body = self.styling.body
            self.cursor.advance(HEADING_SPACING)
            self._fill(body.rgb)
            self._centered(header.contact_line, body.pdf_regular, body.size * SMALL_TEXT_SCALE)

    def write_section_title(self, title: str, lead_height: float = 0) -> None:
        """
        Draw a ruled section title.

        Args:
            title: Section title
            lead_height: Height of the first content that must share the title's page
        """
        style = self.styling.section_title
        advance = self._advance_for(style.size)

        if not self.cursor.at_page_top:
            self.cursor.advance(SECTION_SPACING)
        self.cursor.reserve(advance + HEADING_SPACING + lead_height)

        baseline = self._baseline(style.size)
        self._fill(style.rgb)
        self.pdf.setFont(style.pdf_font, style.size)
        self.pdf.drawString(self.geometry.left, baseline, title)

        rule_y = baseline - HEADING_SPACING
        self.pdf.setStrokeColorRGB(*(channel / 255 for channel in style.rgb))
        self.pdf.setLineWidth(RULE_WIDTH)
        self.pdf.line(self.geometry.left, rule_y, self.geometry.right, rule_y)

        self.cursor.advance(advance + HEADING_SPACING)

    def write_paragraph(self, text: str) -> None:
        body = self.styling.body
        self._fill(body.rgb)
        self._lines(
            [(text, body.pdf_regular)], body.size, self.geometry.left, self.geometry.content_width
        )

    def measure_entry_heading(self, entry: EntryBlock) -> EntryHeading:
        sub = self.styling.subheading
        content_width = self.geometry.content_width

        left: List[Run] = [(entry.title, sub.pdf_font)]
        if entry.detail:
            left.append((entry.detail, sub.pdf_regular))
        left_lines = wrap_runs(left, content_width, self._measure(sub.size))

        right_text = entry.right_text
        right_style = self._right_column_style(entry, self.styling.body)
        right_font, right_size, _ = right_style
        right_width = self.string_width(right_text, right_font, right_size) if right_text else 0

        same_line = bool(
            right_text
            and len(left_lines) == 1
            and runs_width(left_lines[0], self._measure(sub.size)) + COLUMN_GAP + right_width
            <= content_width
        )

        height = self._advance_for(sub.size) * len(left_lines)
        if right_text and not same_line:
            height += self._advance_for(right_size)

        return EntryHeading(left_lines, right_text, right_style, right_width, same_line, height)

    def entry_lead_height(self, entry: EntryBlock, heading: EntryHeading) -> float:
        """Heading plus the first bullet line."""
        if not entry.bullets:
            return heading.height
        return heading.height + SUBHEADING_SPACING + self._advance_for(self.styling.body.size)

    def lead_height(self, item: Optional[SectionItem]) -> float:
        """Height of the part of an item that must follow a section title on its page."""
        if item is None or (isinstance(item, BulletList) and not item.bullets):
            return 0
        if isinstance(item, EntryBlock):
            return self.entry_lead_height(item, self.measure_entry_heading(item))
        return self._advance_for(self.styling.body.size)

    def write_entry(self, entry: EntryBlock) -> None:
        sub = self.styling.subheading
        advance = self._advance_for(sub.size)
        heading = self.measure_entry_heading(entry)
        right_size = heading.right_style[1]

        self.cursor.reserve(self.entry_lead_height(entry, heading))

        for index, line in enumerate(heading.left_lines):
            self.cursor.reserve(advance)
            self._fill(sub.rgb)
            self._draw_runs(line, self.geometry.left, sub.size)
            if heading.same_line and index == 0:
                self._draw_right(
                    entry, heading.right_text, heading.right_style, heading.right_width, sub.size
                )
            self.cursor.advance(advance)

        if heading.right_text and not heading.same_line:
            right_advance = self._advance_for(right_size)
            self.cursor.reserve(right_advance)
            self._draw_right(
                entry, heading.right_text, heading.right_style, heading.right_width, right_size
            )
            self.cursor.advance(right_advance)

        self.cursor.advance(SUBHEADING_SPACING)
        for bullet in entry.bullets:
            self.write_bullet(bullet)
        self.cursor.advance(HEADING_SPACING)

    def _right_column_style(self, entry: EntryBlock, body: ResolvedFontStyle):
        if entry.link_text:
            return body.pdf_regular, body.size * SMALL_TEXT_SCALE, LINK_COLOR
        return body.pdf_regular, body.size, body.rgb

    def _draw_right(self, entry: EntryBlock, text: str, style, width: float, line_size: float):
        """Right-align text on the current line; project URLs become clickable."""
        font, size, rgb = style
        baseline = self._baseline(line_size)
        x = self.geometry.right - width

        self._fill(rgb)
        self.pdf.setFont(font, size)
        self.pdf.drawString(x, baseline, text)

        if entry.link_href:
            self.pdf.linkURL(
                entry.link_href, (x, baseline - 2, self.geometry.right, baseline + size), relative=0
            )

    def write_bullet(self, text: str) -> None:
        body = self.styling.body
        advance = self._advance_for(body.size)
        measure = self._measure(body.size)
        text_x = self.geometry.left + LIST_INDENT
        max_width = self.geometry.content_width - LIST_INDENT

        self._fill(body.rgb)
        lines = wrap_text(text, max_width, lambda t: measure(t, body.pdf_regular))
        for index, line in enumerate(lines):
            self.cursor.reserve(advance)
            baseline = self._baseline(body.size)
            self.pdf.setFont(body.pdf_regular, body.size)
            if index == 0:
                self.pdf.drawString(self.geometry.left + BULLET_INDENT, baseline, BULLET)
            # Continuation lines align under the text, not the bullet
            self.pdf.drawString(text_x, baseline, line)
            self.cursor.advance(advance)
        self.cursor.advance(LIST_ITEM_SPACING)

    def write_skill_line(self, skill: SkillLine) -> None:
        body = self.styling.body
        runs: List[Run] = []
        if skill.label:
            runs.append((skill.label, body.pdf_bold))
        runs.append((skill.text, body.pdf_regular))

        self._fill(body.rgb)
        self._lines(runs, body.size, self.geometry.left, self.geometry.content_width)
        self.cursor.advance(LIST_ITEM_SPACING)

    def write(self, layout: ResumeLayout) -> None:
        self.write_header(layout.header)

        if layout.summary:
            self.write_section_title(SUMMARY_TITLE, self._advance_for(self.styling.body.size))
            self.write_paragraph(layout.summary)

        for section in layout.sections:
            first_item = section.items[0] if section.items else None
            self.write_section_title(section.title, self.lead_height(first_item))
            for item in section.items:
                if isinstance(item, EntryBlock):
                    self.write_entry(item)
                elif isinstance(item, SkillLine):
                    self.write_skill_line(item)
                elif isinstance(item, BulletList):
                    for bullet in item.bullets:
                        self.write_bullet(bullet)


def render_pdf(resume: ResumeData) -> bytes:
    """
    Render a resume snapshot to PDF bytes.

    Args:
        resume: Snapshot to render (not modified)

    Returns:
        Complete PDF document bytes

    Raises:
        RenderingLibraryMissingError: If reportlab is not installed
    """
    letter, pdfmetrics, canvas = _load_reportlab()

    name = resume.personal_details.name
    geometry = PageGeometry(width=letter[0], height=letter[1])
    buffer = io.BytesIO()

    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.setTitle(f"{name}'s Resume")
    pdf.setAuthor(name)
    pdf.setCreator("CVSCRIPTLY")

    writer = PdfResumeWriter(pdf, pdfmetrics.stringWidth, resolve_styling(resume.styling), geometry)
    writer.write(build_layout(resume))
    pdf.save()

    _log_debug(f"PDF drawn on {writer.cursor.page_number} page(s)")
    return buffer.getvalue()
