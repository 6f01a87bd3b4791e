"""
DOCX Renderer

Builds a flowing word-processing document from the shared layout plan with
python-docx. Pagination is left to the word processor.

Formatting lives in four named paragraph styles defined once from the resolved
styles (Resume Heading, Resume Section Title, Resume Subheading, Resume Body).
Paragraphs reference a style by name; explicit run formatting is only used where
differently styled runs share a line (title, detail and right-tabbed date). All
bullets reference one shared numbering definition.

python-docx is acquired lazily through a LibraryLoader, so rendering is async.
"""

import io

from cvscriptly.contexts.composing.resume_data_structure import ResumeData
from cvscriptly.contexts.composing.section_filtering import (
    SUMMARY_TITLE,
    BulletList,
    EntryBlock,
    ResumeLayout,
    SkillLine,
    build_layout,
)
from cvscriptly.contexts.composing.style_resolution import ResolvedStyling, resolve_styling
from cvscriptly.contexts.rendering.exceptions import LibraryUnavailableError
from cvscriptly.contexts.rendering.library_loader import LibraryFailed, LibraryLoader
from cvscriptly.contexts.rendering.logger import _log_debug

DOCX_LIBRARY = "python-docx"
DOCX_LIBRARY_SOURCES = ("docx",)

STYLE_HEADING = "Resume Heading"
STYLE_SECTION_TITLE = "Resume Section Title"
STYLE_SUBHEADING = "Resume Subheading"
STYLE_BODY = "Resume Body"

PAGE_WIDTH_IN = 8.5
PAGE_HEIGHT_IN = 11
MARGIN_IN = 0.75
CONTENT_WIDTH_IN = PAGE_WIDTH_IN - 2 * MARGIN_IN

# Bullet numbering, in twentieths of a point (0.25in left, 0.18in hanging)
BULLET_GLYPH = "•"
BULLET_LEFT_TWIPS = 360
BULLET_HANGING_TWIPS = 259

LINK_COLOR = "007BFF"
HYPERLINK_RELATIONSHIP = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"
)

_default_loader = LibraryLoader(DOCX_LIBRARY_SOURCES)


def _define_styles(document, styling: ResolvedStyling) -> None:
    """Add the four resume paragraph styles to the document."""
    from docx.enum.style import WD_STYLE_TYPE
    from docx.enum.text import WD_ALIGN_PARAGRAPH
    from docx.oxml import OxmlElement
    from docx.oxml.ns import qn
    from docx.shared import Pt, RGBColor

    definitions = [
        # name, resolved role, space before, space after (points), alignment
        (STYLE_HEADING, styling.heading, 0, 6, WD_ALIGN_PARAGRAPH.CENTER),
        (STYLE_SECTION_TITLE, styling.section_title, 12, 6, None),
        (STYLE_SUBHEADING, styling.subheading, 4, 3, None),
        (STYLE_BODY, styling.body, 0, 2, None),
    ]

    styles = document.styles
    for name, role, before, after, alignment in definitions:
        style = styles.add_style(name, WD_STYLE_TYPE.PARAGRAPH)
        style.base_style = styles["Normal"]
        style.quick_style = True

        if name == STYLE_SECTION_TITLE:
            # Bottom rule under section titles; added first to keep pPr child order
            border = OxmlElement("w:pBdr")
            bottom = OxmlElement("w:bottom")
            bottom.set(qn("w:val"), "single")
            bottom.set(qn("w:sz"), "6")
            bottom.set(qn("w:space"), "1")
            bottom.set(qn("w:color"), "auto")
            border.append(bottom)
            style.element.get_or_add_pPr().append(border)

        font = style.font
        font.name = role.family
        font.size = Pt(role.half_points / 2)
        font.bold = role.bold
        font.color.rgb = RGBColor.from_string(role.hex)

        paragraph_format = style.paragraph_format
        paragraph_format.space_before = Pt(before)
        paragraph_format.space_after = Pt(after)
        paragraph_format.line_spacing = styling.docx_line_spacing / 240
        if alignment is not None:
            paragraph_format.alignment = alignment
        if name in (STYLE_SECTION_TITLE, STYLE_SUBHEADING):
            paragraph_format.keep_with_next = True


def _add_bullet_numbering(document) -> int:
    """
    Register one bullet list definition and return its numbering id.

    Every bullet paragraph in the document references this id.
    """
    from docx.oxml import OxmlElement
    from docx.oxml.ns import qn

    numbering = document.part.numbering_part.element
    existing = [
        int(node.get(qn("w:abstractNumId"))) for node in numbering.findall(qn("w:abstractNum"))
    ]
    abstract_id = max(existing, default=-1) + 1

    def element(tag, **attrs):
        node = OxmlElement(tag)
        for key, value in attrs.items():
            node.set(qn(f"w:{key}"), str(value))
        return node

    abstract = element("w:abstractNum", abstractNumId=abstract_id)
    abstract.append(element("w:multiLevelType", val="singleLevel"))

    level = element("w:lvl", ilvl=0)
    level.append(element("w:start", val=1))
    level.append(element("w:numFmt", val="bullet"))
    level.append(element("w:lvlText", val=BULLET_GLYPH))
    level.append(element("w:lvlJc", val="left"))
    indent = element("w:pPr")
    indent.append(element("w:ind", left=BULLET_LEFT_TWIPS, hanging=BULLET_HANGING_TWIPS))
    level.append(indent)
    abstract.append(level)

    # abstractNum definitions must precede num instances
    first_num = numbering.find(qn("w:num"))
    if first_num is not None:
        first_num.addprevious(abstract)
    else:
        numbering.append(abstract)

    return numbering.add_num(abstract_id).numId


def _add_hyperlink(paragraph, text: str, url: str) -> None:
    """Append an external hyperlink run (blue, underlined) to a paragraph."""
    from docx.oxml import OxmlElement
    from docx.oxml.ns import qn

    r_id = paragraph.part.relate_to(url, HYPERLINK_RELATIONSHIP, is_external=True)

    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)

    new_run = OxmlElement("w:r")
    rPr = OxmlElement("w:rPr")
    bold = OxmlElement("w:b")
    bold.set(qn("w:val"), "0")
    rPr.append(bold)
    color = OxmlElement("w:color")
    color.set(qn("w:val"), LINK_COLOR)
    rPr.append(color)
    underline = OxmlElement("w:u")
    underline.set(qn("w:val"), "single")
    rPr.append(underline)
    new_run.append(rPr)

    text_node = OxmlElement("w:t")
    text_node.text = text
    new_run.append(text_node)
    hyperlink.append(new_run)
    paragraph._p.append(hyperlink)


class DocxResumeWriter:
    """Emits a ResumeLayout into a python-docx Document."""

    def __init__(self, document, styling: ResolvedStyling):
        self.document = document
        self.styling = styling
        _define_styles(document, styling)
        self.bullet_num_id = _add_bullet_numbering(document)

    def write_header(self, header) -> None:
        from docx.enum.text import WD_ALIGN_PARAGRAPH

        self.document.add_paragraph(header.name, style=STYLE_HEADING)
        if header.contacts:
            contact = self.document.add_paragraph(header.contact_line, style=STYLE_BODY)
            contact.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def write_bullet(self, text: str) -> None:
        paragraph = self.document.add_paragraph(text, style=STYLE_BODY)
        numPr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
        numPr.get_or_add_ilvl().val = 0
        numPr.get_or_add_numId().val = self.bullet_num_id

    def write_entry(self, entry: EntryBlock) -> None:
        from docx.enum.text import WD_TAB_ALIGNMENT
        from docx.shared import Inches

        paragraph = self.document.add_paragraph(style=STYLE_SUBHEADING)
        paragraph.add_run(entry.title)
        if entry.detail:
            paragraph.add_run(entry.detail).bold = False

        if entry.right_text:
            paragraph.paragraph_format.tab_stops.add_tab_stop(
                Inches(CONTENT_WIDTH_IN), WD_TAB_ALIGNMENT.RIGHT
            )
            if entry.link_text:
                paragraph.add_run("\t")
                _add_hyperlink(paragraph, entry.link_text, entry.link_href)
            else:
                paragraph.add_run(f"\t{entry.date_range}").bold = False

        for bullet in entry.bullets:
            self.write_bullet(bullet)

    def write_skill_line(self, skill: SkillLine) -> None:
        paragraph = self.document.add_paragraph(style=STYLE_BODY)
        if skill.label:
            paragraph.add_run(skill.label).bold = True
        paragraph.add_run(skill.text)

    def write(self, layout: ResumeLayout) -> None:
        self.write_header(layout.header)

        if layout.summary:
            self.document.add_paragraph(SUMMARY_TITLE, style=STYLE_SECTION_TITLE)
            self.document.add_paragraph(layout.summary, style=STYLE_BODY)

        for section in layout.sections:
            self.document.add_paragraph(section.title, style=STYLE_SECTION_TITLE)
            for item in section.items:
                if isinstance(item, EntryBlock):
                    self.write_entry(item)
                elif isinstance(item, SkillLine):
                    self.write_skill_line(item)
                elif isinstance(item, BulletList):
                    for bullet in item.bullets:
                        self.write_bullet(bullet)


def build_docx(resume: ResumeData, docx_module) -> bytes:
    """
    Render a resume snapshot with an already-acquired python-docx module.

    Args:
        resume: Snapshot to render (not modified)
        docx_module: The imported docx package

    Returns:
        Complete .docx bytes
    """
    from docx.shared import Inches

    document = docx_module.Document()

    section = document.sections[0]
    section.page_width = Inches(PAGE_WIDTH_IN)
    section.page_height = Inches(PAGE_HEIGHT_IN)
    section.top_margin = Inches(MARGIN_IN)
    section.bottom_margin = Inches(MARGIN_IN)
    section.left_margin = Inches(MARGIN_IN)
    section.right_margin = Inches(MARGIN_IN)

    name = resume.personal_details.name
    document.core_properties.title = f"{name}'s Resume"
    document.core_properties.author = name

    writer = DocxResumeWriter(document, resolve_styling(resume.styling))
    writer.write(build_layout(resume))

    buffer = io.BytesIO()
    document.save(buffer)
    _log_debug(f"DOCX built with {len(document.paragraphs)} paragraphs")
    return buffer.getvalue()


async def render_docx(resume: ResumeData, loader: LibraryLoader = None) -> bytes:
    """
    Acquire python-docx, then render a resume snapshot to .docx bytes.

    Args:
        resume: Snapshot to render
        loader: Library loader (defaults to the shared module-level loader)

    Returns:
        Complete .docx bytes

    Raises:
        LibraryUnavailableError: If python-docx cannot be acquired within the
            retry and timeout budget; no document is produced
    """
    result = await (loader or _default_loader).acquire()
    if isinstance(result, LibraryFailed):
        raise LibraryUnavailableError(DOCX_LIBRARY, result.reason, attempts=result.attempts)
    return build_docx(resume, result.module)
