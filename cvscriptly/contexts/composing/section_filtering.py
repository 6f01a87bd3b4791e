"""
Section Ordering & Filtering

Decides which sections and entries of a ResumeData snapshot are emitted, in what
order, and with which sub-lines. The result is a ResumeLayout: a renderer-neutral
plan that the PDF, DOCX, LaTeX and preview renderers all walk. No renderer
applies visibility rules of its own, so the four outputs always agree on which
sections exist and in what order.

Rules:
- The header always renders (name is required)
- Summary renders first when non-blank
- A section renders only if at least one entry has a non-blank primary field
  (role, university, name, title; a non-blank skill for skill groups)
- Entries with a blank primary field are skipped entirely
- Sub-field lists drop blank strings; an empty result omits the line
- Each titled custom section becomes its own section at the position of
  'customSections' in section_order
- Dates are "start – end", the single present one, or omitted. Nothing like
  "Present" is ever filled in.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from cvscriptly.contexts.composing.resume_data_structure import (
    CustomSection,
    Education,
    Experience,
    PersonalDetails,
    Project,
    ResumeData,
    SkillGroup,
)
from cvscriptly.utils.text_processing import clean_items, clean_text, ensure_url_scheme, is_blank

SECTION_TITLES: Dict[str, str] = {
    "experience": "Experience",
    "education": "Education",
    "projects": "Projects",
    "skills": "Skills",
}
SUMMARY_TITLE = "Summary"

DATE_SEPARATOR = " – "
LOCATION_SEPARATOR = " — "
CONTACT_SEPARATOR = " | "


# --- Layout blocks ---


@dataclass(frozen=True)
class ContactItem:
    """One header contact field. href is None for plain text (location)."""

    kind: str
    text: str
    href: Optional[str] = None


@dataclass(frozen=True)
class HeaderBlock:
    name: str
    contacts: Tuple[ContactItem, ...] = ()

    @property
    def contact_line(self) -> str:
        return CONTACT_SEPARATOR.join(item.text for item in self.contacts)


@dataclass(frozen=True)
class EntryBlock:
    """
    A two-column entry: bold title plus detail on the left, date or link on the right,
    followed by bullet lines.

    Attributes:
        kind: Section key the entry came from
        title: Primary field (role, university, project name)
        detail: Text following the title on the same line (", Company — Location")
        date_range: Right-column date text ('' when no dates)
        link_text: Right-column link text (projects), shown verbatim
        link_href: Absolute URL for link_text
        bullets: Non-blank bullet lines
    """

    kind: str
    title: str
    detail: str = ""
    date_range: str = ""
    link_text: str = ""
    link_href: str = ""
    bullets: Tuple[str, ...] = ()

    @property
    def heading(self) -> str:
        return f"{self.title}{self.detail}"

    @property
    def right_text(self) -> str:
        return self.link_text or self.date_range


@dataclass(frozen=True)
class SkillLine:
    """'Category: a, b, c' with the category label bold."""

    category: str
    skills: Tuple[str, ...]

    @property
    def label(self) -> str:
        return f"{self.category}: " if self.category else ""

    @property
    def text(self) -> str:
        return ", ".join(self.skills)


@dataclass(frozen=True)
class BulletList:
    bullets: Tuple[str, ...]


SectionItem = Union[EntryBlock, SkillLine, BulletList]


@dataclass(frozen=True)
class SectionBlock:
    key: str
    title: str
    items: Tuple[SectionItem, ...]


@dataclass(frozen=True)
class ResumeLayout:
    """Renderer-neutral plan of everything that will be emitted, in order."""

    header: HeaderBlock
    summary: str
    sections: Tuple[SectionBlock, ...]

    @property
    def section_titles(self) -> Tuple[str, ...]:
        """Emitted section titles in order, Summary included when present."""
        titles = tuple(section.title for section in self.sections)
        return ((SUMMARY_TITLE,) + titles) if self.summary else titles


# --- Predicates ---


def format_date_range(start: str, end: str) -> str:
    """
    Join start and end dates, omitting whichever is blank.

    Example:
        >>> format_date_range("June 2005", "Aug 2007")
        'June 2005 – Aug 2007'
        >>> format_date_range("June 2005", "")
        'June 2005'
    """
    parts = [clean_text(start), clean_text(end)]
    return DATE_SEPARATOR.join(part for part in parts if part)


def _primary_field(entry) -> str:
    if isinstance(entry, Experience):
        return entry.role
    if isinstance(entry, Education):
        return entry.university
    if isinstance(entry, Project):
        return entry.name
    if isinstance(entry, CustomSection):
        return entry.title
    raise TypeError(f"No primary field for {type(entry).__name__}")


def is_entry_visible(entry) -> bool:
    """True when the entry has content enough to render."""
    if isinstance(entry, SkillGroup):
        return bool(clean_items(entry.skills))
    return not is_blank(_primary_field(entry))


def visible_entries(resume: ResumeData, section_key: str) -> tuple:
    """Entries of a section that will be rendered, in insertion order."""
    return tuple(entry for entry in resume.collection(section_key) if is_entry_visible(entry))


def is_section_visible(resume: ResumeData, section_key: str) -> bool:
    return bool(visible_entries(resume, section_key))


# --- Block builders ---


def build_header(details: PersonalDetails) -> HeaderBlock:
    """Header block with non-blank contact fields in display order."""
    contacts = []
    location = clean_text(details.location)
    if location:
        contacts.append(ContactItem("location", location))
    email = clean_text(details.email)
    if email:
        contacts.append(ContactItem("email", email, f"mailto:{email}"))
    phone = clean_text(details.phone)
    if phone:
        contacts.append(ContactItem("phone", phone, f"tel:{''.join(phone.split())}"))
    for kind in ("website", "linkedin", "github"):
        value = clean_text(getattr(details, kind))
        if value:
            contacts.append(ContactItem(kind, value, ensure_url_scheme(value)))
    return HeaderBlock(name=clean_text(details.name), contacts=tuple(contacts))


def _experience_block(entry: Experience) -> EntryBlock:
    detail = ""
    company = clean_text(entry.company)
    location = clean_text(entry.location)
    if company:
        detail += f", {company}"
    if location:
        detail += f"{LOCATION_SEPARATOR}{location}"
    return EntryBlock(
        kind="experience",
        title=clean_text(entry.role),
        detail=detail,
        date_range=format_date_range(entry.start_date, entry.end_date),
        bullets=clean_items(entry.highlights),
    )


def _education_block(entry: Education) -> EntryBlock:
    bullets = []
    gpa = clean_text(entry.gpa)
    if gpa:
        bullets.append(f"GPA: {gpa}")
    coursework = clean_items(entry.coursework)
    if coursework:
        bullets.append(f"Coursework: {', '.join(coursework)}")
    degree = clean_text(entry.degree)
    return EntryBlock(
        kind="education",
        title=clean_text(entry.university),
        detail=f", {degree}" if degree else "",
        date_range=format_date_range(entry.start_date, entry.end_date),
        bullets=tuple(bullets),
    )


def _project_block(entry: Project) -> EntryBlock:
    bullets = []
    description = clean_text(entry.description)
    if description:
        bullets.append(description)
    tools = clean_items(entry.tools)
    if tools:
        bullets.append(f"Tools Used: {', '.join(tools)}")
    url = clean_text(entry.url)
    return EntryBlock(
        kind="projects",
        title=clean_text(entry.name),
        link_text=url,
        link_href=ensure_url_scheme(url),
        bullets=tuple(bullets),
    )


def _skill_line(entry: SkillGroup) -> SkillLine:
    return SkillLine(category=clean_text(entry.category), skills=clean_items(entry.skills))


_ITEM_BUILDERS: Dict[str, Callable] = {
    "experience": _experience_block,
    "education": _education_block,
    "projects": _project_block,
    "skills": _skill_line,
}


def build_sections(resume: ResumeData, section_key: str) -> Tuple[SectionBlock, ...]:
    """
    Section blocks emitted for one section key (empty when nothing is visible).

    customSections may yield several blocks, one per titled custom section.
    """
    entries = visible_entries(resume, section_key)
    if not entries:
        return ()

    if section_key == "customSections":
        return tuple(
            SectionBlock(
                key=section_key,
                title=clean_text(custom.title),
                items=(BulletList(clean_items(custom.content)),),
            )
            for custom in entries
        )

    builder = _ITEM_BUILDERS[section_key]
    return (
        SectionBlock(
            key=section_key,
            title=SECTION_TITLES[section_key],
            items=tuple(builder(entry) for entry in entries),
        ),
    )


def build_layout(resume: ResumeData) -> ResumeLayout:
    """
    Build the layout plan shared by every renderer.

    Example:
        >>> layout = build_layout(resume)
        >>> layout.section_titles
        ('Summary', 'Experience', 'Education', 'Projects', 'Skills')
    """
    sections = []
    for key in resume.section_order:
        sections.extend(build_sections(resume, key))

    return ResumeLayout(
        header=build_header(resume.personal_details),
        summary=clean_text(resume.summary),
        sections=tuple(sections),
    )
