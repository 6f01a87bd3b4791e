"""
Resume Data Structure

Defines the canonical, serializable record of resume content and style choices.
This structure is the single snapshot handed to every renderer (PDF, DOCX, LaTeX,
live preview). It carries no rendering behavior.

All records are frozen dataclasses with tuple-valued sequences, so a snapshot
cannot be mutated by a renderer. Edits go through whole-field replacement
(ResumeData.replace), which yields a new snapshot that compares by value.

The wire format (what a UI layer sends) uses camelCase keys such as
``personalDetails``, ``startDate`` and ``sectionTitle``; from_dict() accepts both
camelCase and snake_case, and to_dict() emits camelCase.
"""

import dataclasses
import uuid
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

from omegaconf import OmegaConf

from cvscriptly.contexts.composing.exceptions import InvalidResumeDataError
from cvscriptly.contexts.composing.logger import log_resume_loaded

# Section keys in their default emission order
SECTION_KEYS: Tuple[str, ...] = ("experience", "education", "projects", "skills", "customSections")

# Section key -> ResumeData attribute holding that collection
SECTION_COLLECTIONS: Dict[str, str] = {
    "experience": "experience",
    "education": "education",
    "projects": "projects",
    "skills": "skills",
    "customSections": "custom_sections",
}

FONT_WEIGHTS: Tuple[str, ...] = ("normal", "bold")

# snake_case attribute -> camelCase wire key (only names that differ)
_WIRE_NAMES = {
    "personal_details": "personalDetails",
    "custom_sections": "customSections",
    "section_order": "sectionOrder",
    "section_title": "sectionTitle",
    "line_height": "lineHeight",
    "start_date": "startDate",
    "end_date": "endDate",
}
_ATTRIBUTE_NAMES = {wire: attr for attr, wire in _WIRE_NAMES.items()}


def new_entry_id(prefix: str = "entry") -> str:
    """Generate a fresh opaque entry identifier (never reused)."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_text_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(_as_text(item) for item in value)


class _Record:
    """
    Shared wire-format behavior for resume records.

    Subclasses are frozen dataclasses. __post_init__ normalizes text fields
    (None -> "") and sequence fields (list -> tuple of str).
    """

    _sequence_fields: Tuple[str, ...] = ()

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in self._sequence_fields:
                object.__setattr__(self, f.name, _as_text_tuple(value))
            elif f.type is str:
                object.__setattr__(self, f.name, _as_text(value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: str = None):
        """
        Build a record from a wire-format mapping.

        Unknown keys are ignored. Missing required fields raise
        InvalidResumeDataError.
        """
        path = path or cls.__name__
        if not isinstance(data, Mapping):
            raise InvalidResumeDataError(
                f"Expected a mapping for {path}", field_name=path, value=data
            )

        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _ATTRIBUTE_NAMES.get(key, key)
            if name in known:
                kwargs[name] = value

        for f in fields(cls):
            has_default = (
                f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
            )
            if not has_default and f.name not in kwargs:
                wire_name = _WIRE_NAMES.get(f.name, f.name)
                raise InvalidResumeDataError(
                    f"Missing required field '{wire_name}'", field_name=f"{path}.{wire_name}"
                )

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire format."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = [item.to_dict() if isinstance(item, _Record) else item for item in value]
            elif isinstance(value, _Record):
                value = value.to_dict()
            result[_WIRE_NAMES.get(f.name, f.name)] = value
        return result


@dataclass(frozen=True)
class PersonalDetails(_Record):
    """Contact block rendered in the centered header. Only name is required."""

    name: str
    location: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    linkedin: str = ""
    github: str = ""


@dataclass(frozen=True)
class Education(_Record):
    id: str = field(default_factory=lambda: new_entry_id("edu"))
    university: str = ""
    degree: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    coursework: Tuple[str, ...] = ()

    _sequence_fields = ("coursework",)


@dataclass(frozen=True)
class Experience(_Record):
    id: str = field(default_factory=lambda: new_entry_id("exp"))
    role: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    highlights: Tuple[str, ...] = ()

    _sequence_fields = ("highlights",)


@dataclass(frozen=True)
class Project(_Record):
    id: str = field(default_factory=lambda: new_entry_id("proj"))
    name: str = ""
    url: str = ""
    description: str = ""
    tools: Tuple[str, ...] = ()

    _sequence_fields = ("tools",)


@dataclass(frozen=True)
class CustomSection(_Record):
    id: str = field(default_factory=lambda: new_entry_id("custom"))
    title: str = ""
    content: Tuple[str, ...] = ()

    _sequence_fields = ("content",)


@dataclass(frozen=True)
class SkillGroup(_Record):
    id: str = field(default_factory=lambda: new_entry_id("skills"))
    category: str = ""
    skills: Tuple[str, ...] = ()

    _sequence_fields = ("skills",)


@dataclass(frozen=True)
class FontStyle(_Record):
    """
    Typography for one style role.

    Attributes:
        family: Font family name (see style_resolution.FONT_FAMILIES)
        size: Size in points. Kept as given; style resolution falls back to a
              role default when it is not a positive number.
        color: Hex color string ('#333333', '#333', '333333')
        weight: 'normal' or 'bold'
    """

    family: str = "Helvetica"
    size: float = 10
    color: str = "#333333"
    weight: str = "normal"


@dataclass(frozen=True)
class StylingOptions(_Record):
    """
    Style configuration for the four text roles plus global line height.

    Field defaults are the "Default" theme preset.

    Attributes:
        font: Body text
        heading: The name in the header
        subheading: Entry headings (role, university, project name)
        section_title: Section titles ("Experience", "Education", ...)
        line_height: Global line height ratio (e.g., 1.15 for 115%)
    """

    font: FontStyle = field(default_factory=FontStyle)
    heading: FontStyle = field(default_factory=lambda: FontStyle(size=25, weight="bold"))
    subheading: FontStyle = field(default_factory=lambda: FontStyle(size=11, weight="bold"))
    section_title: FontStyle = field(
        default_factory=lambda: FontStyle(size=12, color="#000000", weight="bold")
    )
    line_height: float = 1.15

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: str = "styling") -> "StylingOptions":
        if not isinstance(data, Mapping):
            raise InvalidResumeDataError(
                f"Expected a mapping for {path}", field_name=path, value=data
            )

        defaults = cls()
        roles = {}
        for role in ("font", "heading", "subheading", "section_title"):
            wire_name = _WIRE_NAMES.get(role, role)
            raw = data.get(wire_name, data.get(role))
            if raw is None:
                roles[role] = getattr(defaults, role)
            elif not isinstance(raw, Mapping):
                raise InvalidResumeDataError(
                    f"Expected a mapping for {path}.{wire_name}",
                    field_name=f"{path}.{wire_name}",
                    value=raw,
                )
            else:
                # Missing keys within a role inherit that role's default
                merged = {**getattr(defaults, role).to_dict(), **dict(raw)}
                roles[role] = FontStyle.from_dict(merged, path=f"{path}.{wire_name}")

        line_height = data.get("lineHeight", data.get("line_height", defaults.line_height))
        return cls(line_height=line_height, **roles)


_ENTRY_TYPES = {
    "education": Education,
    "experience": Experience,
    "projects": Project,
    "custom_sections": CustomSection,
    "skills": SkillGroup,
}


@dataclass(frozen=True)
class ResumeData(_Record):
    """
    Aggregate root: one complete resume snapshot.

    Invariants (checked on construction):
    - Entry ids are unique within each collection
    - section_order holds known section keys, each at most once

    Attributes:
        personal_details: Header contact block
        summary: Free-text summary (rendered first when non-blank)
        education, experience, projects, custom_sections, skills: Ordered entries
        section_order: Emission order of section keys
        styling: Typography configuration
    """

    personal_details: PersonalDetails
    summary: str = ""
    education: Tuple[Education, ...] = ()
    experience: Tuple[Experience, ...] = ()
    projects: Tuple[Project, ...] = ()
    custom_sections: Tuple[CustomSection, ...] = ()
    skills: Tuple[SkillGroup, ...] = ()
    section_order: Tuple[str, ...] = SECTION_KEYS
    styling: StylingOptions = field(default_factory=StylingOptions)

    def __post_init__(self):
        object.__setattr__(self, "summary", _as_text(self.summary))
        object.__setattr__(self, "section_order", _as_text_tuple(self.section_order))
        for attr in _ENTRY_TYPES:
            object.__setattr__(self, attr, tuple(getattr(self, attr) or ()))
        self._validate()

    def _validate(self) -> None:
        seen_keys = set()
        for key in self.section_order:
            if key not in SECTION_COLLECTIONS:
                raise InvalidResumeDataError(
                    f"Unknown section key '{key}'. Valid keys: {list(SECTION_KEYS)}",
                    field_name="sectionOrder",
                    value=list(self.section_order),
                )
            if key in seen_keys:
                raise InvalidResumeDataError(
                    f"Section key '{key}' appears more than once",
                    field_name="sectionOrder",
                    value=list(self.section_order),
                )
            seen_keys.add(key)

        for attr in _ENTRY_TYPES:
            seen_ids = set()
            for index, entry in enumerate(getattr(self, attr)):
                if entry.id in seen_ids:
                    wire_name = _WIRE_NAMES.get(attr, attr)
                    raise InvalidResumeDataError(
                        f"Duplicate entry id '{entry.id}' in {wire_name}",
                        field_name=f"{wire_name}[{index}].id",
                    )
                seen_ids.add(entry.id)

    def replace(self, **changes) -> "ResumeData":
        """
        Return a new snapshot with whole fields replaced.

        Example:
            >>> updated = resume.replace(summary="Backend engineer with 8 years...")
            >>> updated == resume
            False
        """
        return dataclasses.replace(self, **changes)

    def collection(self, section_key: str) -> tuple:
        """Entries for a section key (e.g., 'customSections' -> custom_sections)."""
        return getattr(self, SECTION_COLLECTIONS[section_key])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: str = "resume") -> "ResumeData":
        if not isinstance(data, Mapping):
            raise InvalidResumeDataError(
                "Resume data must be a mapping", field_name=path, value=data
            )

        personal = data.get("personalDetails", data.get("personal_details"))
        if personal is None:
            raise InvalidResumeDataError(
                "Missing required field 'personalDetails'", field_name=f"{path}.personalDetails"
            )

        kwargs: Dict[str, Any] = {
            "personal_details": PersonalDetails.from_dict(personal, path="personalDetails"),
            "summary": data.get("summary", ""),
        }

        for attr, entry_type in _ENTRY_TYPES.items():
            wire_name = _WIRE_NAMES.get(attr, attr)
            raw_entries = data.get(wire_name, data.get(attr)) or []
            kwargs[attr] = tuple(
                entry_type.from_dict(entry, path=f"{wire_name}[{index}]")
                for index, entry in enumerate(raw_entries)
            )

        order = data.get("sectionOrder", data.get("section_order"))
        if order is not None:
            kwargs["section_order"] = order

        styling = data.get("styling")
        if styling is not None:
            kwargs["styling"] = StylingOptions.from_dict(styling)

        return cls(**kwargs)


def load_resume(path: Union[str, Path]) -> ResumeData:
    """
    Load a resume from a YAML or JSON file.

    Args:
        path: Path to the resume file (wire format, camelCase keys)

    Returns:
        ResumeData snapshot

    Raises:
        FileNotFoundError: If path does not exist
        InvalidResumeDataError: If the structure is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Resume file not found: {path}")

    data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    resume = ResumeData.from_dict(data)
    log_resume_loaded(path, resume)
    return resume


def save_resume(resume: ResumeData, path: Union[str, Path]) -> Path:
    """Write a resume snapshot as YAML in the wire format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    OmegaConf.save(OmegaConf.create(resume.to_dict()), path)
    return path
