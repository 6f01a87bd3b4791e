"""
Composing Context

Responsibilities:
- Holds the canonical resume data model (content plus style choices)
- Resolves abstract font styles into renderer primitives
- Decides which sections and entries render, and in what order
- Provides the template-default resume and theme presets

Owns: ResumeData snapshots, style resolution, the shared layout plan
Never: Produces output artifacts
"""

from cvscriptly.contexts.composing.config_resolver import apply_theme, list_theme_names
from cvscriptly.contexts.composing.defaults import default_resume
from cvscriptly.contexts.composing.exceptions import InvalidResumeDataError
from cvscriptly.contexts.composing.resume_data_structure import (
    SECTION_KEYS,
    CustomSection,
    Education,
    Experience,
    FontStyle,
    PersonalDetails,
    Project,
    ResumeData,
    SkillGroup,
    StylingOptions,
    load_resume,
    new_entry_id,
    save_resume,
)
from cvscriptly.contexts.composing.section_filtering import ResumeLayout, build_layout
from cvscriptly.contexts.composing.style_resolution import (
    ResolvedFontStyle,
    ResolvedStyling,
    parse_hex_color,
    resolve_font_style,
    resolve_styling,
)

__all__ = [
    # Data model
    "SECTION_KEYS",
    "PersonalDetails",
    "Education",
    "Experience",
    "Project",
    "CustomSection",
    "SkillGroup",
    "FontStyle",
    "StylingOptions",
    "ResumeData",
    "InvalidResumeDataError",
    "new_entry_id",
    "load_resume",
    "save_resume",
    # Defaults and presets
    "default_resume",
    "apply_theme",
    "list_theme_names",
    # Style resolution
    "ResolvedFontStyle",
    "ResolvedStyling",
    "parse_hex_color",
    "resolve_font_style",
    "resolve_styling",
    # Layout plan
    "ResumeLayout",
    "build_layout",
]
