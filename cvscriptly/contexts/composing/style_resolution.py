"""
Style Resolution

Translates the abstract FontStyle roles of a StylingOptions record into the
primitives each renderer consumes:

- PDF: one of the two built-in font buckets (Helvetica or Times) with its bold
  variant name, size in points, RGB color
- DOCX: literal family name, size in half-points, hex color, line spacing in
  240ths of a line
- LaTeX: font package directive, \\familydefault switch, RGB color, points
- Preview: literal family name, CSS hex color, points

Every function here is pure: the same FontStyle always resolves to an equal
ResolvedFontStyle, and malformed input resolves to a safe default instead of
raising.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from cvscriptly.contexts.composing.resume_data_structure import FontStyle, StylingOptions

DEFAULT_FAMILY = "Helvetica"
DEFAULT_LINE_HEIGHT = 1.15

# Role -> size used when the stored size is not a positive number
ROLE_DEFAULT_SIZES: Dict[str, float] = {
    "font": 10,
    "heading": 25,
    "subheading": 11,
    "section_title": 12,
}

# Word-processor line spacing unit: 240 == single spacing
DOCX_SINGLE_LINE = 240

HEX_COLOR_PATTERN = re.compile(r"^[0-9a-fA-F]{3}$|^[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class FontFamily:
    """
    One recognized font family.

    Attributes:
        name: Literal family name passed to DOCX and LaTeX
        pdf_bucket: 'sans' or 'serif' (the PDF backend only has Helvetica and Times)
        latex_package: Package directive selecting the family
        sans_switch: Whether LaTeX must switch \\familydefault to \\sfdefault
    """

    name: str
    pdf_bucket: str
    latex_package: str
    sans_switch: bool = False


FONT_FAMILIES: Dict[str, FontFamily] = {
    family.name: family
    for family in (
        FontFamily("Helvetica", "sans", r"\usepackage{helvet}", sans_switch=True),
        FontFamily("Arial", "sans", r"\usepackage{helvet}", sans_switch=True),
        FontFamily("Roboto", "sans", r"\usepackage{roboto}", sans_switch=True),
        FontFamily("Lato", "sans", r"\usepackage[default]{lato}"),
        FontFamily("Calibri", "sans", r"\usepackage{calibri}", sans_switch=True),
        FontFamily("Charter", "serif", r"\usepackage{charter}"),
        FontFamily("Georgia", "serif", r"\usepackage{georgia}"),
        FontFamily("Times New Roman", "serif", r"\usepackage{times}"),
        FontFamily("Garamond", "serif", r"\usepackage{ebgaramond}"),
    )
}

# PDF bucket -> (regular, bold) built-in font names
PDF_FONTS: Dict[str, Tuple[str, str]] = {
    "sans": ("Helvetica", "Helvetica-Bold"),
    "serif": ("Times-Roman", "Times-Bold"),
}


@dataclass(frozen=True)
class ResolvedFontStyle:
    """
    Renderer primitives for one style role.

    Attributes:
        family: Recognized family name (unknown names resolve to Helvetica)
        pdf_regular: Built-in PDF font for normal-weight runs
        pdf_bold: Built-in PDF font for bold runs
        size: Size in points
        half_points: DOCX size unit, round(size * 2)
        rgb: (r, g, b), each 0-255
        bold: Whether the role's weight is bold
        latex_package: Font package directive for LaTeX
        sans_switch: Whether LaTeX switches \\familydefault
    """

    family: str
    pdf_regular: str
    pdf_bold: str
    size: float
    half_points: int
    rgb: Tuple[int, int, int]
    bold: bool
    latex_package: str
    sans_switch: bool

    @property
    def pdf_font(self) -> str:
        """PDF font honoring the role's own weight."""
        return self.pdf_bold if self.bold else self.pdf_regular

    @property
    def hex(self) -> str:
        """Uppercase six-digit hex without '#' (DOCX RGBColor.from_string)."""
        return "{:02X}{:02X}{:02X}".format(*self.rgb)

    @property
    def css_color(self) -> str:
        return f"#{self.hex}"

    @property
    def latex_rgb(self) -> str:
        """Color as 'r, g, b' for \\definecolor{...}{RGB}{...}."""
        return ", ".join(str(channel) for channel in self.rgb)


@dataclass(frozen=True)
class ResolvedStyling:
    """All four roles resolved, plus global line spacing."""

    body: ResolvedFontStyle
    heading: ResolvedFontStyle
    subheading: ResolvedFontStyle
    section_title: ResolvedFontStyle
    line_height: float

    @property
    def docx_line_spacing(self) -> int:
        """Line spacing in 240ths of a line (240 == single)."""
        return round(DOCX_SINGLE_LINE * self.line_height)


def parse_hex_color(value: Any) -> Tuple[int, int, int]:
    """
    Parse a hex color into an RGB triplet.

    Accepts 3- and 6-digit forms with or without a leading '#'. Anything else
    resolves to black.

    Example:
        >>> parse_hex_color("#007BFF")
        (0, 123, 255)
        >>> parse_hex_color("fff")
        (255, 255, 255)
        >>> parse_hex_color("notacolor")
        (0, 0, 0)
    """
    if not isinstance(value, str):
        return (0, 0, 0)

    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if not HEX_COLOR_PATTERN.match(digits):
        return (0, 0, 0)

    if len(digits) == 3:
        digits = "".join(char * 2 for char in digits)
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))


def _positive_number(value: Any) -> Optional[float]:
    """Return value as a finite positive float, or None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def resolve_family(name: Any) -> FontFamily:
    """Look up a recognized family, falling back to Helvetica."""
    if isinstance(name, str) and name.strip() in FONT_FAMILIES:
        return FONT_FAMILIES[name.strip()]
    return FONT_FAMILIES[DEFAULT_FAMILY]


def resolve_font_style(style: FontStyle, fallback_size: float = 10) -> ResolvedFontStyle:
    """
    Resolve one FontStyle into renderer primitives.

    Args:
        style: The abstract style
        fallback_size: Size used when style.size is not a positive number

    Returns:
        ResolvedFontStyle (equal for equal inputs)
    """
    family = resolve_family(style.family)
    regular, bold_variant = PDF_FONTS[family.pdf_bucket]
    size = _positive_number(style.size) or fallback_size
    is_bold = isinstance(style.weight, str) and style.weight.strip().lower() == "bold"

    return ResolvedFontStyle(
        family=family.name,
        pdf_regular=regular,
        pdf_bold=bold_variant,
        size=size,
        half_points=round(size * 2),
        rgb=parse_hex_color(style.color),
        bold=is_bold,
        latex_package=family.latex_package,
        sans_switch=family.sans_switch,
    )


def resolve_line_height(value: Any) -> float:
    """Global line-height ratio; invalid values resolve to 1.15."""
    return _positive_number(value) or DEFAULT_LINE_HEIGHT


def resolve_styling(styling: StylingOptions) -> ResolvedStyling:
    """Resolve all four roles of a StylingOptions record at once."""
    return ResolvedStyling(
        body=resolve_font_style(styling.font, ROLE_DEFAULT_SIZES["font"]),
        heading=resolve_font_style(styling.heading, ROLE_DEFAULT_SIZES["heading"]),
        subheading=resolve_font_style(styling.subheading, ROLE_DEFAULT_SIZES["subheading"]),
        section_title=resolve_font_style(
            styling.section_title, ROLE_DEFAULT_SIZES["section_title"]
        ),
        line_height=resolve_line_height(styling.line_height),
    )
