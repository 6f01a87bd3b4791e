"""
PDF Layout Primitives

Backend-free pieces of PDF pagination: page geometry, the vertical layout
cursor, and width-based word wrapping. Nothing here imports reportlab, so layout
decisions can be unit tested with a fake width function.

Coordinates: the cursor measures y downward from the top edge of the page.
The PDF renderer converts to bottom-up PDF coordinates when drawing.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

# Letter, in points
LETTER_WIDTH = 612.0
LETTER_HEIGHT = 792.0
PAGE_MARGIN = 72.0

# Line advance = font size * LINE_HEIGHT_FACTOR * global line height
LINE_HEIGHT_FACTOR = 1.15

# Slack for float rounding when comparing accumulated heights
FIT_TOLERANCE = 1e-6

# (text, font key) pairs; the font key is whatever the width function understands
Run = Tuple[str, str]
MeasureFn = Callable[[str, str], float]

_TOKEN_PATTERN = re.compile(r"(\s*)(\S+)")


@dataclass(frozen=True)
class PageGeometry:
    width: float = LETTER_WIDTH
    height: float = LETTER_HEIGHT
    margin: float = PAGE_MARGIN

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def left(self) -> float:
        return self.margin

    @property
    def right(self) -> float:
        return self.width - self.margin

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        """Lowest y (from the top) content may reach."""
        return self.height - self.margin


def line_advance(size: float, line_height: float) -> float:
    """Vertical space one line of text at this size occupies."""
    return size * LINE_HEIGHT_FACTOR * line_height


class LayoutCursor:
    """
    Vertical position on the current page plus the page-break rule.

    Before a block of height h is placed, reserve(h) starts a new page when
    y + h would pass the bottom margin. A block taller than a whole page is
    placed at the top of a fresh page and allowed to run over, so reserve()
    never loops.

    Args:
        geometry: Page geometry
        on_new_page: Called after each page break (the renderer emits the page)

    Example:
        >>> cursor = LayoutCursor(PageGeometry())
        >>> cursor.reserve(700)
        False
        >>> cursor.advance(700)
        >>> cursor.reserve(30)
        True
        >>> cursor.page_number
        2
    """

    def __init__(
        self,
        geometry: PageGeometry = None,
        on_new_page: Optional[Callable[[], None]] = None,
    ):
        self.geometry = geometry or PageGeometry()
        self.on_new_page = on_new_page
        self.y = self.geometry.top
        self.page_number = 1

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.geometry.top

    @property
    def remaining(self) -> float:
        return self.geometry.bottom - self.y

    def fits(self, height: float) -> bool:
        return self.y + height <= self.geometry.bottom + FIT_TOLERANCE

    def new_page(self) -> None:
        self.page_number += 1
        self.y = self.geometry.top
        if self.on_new_page is not None:
            self.on_new_page()

    def reserve(self, height: float) -> bool:
        """
        Make room for a block of the given height.

        Returns:
            True if a page break was started
        """
        if self.fits(height) or self.at_page_top:
            return False
        self.new_page()
        return True

    def advance(self, height: float) -> None:
        self.y += height


def _split_units(runs: Sequence[Run]) -> List[Tuple[bool, List[Run]]]:
    """
    Split runs into unbreakable units.

    A unit is a maximal stretch of non-whitespace, which may cross run
    boundaries (e.g., bold "Engineer" directly followed by regular ", Apple").
    Each unit records whether whitespace preceded it.
    """
    units: List[Tuple[bool, List[Run]]] = []
    for text, font in runs:
        for match in _TOKEN_PATTERN.finditer(text):
            spaced, word = bool(match.group(1)), match.group(2)
            if units and not spaced:
                units[-1][1].append((word, font))
            else:
                units.append((spaced, [(word, font)]))
    return units


def _width(segments: Sequence[Run], measure: MeasureFn) -> float:
    return sum(measure(text, font) for text, font in segments)


def _merge(segments: Sequence[Run]) -> List[Run]:
    """Join adjacent segments that share a font."""
    merged: List[Run] = []
    for text, font in segments:
        if merged and merged[-1][1] == font:
            merged[-1] = (merged[-1][0] + text, font)
        elif text:
            merged.append((text, font))
    return merged


def _split_long_unit(unit: List[Run], max_width: float, measure: MeasureFn) -> List[List[Run]]:
    """Break a unit wider than the line into character chunks that each fit."""
    pieces: List[List[Run]] = []
    current: List[Run] = []
    for text, font in unit:
        for char in text:
            candidate = current + [(char, font)]
            if current and _width(_merge(candidate), measure) > max_width:
                pieces.append(_merge(current))
                current = [(char, font)]
            else:
                current = candidate
    if current:
        pieces.append(_merge(current))
    return pieces


def wrap_runs(runs: Sequence[Run], max_width: float, measure: MeasureFn) -> List[List[Run]]:
    """
    Word-wrap styled runs to a maximum width.

    Words are kept whole where possible; a single word wider than the line is
    split by characters. Runs of whitespace collapse to one space, and no
    other character is dropped or duplicated.

    Args:
        runs: (text, font) pairs making up one paragraph
        max_width: Available width in points
        measure: measure(text, font) -> width in points

    Returns:
        Lines, each a list of (text, font) segments
    """
    lines: List[List[Run]] = []
    current: List[Run] = []

    for spaced, unit in _split_units(runs):
        if current:
            space = [(" ", unit[0][1])] if spaced else []
            candidate = current + space + unit
            if _width(candidate, measure) <= max_width:
                current = candidate
                continue
            lines.append(_merge(current))
            current = []

        if _width(unit, measure) <= max_width:
            current = list(unit)
        else:
            pieces = _split_long_unit(unit, max_width, measure)
            lines.extend(pieces[:-1])
            current = list(pieces[-1])

    if current:
        lines.append(_merge(current))
    return lines


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """Word-wrap plain text in a single font."""
    lines = wrap_runs([(text, "")], max_width, lambda chunk, _font: measure(chunk))
    return ["".join(segment for segment, _ in line) for line in lines]


def runs_width(runs: Sequence[Run], measure: MeasureFn) -> float:
    return _width(runs, measure)
