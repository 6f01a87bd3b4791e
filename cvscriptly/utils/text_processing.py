"""
Text processing utilities shared by the composing and rendering contexts.
"""

import re
from typing import Iterable, Optional, Tuple

URL_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def is_blank(text: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return text is None or not str(text).strip()


def clean_text(text: Optional[str]) -> str:
    """Return text stripped of surrounding whitespace ('' for None)."""
    if text is None:
        return ""
    return str(text).strip()


def clean_items(items: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """
    Drop blank and whitespace-only strings from a sequence, stripping the rest.

    Order of the surviving items is preserved.

    Example:
        >>> clean_items(["  Algorithms ", "", "   ", "Compilers"])
        ('Algorithms', 'Compilers')
    """
    if not items:
        return ()
    return tuple(clean_text(item) for item in items if not is_blank(item))


def ensure_url_scheme(url: str, scheme: str = "https") -> str:
    """
    Make a URL absolute by prefixing a scheme when it has none.

    Example:
        >>> ensure_url_scheme("github.com/name/repo")
        'https://github.com/name/repo'
        >>> ensure_url_scheme("http://example.com")
        'http://example.com'
    """
    url = clean_text(url)
    if not url or URL_SCHEME_PATTERN.match(url):
        return url
    return f"{scheme}://{url.lstrip('/')}"


def replace_whitespace(text: str, replacement: str = "_") -> str:
    """Replace every whitespace character with the replacement string."""
    return re.sub(r"\s", replacement, text)


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines, 1 for standard
                        normalization (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=0)
        'text\\nmore'
    """
    if max_consecutive == 0:
        pattern = r"\n\s*\n(\s*\n)*"
    else:
        # Only runs of 2+ blank lines
        pattern = r"\n\s*\n(\s*\n)+"

    replacement = "\n" * (max_consecutive + 1)

    return re.sub(pattern, replacement, content)
