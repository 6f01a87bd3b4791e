"""
Shared utilities for CVSCRIPTLY.

Common functionality used across contexts:
- Logger setup with provenance tracking
- Text helpers (blank detection, URL normalization, whitespace cleanup)
- LLM provider abstraction
- PDF inspection
"""

from cvscriptly.utils.text_processing import (
    ensure_url_scheme,
    is_blank,
    set_max_consecutive_blank_lines,
)

__all__ = ["ensure_url_scheme", "is_blank", "set_max_consecutive_blank_lines"]
