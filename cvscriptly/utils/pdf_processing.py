"""
PDF inspection utilities.

Used to report page counts after PDF export and to read rendered text back out
of generated PDFs.

Functions:
    page_count: Quick page count without full extraction.
    extract_page_texts: Plain text of each page.
    extract_words: Every word on every page, in reading order.
"""

import io
from pathlib import Path
from typing import List, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader

PdfSource = Union[str, Path, bytes]


def _as_stream(pdf: PdfSource):
    if isinstance(pdf, (bytes, bytearray)):
        return io.BytesIO(pdf)
    return str(pdf)


def page_count(pdf: PdfSource) -> Optional[int]:
    """Get page count from a PDF path or PDF bytes, or None if unreadable."""
    try:
        reader = PdfReader(_as_stream(pdf))
        return len(reader.pages)
    except Exception:
        return None


def extract_page_texts(pdf: PdfSource) -> List[str]:
    """
    Extract plain text from each page.

    Example:
        >>> texts = extract_page_texts(pdf_bytes)
        >>> "Experience" in texts[0]
        True
    """
    with pdfplumber.open(_as_stream(pdf)) as document:
        return [page.extract_text() or "" for page in document.pages]


def extract_words(pdf: PdfSource) -> List[str]:
    """All words across all pages, top-to-bottom and page by page."""
    words = []
    with pdfplumber.open(_as_stream(pdf)) as document:
        for page in document.pages:
            words.extend(word["text"] for word in page.extract_words())
    return words
