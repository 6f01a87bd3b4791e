"""Integration tests for the PDF renderer, inspected with pdfplumber and PyPDF2."""

import io

import pdfplumber
import pytest

from cvscriptly.contexts.composing import Experience, PersonalDetails, ResumeData, apply_theme
from cvscriptly.contexts.composing.section_filtering import SECTION_TITLES
from cvscriptly.contexts.rendering import render_pdf
from cvscriptly.utils.pdf_processing import extract_page_texts, extract_words, page_count

TITLES = set(SECTION_TITLES.values()) | {"Summary"}


def title_lines(pdf_bytes):
    """Section title lines in reading order across all pages."""
    return [
        line.strip()
        for text in extract_page_texts(pdf_bytes)
        for line in text.splitlines()
        if line.strip() in TITLES
    ]


@pytest.mark.integration
def test_render_default_resume(sample_resume):
    """Test the default resume renders a valid PDF with its content."""
    pdf = render_pdf(sample_resume)

    assert pdf.startswith(b"%PDF")
    assert page_count(pdf) >= 1
    text = "\n".join(extract_page_texts(pdf))
    assert "John Doe" in text
    assert "University of Pennsylvania" in text
    assert "Tools Used: C++, MFC" in text
    assert "Programming Languages:" in text


@pytest.mark.integration
def test_section_titles_in_order(sample_resume):
    """Test section titles appear in section_order, Summary first."""
    pdf = render_pdf(sample_resume)
    assert title_lines(pdf) == ["Summary", "Experience", "Education", "Projects", "Skills"]


@pytest.mark.integration
def test_reordered_sections(sample_resume):
    """Test reordering to skills then experience drops the other sections."""
    pdf = render_pdf(sample_resume.replace(section_order=("skills", "experience"), summary=""))
    assert title_lines(pdf) == ["Skills", "Experience"]


@pytest.mark.integration
def test_minimal_resume(minimal_resume):
    """Test a name-only resume renders one page with just the name."""
    pdf = render_pdf(minimal_resume)

    assert page_count(pdf) == 1
    assert extract_words(pdf) == ["A"]


@pytest.mark.integration
def test_long_highlights_break_pages(long_highlights_resume):
    """Test overflowing highlights continue on a new page with nothing lost."""
    pdf = render_pdf(long_highlights_resume)

    assert page_count(pdf) >= 2
    text = "\n".join(extract_page_texts(pdf))
    for index in range(40):
        assert f"Highlight number {index} describing" in text


@pytest.mark.integration
def test_entries_keep_insertion_order(sample_resume):
    """Test experience entries appear top to bottom in insertion order."""
    text = "\n".join(extract_page_texts(render_pdf(sample_resume)))
    assert text.index("Apple") < text.index("Microsoft")


@pytest.mark.integration
def test_serif_theme_uses_times(sample_resume):
    """Test a serif family selects the built-in Times fonts."""
    pdf = render_pdf(apply_theme(sample_resume, "Classic Serif"))
    with pdfplumber.open(io.BytesIO(pdf)) as document:
        fonts = {char["fontname"] for char in document.pages[0].chars}

    assert any("Times" in font for font in fonts)
    assert not any("Helvetica" in font for font in fonts)


@pytest.mark.integration
def test_special_characters_render(special_chars_resume):
    """Test LaTeX-reserved characters are drawn verbatim in the PDF."""
    text = "\n".join(extract_page_texts(render_pdf(special_chars_resume)))

    assert "Smith & Sons" in text
    assert "50% of the $budget for project #1" in text


@pytest.mark.integration
def test_render_does_not_mutate(sample_resume):
    """Test rendering leaves the snapshot unchanged."""
    before = sample_resume.to_dict()
    render_pdf(sample_resume)
    assert sample_resume.to_dict() == before


def stranded_page_ends(resume, headings):
    """Non-final pages whose last line is a title or entry heading."""
    texts = extract_page_texts(render_pdf(resume))
    last_lines = [text.strip().splitlines()[-1].strip() for text in texts[:-1]]
    return [line for line in last_lines if line.startswith(headings)]


@pytest.mark.integration
def test_titles_and_headings_never_end_a_page():
    """Test section titles and entry headings stay on the page of their first content line."""
    words = "alpha beta gamma delta epsilon zeta eta theta iota kappa lambda mu nu xi"
    experience = (
        Experience(
            id="exp-1",
            role="Engineer",
            company="Acme",
            start_date="2019",
            end_date="2021",
            highlights=("Built the billing pipeline", "Ran the on-call rotation", "Cut costs"),
        ),
        Experience(
            id="exp-2",
            role="Architect",
            company="Globex",
            start_date="2021",
            highlights=("Designed the event bus", "Mentored four engineers"),
        ),
    )
    headings = ("Experience", "Engineer", "Architect")

    stranded = {}
    for repeats in range(1, 120):
        resume = ResumeData(
            personal_details=PersonalDetails(name="Page Break"),
            summary=" ".join([words] * repeats),
            experience=experience,
        )
        lines = stranded_page_ends(resume, headings)
        if lines:
            stranded[repeats] = lines

    assert stranded == {}
