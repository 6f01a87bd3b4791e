"""Shared fixtures for CVSCRIPTLY tests."""

import pytest

from cvscriptly.contexts.composing import (
    CustomSection,
    Experience,
    PersonalDetails,
    ResumeData,
    default_resume,
)


@pytest.fixture
def sample_resume() -> ResumeData:
    """Template-default resume (full content in every section except custom sections)."""
    return default_resume()


@pytest.fixture
def minimal_resume() -> ResumeData:
    """Resume with only a name and no other content."""
    return ResumeData(personal_details=PersonalDetails(name="A"))


@pytest.fixture
def special_chars_resume(sample_resume) -> ResumeData:
    """Resume whose text exercises LaTeX reserved characters."""
    return sample_resume.replace(
        personal_details=PersonalDetails(name="Jane Q. Doe", email="jane_doe@example.com"),
        summary="Led R&D on 50% of the $budget for project #1 using C++ and ~/bin {tools}",
        experience=(
            Experience(
                id="exp-special",
                role="Engineer",
                company="Smith & Sons",
                location="Boston",
                start_date="2019",
                end_date="2021",
                highlights=("Cut costs by 30% ^ more", "Wrote path\\to\\file parser"),
            ),
        ),
        custom_sections=(CustomSection(id="c1", title="Awards", content=("Top_1 #rank",)),),
    )


@pytest.fixture
def long_highlights_resume() -> ResumeData:
    """Experience entry with enough highlights to overflow one PDF page."""
    highlights = tuple(
        f"Highlight number {index} describing a substantial accomplishment with measurable "
        f"impact across several teams and quarters"
        for index in range(40)
    )
    return ResumeData(
        personal_details=PersonalDetails(name="Long Resume"),
        experience=(
            Experience(id="exp-long", role="Engineer", company="Acme", highlights=highlights),
        ),
    )
