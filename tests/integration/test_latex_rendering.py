"""Integration tests for the LaTeX renderer's complete document output."""

import re
import shutil
import subprocess

import pytest

from cvscriptly.contexts.composing import apply_theme
from cvscriptly.contexts.rendering import render_latex

SECTION_PATTERN = re.compile(r"\\section\{(.+?)\}")
REQUIRED_PACKAGES = ("paracol.sty", "titlesec.sty", "helvet.sty", "needspace.sty", "changepage.sty")


def section_titles(source):
    return SECTION_PATTERN.findall(source)


def latex_available():
    if not shutil.which("pdflatex") or not shutil.which("kpsewhich"):
        return False
    for package in REQUIRED_PACKAGES:
        found = subprocess.run(["kpsewhich", package], capture_output=True, text=True)
        if not found.stdout.strip():
            return False
    return True


@pytest.mark.integration
def test_complete_document(sample_resume):
    """Test the output is a full document with preamble and body."""
    source = render_latex(sample_resume)

    assert source.startswith(r"\documentclass[10pt, letterpaper]{article}")
    assert r"\begin{document}" in source
    assert source.rstrip().endswith(r"\end{document}")
    assert "John Doe" in source
    assert "<<<" not in source
    assert "<%%" not in source


@pytest.mark.integration
def test_sections_in_order(sample_resume):
    """Test sections follow section_order with Summary first."""
    source = render_latex(sample_resume)
    assert section_titles(source) == ["Summary", "Experience", "Education", "Projects", "Skills"]


@pytest.mark.integration
def test_reordered_sections(sample_resume):
    """Test a two-section order emits only those sections."""
    resume = sample_resume.replace(section_order=("skills", "experience"), summary="")
    assert section_titles(render_latex(resume)) == ["Skills", "Experience"]


@pytest.mark.integration
def test_special_characters_escaped(special_chars_resume):
    """Test reserved characters in user text are escaped."""
    source = render_latex(special_chars_resume)

    assert r"Smith \& Sons" in source
    assert r"50\% of the \$budget for project \#1" in source
    assert r"\textasciitilde{}/bin \{tools\}" in source
    assert r"path\textbackslash{}to\textbackslash{}file" in source
    assert r"\section{Awards}" in source
    assert r"Top\_1 \#rank" in source


@pytest.mark.integration
def test_colors_from_resolved_styles(sample_resume):
    """Test role colors become RGB color definitions."""
    source = render_latex(sample_resume)

    assert r"\definecolor{bodyColor}{RGB}{51, 51, 51}" in source
    assert r"\definecolor{sectionTitleColor}{RGB}{0, 0, 0}" in source


@pytest.mark.integration
def test_sans_default_switches_family(sample_resume):
    """Test the default sans family selects helvet and switches the default family."""
    source = render_latex(sample_resume)

    assert r"\usepackage{helvet}" in source
    assert r"\renewcommand{\familydefault}{\sfdefault}" in source


@pytest.mark.integration
def test_serif_theme(sample_resume):
    """Test a serif theme selects times without a sans switch."""
    source = render_latex(apply_theme(sample_resume, "Classic Serif"))

    assert r"\usepackage{times}" in source
    assert r"\familydefault" not in source


@pytest.mark.integration
def test_project_link(sample_resume):
    """Test project URLs become hyperlinks with the text kept verbatim."""
    source = render_latex(sample_resume)
    assert r"\href{https://github.com/name/repo}{github.com/name/repo}" in source


@pytest.mark.integration
def test_minimal_resume(minimal_resume):
    """Test a name-only resume emits the header and no sections."""
    source = render_latex(minimal_resume)

    assert section_titles(source) == []
    assert r"\begin{header}" in source
    assert r"\AND%" not in source


@pytest.mark.integration
def test_render_does_not_mutate(sample_resume):
    """Test rendering leaves the snapshot unchanged."""
    before = sample_resume.to_dict()
    render_latex(sample_resume)
    assert sample_resume.to_dict() == before


@pytest.mark.integration
@pytest.mark.skipif(not latex_available(), reason="pdflatex with required packages not installed")
def test_compiles_with_pdflatex(special_chars_resume, tmp_path):
    """Test the emitted source compiles to a PDF."""
    tex_file = tmp_path / "resume.tex"
    tex_file.write_text(render_latex(special_chars_resume), encoding="utf-8")

    completed = subprocess.run(
        ["pdflatex", "-interaction=nonstopmode", "-halt-on-error", tex_file.name],
        cwd=tmp_path,
        capture_output=True,
        text=True,
        timeout=120,
    )

    assert completed.returncode == 0, completed.stdout[-2000:]
    assert (tmp_path / "resume.pdf").exists()


@pytest.mark.integration
def test_entry_detail_uses_subheading_style(special_chars_resume):
    """Test the company and location share the subheading size and color with the title."""
    source = render_latex(special_chars_resume)

    assert (
        r"\color{subheadingColor}\textbf{Engineer}, Smith \& Sons — Boston}\end{twocolentry}"
        in source
    )
