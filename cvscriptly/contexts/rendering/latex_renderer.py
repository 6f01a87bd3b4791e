"""
LaTeX Renderer

Emits a complete, compilable LaTeX source string from the shared layout plan.
Templates live under template/ (LATEX_TEMPLATE_PATH) and use LaTeX-safe Jinja2
delimiters:
- Variable: <<< var >>>
- Block: <%% block %%>
- Comment: <# comment #>

All user text goes through the `tex` filter, which escapes the ten reserved
characters in a single pass. No compilation is performed here.
"""

import os
import re
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
)

from cvscriptly.contexts.composing.resume_data_structure import ResumeData
from cvscriptly.contexts.composing.section_filtering import (
    SUMMARY_TITLE,
    ResumeLayout,
    SectionBlock,
    build_layout,
)
from cvscriptly.contexts.composing.style_resolution import ResolvedStyling, resolve_styling
from cvscriptly.contexts.rendering.exceptions import TemplateRenderError
from cvscriptly.contexts.rendering.logger import _log_debug
from cvscriptly.utils.text_processing import set_max_consecutive_blank_lines

load_dotenv()
LATEX_TEMPLATE_PATH = Path(os.getenv("LATEX_TEMPLATE_PATH", Path(__file__).parent / "template"))

# Reserved character -> escaped form
LATEX_ESCAPES: Dict[str, str] = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
LATEX_UNESCAPES: Dict[str, str] = {escaped: char for char, escaped in LATEX_ESCAPES.items()}

_ESCAPE_PATTERN = re.compile("|".join(re.escape(char) for char in LATEX_ESCAPES))
_UNESCAPE_PATTERN = re.compile(
    "|".join(re.escape(escaped) for escaped in sorted(LATEX_UNESCAPES, key=len, reverse=True))
)
_URL_ESCAPE_PATTERN = re.compile(r"[%#]")

# article only offers these base sizes
DOCUMENT_CLASS_SIZES = (10, 11, 12)

# Section key -> section template type
SECTION_TEMPLATES: Dict[str, str] = {
    "experience": "entry_section",
    "education": "entry_section",
    "projects": "entry_section",
    "skills": "skill_section",
    "customSections": "bullet_section",
}


def escape_latex(text: str) -> str:
    """
    Escape LaTeX reserved characters in a single left-to-right pass.

    Each reserved character is replaced exactly once; replacement text is never
    re-escaped.

    Example:
        >>> escape_latex("R&D: 50% of $budget_#1")
        'R\\\\&D: 50\\\\% of \\\\$budget\\\\_\\\\#1'
    """
    if not text:
        return ""
    return _ESCAPE_PATTERN.sub(lambda match: LATEX_ESCAPES[match.group(0)], str(text))


def unescape_latex(text: str) -> str:
    """Reverse escape_latex exactly: unescape_latex(escape_latex(s)) == s."""
    if not text:
        return ""
    return _UNESCAPE_PATTERN.sub(lambda match: LATEX_UNESCAPES[match.group(0)], text)


def escape_latex_url(url: str) -> str:
    """Escape the characters \\href arguments cannot take verbatim."""
    return _URL_ESCAPE_PATTERN.sub(lambda match: "\\" + match.group(0), url or "")


def _bold(text: str, flag: bool) -> str:
    return f"\\textbf{{{text}}}" if flag else text


def _number(value: float) -> str:
    return f"{float(value):g}"


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for LaTeX generation.

    Templates are stored in template/types/{type_name}/template.tex.jinja and
    template/structure/{name}.tex.jinja, and use custom delimiters to avoid
    conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Base template directory. Defaults to
                           LATEX_TEMPLATE_PATH from environment
        """
        if templates_path is None:
            templates_path = LATEX_TEMPLATE_PATH

        self.templates_path = Path(templates_path)
        self._cache: Dict[str, Template] = {}

        # Create Jinja2 environment with custom delimiters to avoid LaTeX conflicts
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
        )
        self.env.filters["tex"] = escape_latex
        self.env.filters["texurl"] = escape_latex_url
        self.env.filters["bold"] = _bold
        self.env.filters["num"] = _number

    def load(self, relative_path: str) -> Template:
        """Load a template by path relative to the template directory, with caching."""
        if relative_path in self._cache:
            return self._cache[relative_path]

        try:
            template = self.env.get_template(relative_path)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found at {self.templates_path / relative_path}"
            ) from e

        self._cache[relative_path] = template
        return template

    def get_template(self, type_name: str) -> Template:
        """
        Get a section template by type name, loading and caching it if necessary.

        Args:
            type_name: Name of the type (e.g., 'entry_section')

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        return self.load(f"types/{type_name}/template.tex.jinja")

    def get_template_path(self, type_name: str) -> Path:
        return self.templates_path / "types" / type_name / "template.tex.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, type_name: str) -> bool:
        return f"types/{type_name}/template.tex.jinja" in self._cache


class LatexResumeGenerator:
    """Renders a ResumeLayout through the template registry."""

    def __init__(self, template_registry: TemplateRegistry = None):
        self.template_registry = template_registry or TemplateRegistry()

    def _render(self, relative_path: str, **context) -> str:
        try:
            return self.template_registry.load(relative_path).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                "Failed to render LaTeX template",
                template_name=relative_path,
                template_path=self.template_registry.templates_path / relative_path,
                original_error=e,
            ) from e

    def _render_type(self, type_name: str, **context) -> str:
        return self._render(f"types/{type_name}/template.tex.jinja", **context)

    def render_section(self, section: SectionBlock, styling: ResolvedStyling) -> str:
        return self._render_type(SECTION_TEMPLATES[section.key], section=section, styling=styling)

    def generate_preamble(self, layout: ResumeLayout, styling: ResolvedStyling) -> str:
        class_size = min(DOCUMENT_CLASS_SIZES, key=lambda size: abs(size - styling.body.size))
        return self._render(
            "structure/preamble.tex.jinja",
            styling=styling,
            class_size=class_size,
            line_height=styling.line_height,
            title=f"{layout.header.name}'s Resume",
            author=layout.header.name,
        )

    def generate_document(self, layout: ResumeLayout, styling: ResolvedStyling) -> str:
        """
        Generate the complete LaTeX document.

        Header first, then Summary (when present), then sections in order.
        """
        blocks = [self._render_type("header", header=layout.header, styling=styling)]
        if layout.summary:
            blocks.append(self._render_type("summary", title=SUMMARY_TITLE, summary=layout.summary))
        blocks.extend(self.render_section(section, styling) for section in layout.sections)

        document = self._render(
            "structure/document.tex.jinja",
            preamble=self.generate_preamble(layout, styling),
            blocks=blocks,
            styling=styling,
        )
        return set_max_consecutive_blank_lines(document, max_consecutive=1)


def render_latex(resume: ResumeData, template_registry: TemplateRegistry = None) -> str:
    """
    Render a resume snapshot to LaTeX source.

    Args:
        resume: Snapshot to render (not modified)
        template_registry: Optional registry (e.g., with a custom template path)

    Returns:
        Complete UTF-8 LaTeX document (preamble + body)

    Raises:
        TemplateRenderError: If a template is missing or fails to render
    """
    generator = LatexResumeGenerator(template_registry)
    source = generator.generate_document(build_layout(resume), resolve_styling(resume.styling))
    _log_debug(f"LaTeX source generated ({len(source)} characters)")
    return source
