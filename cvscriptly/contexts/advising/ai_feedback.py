"""
AI Feedback

Boundary to the external AI collaborator: drafts a resume summary and scores a
resume for ATS compatibility. Every failure (missing SDK or API key, transport
error, unparseable reply) is caught here and turned into a fixed fallback, so
callers never see an exception from this module.
"""

import json
from dataclasses import dataclass, field
from typing import Optional, Tuple

from cvscriptly.contexts.advising.logger import (
    _log_error,
    _log_info,
    log_feedback,
    log_llm_usage,
)
from cvscriptly.contexts.composing.resume_data_structure import ResumeData
from cvscriptly.contexts.composing.section_filtering import visible_entries
from cvscriptly.utils.llm import LLMProvider, get_provider, parse_object_response
from cvscriptly.utils.text_processing import clean_items, clean_text

SUMMARY_FALLBACK = "Failed to generate summary. Please try again."
ANALYSIS_FAILED_SUGGESTION = (
    "Failed to analyze resume due to a server-side error. "
    "Please check your connection and try again."
)
ANALYSIS_FAILED_SUMMARY = "Analysis could not be completed."

SUMMARY_SYSTEM_PROMPT = (
    "You are an experienced technical recruiter who writes concise, professional "
    "resume summaries. Reply with the summary text only, no preamble or quotes."
)

SUMMARY_PROMPT = """Based on the following resume data, write a compelling and professional summary of 2-3 sentences for the resume header. Highlight key skills and experiences.

Experience: {experience}
Projects: {projects}
Skills: {skills}
"""

ANALYSIS_SYSTEM_PROMPT = (
    "You review resumes for applicant tracking system (ATS) compatibility. "
    "Reply with a single JSON object and nothing else."
)

ANALYSIS_PROMPT = """Analyze the following resume data for ATS compatibility and overall effectiveness. If a job description is provided, tailor the analysis for that specific role.

Resume Data:
{resume_json}

Job Description (optional):
{job_description}

Respond with a JSON object with exactly these keys:
- "score": ATS optimization score, a number from 0 to 100
- "suggestions": a list of specific suggestions for improvement (e.g., action verbs, keywords, formatting)
- "summary": a brief summary of the resume's strengths and weaknesses
"""


@dataclass(frozen=True)
class AIFeedback:
    """
    ATS analysis result.

    Attributes:
        score: Integer 0-100
        suggestions: Improvement suggestions, in the order given
        summary: Short prose assessment
    """

    score: int
    suggestions: Tuple[str, ...] = field(default_factory=tuple)
    summary: str = ""


def placeholder_feedback() -> AIFeedback:
    """Feedback returned when analysis could not be completed."""
    return AIFeedback(
        score=0,
        suggestions=(ANALYSIS_FAILED_SUGGESTION,),
        summary=ANALYSIS_FAILED_SUMMARY,
    )


def _clamp_score(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Score must be a number, got {value!r}")
    return max(0, min(100, int(round(float(value)))))


def parse_feedback(text: str) -> AIFeedback:
    """
    Build AIFeedback from a model reply.

    Raises:
        ValueError: If the reply has no JSON object or its score is not numeric
    """
    data = parse_object_response(text)
    if data is None:
        raise ValueError("Response did not contain a JSON object")
    if "score" not in data:
        raise ValueError("Response is missing 'score'")

    suggestions = data.get("suggestions") or []
    if isinstance(suggestions, str):
        suggestions = [suggestions]

    return AIFeedback(
        score=_clamp_score(data["score"]),
        suggestions=clean_items(str(item) for item in suggestions),
        summary=clean_text(str(data.get("summary") or "")),
    )


def build_summary_prompt(resume: ResumeData) -> str:
    """Summary request listing visible experience, projects and skills."""
    experience = "; ".join(
        f"{entry.role} at {entry.company}: {', '.join(clean_items(entry.highlights))}"
        for entry in visible_entries(resume, "experience")
    )
    projects = "; ".join(
        f"{entry.name}: {clean_text(entry.description)}"
        for entry in visible_entries(resume, "projects")
    )
    skills = "; ".join(
        (f"{entry.category}: " if clean_text(entry.category) else "")
        + ", ".join(clean_items(entry.skills))
        for entry in visible_entries(resume, "skills")
    )
    return SUMMARY_PROMPT.format(experience=experience, projects=projects, skills=skills)


def build_analysis_prompt(resume: ResumeData, job_description: Optional[str] = None) -> str:
    """Analysis request carrying the full resume (wire format) and optional job description."""
    return ANALYSIS_PROMPT.format(
        resume_json=json.dumps(resume.to_dict(), indent=2, ensure_ascii=False),
        job_description=clean_text(job_description) or "N/A",
    )


class ResumeAdvisor:
    """
    AI collaborator for summary drafting and ATS analysis.

    The provider is created on first use, so constructing an advisor never fails
    even without API keys configured.

    Args:
        provider: LLM provider (defaults to get_provider() on first call)

    Example:
        >>> advisor = ResumeAdvisor()
        >>> advisor.analyze_resume(resume, job_description="Senior backend role").score
        74
    """

    def __init__(self, provider: LLMProvider = None):
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def generate_summary(self, resume: ResumeData) -> str:
        """
        Draft a 2-3 sentence summary.

        Returns:
            The drafted summary, or SUMMARY_FALLBACK on any failure
        """
        try:
            response = self.provider.generate(SUMMARY_SYSTEM_PROMPT, build_summary_prompt(resume))
            summary = clean_text(response.content).strip('"')
            if not summary:
                raise ValueError("Empty summary returned")
        except Exception as e:
            _log_error(f"Error generating summary: {e}")
            return SUMMARY_FALLBACK

        log_llm_usage("summary", response)
        _log_info(f"Drafted summary ({len(summary)} characters)")
        return summary

    def analyze_resume(
        self, resume: ResumeData, job_description: Optional[str] = None
    ) -> AIFeedback:
        """
        Score the resume for ATS compatibility, tailored to job_description if given.

        Returns:
            AIFeedback, or placeholder_feedback() on any failure
        """
        try:
            response = self.provider.generate(
                ANALYSIS_SYSTEM_PROMPT,
                build_analysis_prompt(resume, job_description),
                json_output=True,
            )
            feedback = parse_feedback(response.content)
        except Exception as e:
            _log_error(f"Error analyzing resume: {e}")
            return placeholder_feedback()

        log_llm_usage("analysis", response)
        log_feedback(feedback)
        return feedback


def generate_summary(resume: ResumeData, provider: LLMProvider = None) -> str:
    """Draft a summary with a one-off advisor."""
    return ResumeAdvisor(provider).generate_summary(resume)


def analyze_resume(
    resume: ResumeData, job_description: Optional[str] = None, provider: LLMProvider = None
) -> AIFeedback:
    """Analyze a resume with a one-off advisor."""
    return ResumeAdvisor(provider).analyze_resume(resume, job_description)
