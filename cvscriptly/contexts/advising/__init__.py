"""
Advising Context

Responsibilities:
- Drafts resume summaries through an LLM provider
- Scores resumes for ATS compatibility, optionally against a job description

Owns: Prompts, AIFeedback, failure fallbacks
Never: Modifies the resume (callers decide whether to apply a drafted summary)
"""

from cvscriptly.contexts.advising.ai_feedback import (
    SUMMARY_FALLBACK,
    AIFeedback,
    ResumeAdvisor,
    analyze_resume,
    generate_summary,
    placeholder_feedback,
)

__all__ = [
    "AIFeedback",
    "ResumeAdvisor",
    "SUMMARY_FALLBACK",
    "analyze_resume",
    "generate_summary",
    "placeholder_feedback",
]
