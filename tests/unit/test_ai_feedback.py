"""Unit tests for the AI collaborator boundary."""

import json

import pytest

from cvscriptly.contexts.advising import (
    SUMMARY_FALLBACK,
    AIFeedback,
    ResumeAdvisor,
    placeholder_feedback,
)
from cvscriptly.contexts.advising.ai_feedback import (
    build_analysis_prompt,
    build_summary_prompt,
    parse_feedback,
)
from cvscriptly.contexts.composing import Experience
from cvscriptly.utils.llm import LLMProvider, LLMResponse


class StubProvider(LLMProvider):
    """Provider returning canned replies (or raising) without network access."""

    _provider_prefix = "stub"
    _retryable_exception = TimeoutError
    _retry_message = "stub busy"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []
        self.update_model("canned")

    def _call_api(self, system_prompt, user_prompt, json_output):
        self.prompts.append((system_prompt, user_prompt, json_output))
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model=self.model, input_tokens=1, output_tokens=1)


@pytest.mark.unit
def test_placeholder_feedback():
    """Test the failure placeholder has score 0 and one explanatory suggestion."""
    feedback = placeholder_feedback()

    assert feedback.score == 0
    assert len(feedback.suggestions) == 1
    assert "Failed to analyze resume" in feedback.suggestions[0]
    assert feedback.summary == "Analysis could not be completed."


@pytest.mark.unit
def test_generate_summary(sample_resume):
    """Test a drafted summary is returned stripped."""
    provider = StubProvider(reply="  Seasoned engineer with a record of shipping.  \n")
    summary = ResumeAdvisor(provider).generate_summary(sample_resume)

    assert summary == "Seasoned engineer with a record of shipping."
    assert provider.name == "stub/canned"


@pytest.mark.unit
def test_generate_summary_failure_falls_back(sample_resume):
    """Test provider errors produce the fixed fallback sentence."""
    provider = StubProvider(error=RuntimeError("connection reset"))
    assert ResumeAdvisor(provider).generate_summary(sample_resume) == SUMMARY_FALLBACK


@pytest.mark.unit
def test_generate_summary_empty_reply_falls_back(sample_resume):
    """Test an empty reply is treated as a failure."""
    assert ResumeAdvisor(StubProvider(reply="   ")).generate_summary(sample_resume) == (
        SUMMARY_FALLBACK
    )


@pytest.mark.unit
def test_analyze_resume(sample_resume):
    """Test a JSON reply becomes AIFeedback and requests JSON output."""
    provider = StubProvider(
        reply='{"score": 81.6, "suggestions": ["Quantify impact", ""], "summary": "Solid."}'
    )
    feedback = ResumeAdvisor(provider).analyze_resume(sample_resume, job_description="Backend")

    assert feedback == AIFeedback(score=82, suggestions=("Quantify impact",), summary="Solid.")
    _, user_prompt, json_output = provider.prompts[0]
    assert json_output is True
    assert "Backend" in user_prompt


@pytest.mark.unit
@pytest.mark.parametrize("reply", ["not json", '{"suggestions": []}', '{"score": "high"}'])
def test_analyze_resume_bad_reply_falls_back(sample_resume, reply):
    """Test unusable replies produce the placeholder."""
    feedback = ResumeAdvisor(StubProvider(reply=reply)).analyze_resume(sample_resume)
    assert feedback == placeholder_feedback()


@pytest.mark.unit
def test_analyze_resume_provider_error_falls_back(sample_resume):
    """Test provider errors produce the placeholder."""
    provider = StubProvider(error=ConnectionError("offline"))
    assert ResumeAdvisor(provider).analyze_resume(sample_resume) == placeholder_feedback()


@pytest.mark.unit
def test_missing_provider_configuration_falls_back(sample_resume, monkeypatch):
    """Test an unconfigured provider is caught at the boundary."""
    monkeypatch.setenv("LLM_PROVIDER", "nonexistent")
    advisor = ResumeAdvisor()

    assert advisor.generate_summary(sample_resume) == SUMMARY_FALLBACK
    assert advisor.analyze_resume(sample_resume) == placeholder_feedback()


@pytest.mark.unit
@pytest.mark.parametrize("score, expected", [(-5, 0), (150, 100), ("77", 77), (49.5, 50)])
def test_parse_feedback_clamps_score(score, expected):
    """Test scores are integers clamped to 0-100."""
    assert parse_feedback(json.dumps({"score": score})).score == expected


@pytest.mark.unit
def test_parse_feedback_single_suggestion_string():
    """Test a lone suggestion string is accepted as a one-item list."""
    feedback = parse_feedback('{"score": 60, "suggestions": "Add keywords", "summary": "ok"}')
    assert feedback.suggestions == ("Add keywords",)


@pytest.mark.unit
def test_summary_prompt_uses_visible_entries(sample_resume):
    """Test the summary prompt lists experience, projects and skills."""
    resume = sample_resume.replace(
        experience=sample_resume.experience + (Experience(id="blank", role="", company="Hidden"),)
    )
    prompt = build_summary_prompt(resume)

    assert "Software Engineer at Apple" in prompt
    assert "Multi-User Drawing Tool:" in prompt
    assert "Programming Languages: C++" in prompt
    assert "Hidden" not in prompt


@pytest.mark.unit
def test_analysis_prompt_without_job_description(sample_resume):
    """Test the analysis prompt embeds the resume and marks a missing job description."""
    prompt = build_analysis_prompt(sample_resume)

    assert '"personalDetails"' in prompt
    assert "N/A" in prompt
