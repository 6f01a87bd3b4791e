"""Unit tests for LLM response parsing and provider selection."""

import pytest

from cvscriptly.utils import llm
from cvscriptly.utils.llm import get_provider, parse_object_response


@pytest.mark.unit
def test_parse_bare_object():
    """Test a bare JSON object parses directly."""
    assert parse_object_response('{"score": 82, "summary": "ok"}') == {"score": 82, "summary": "ok"}


@pytest.mark.unit
def test_parse_fenced_object():
    """Test an object wrapped in a code fence parses."""
    text = '```json\n{"score": 70, "suggestions": ["Use action verbs"]}\n```'
    assert parse_object_response(text) == {"score": 70, "suggestions": ["Use action verbs"]}


@pytest.mark.unit
def test_parse_embedded_object():
    """Test an object surrounded by prose parses."""
    assert parse_object_response('Here you go: {"score": 5} Hope this helps.') == {"score": 5}


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{broken", None])
def test_parse_failure_returns_none(text):
    """Test unparseable responses return None."""
    assert parse_object_response(text) is None


@pytest.mark.unit
def test_unknown_provider():
    """Test an unknown provider name is rejected."""
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("gemini")


@pytest.mark.unit
def test_retry_with_backoff_retries_then_raises(monkeypatch):
    """Test retryable errors are retried up to the limit, then propagate."""
    monkeypatch.setattr(llm.time, "sleep", lambda _seconds: None)
    calls = []

    def flaky():
        calls.append(1)
        raise TimeoutError("busy")

    with pytest.raises(TimeoutError):
        llm._retry_with_backoff(flaky, TimeoutError, "busy", max_retries=3)
    assert len(calls) == 3


@pytest.mark.unit
def test_retry_with_backoff_returns_first_success(monkeypatch):
    """Test a success after a retryable error is returned."""
    monkeypatch.setattr(llm.time, "sleep", lambda _seconds: None)
    outcomes = iter([TimeoutError("busy"), "done"])

    def operation():
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert llm._retry_with_backoff(operation, TimeoutError, "busy", max_retries=3) == "done"
