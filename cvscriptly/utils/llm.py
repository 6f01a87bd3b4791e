"""
LLM provider abstraction and response parsing utilities.

Provides a provider-agnostic interface for the AI collaborator's API calls with
automatic retries, and a parser for JSON-object responses.
"""

import json
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional, TypeVar

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# Retry configuration
MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "3"))
BASE_DELAY = 1.0
MAX_TOKENS = 2048

T = TypeVar("T")


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: type[Exception],
    error_message: str,
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
) -> T:
    """
    Execute operation with exponential backoff retry on specific exception.

    Args:
        operation: Callable that performs the API request and returns result
        retryable_exception: Exception type that triggers retry
        error_message: Message prefix for retry logging (e.g., "API overloaded")
        max_retries: Total attempts before the exception propagates
        base_delay: Delay before the second attempt; doubles each retry
    """
    for attempt in range(max_retries):
        try:
            return operation()
        except retryable_exception:
            if attempt == max_retries - 1:
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... "
                f"(attempt {attempt + 1}/{max_retries})"
            )
            time.sleep(delay)


# --- LLM Provider Classes ---


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


class LLMProvider(ABC):
    """
    Abstract base for LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "anthropic", "openai")
    - Set self._retryable_exception to the exception type that triggers retry
    - Set self._retry_message for logging during retries
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _retryable_exception: type[Exception]
    _retry_message: str

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str, json_output: bool) -> LLMResponse:
        """Make a single API call (no retries). Implemented by subclasses."""
        pass

    def generate(
        self, system_prompt: str, user_prompt: str, json_output: bool = False
    ) -> LLMResponse:
        """
        Generate a response with automatic retry on transient errors.

        Args:
            system_prompt: Instructions for the model
            user_prompt: The request itself (resume content, job description)
            json_output: Ask the provider for a single JSON object where supported
        """
        return _retry_with_backoff(
            partial(self._call_api, system_prompt, user_prompt, json_output),
            self._retryable_exception,
            self._retry_message,
        )


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider with exponential backoff retry."""

    _provider_prefix = "anthropic"
    _retry_message = "API overloaded"

    def __init__(self, model: str = "claude-sonnet-4-20250514"):
        # Lazy import - anthropic SDK is heavy, only load if this provider is used
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.Anthropic(api_key=api_key)
        self._retryable_exception = anthropic.OverloadedError
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str, json_output: bool) -> LLMResponse:
        # No response_format here; the prompt asks for JSON and parse_object_response copes
        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return LLMResponse(
            content=response.content[0].text,
            model=self.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider with exponential backoff retry."""

    _provider_prefix = "openai"
    _retry_message = "Rate limit hit"

    def __init__(self, model: str = "gpt-4o"):
        # Lazy import - openai SDK is heavy, only load if this provider is used
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self.client = openai.OpenAI(api_key=api_key)
        self._retryable_exception = openai.RateLimitError
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str, json_output: bool) -> LLMResponse:
        extra = {"response_format": {"type": "json_object"}} if json_output else {}
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            **extra,
        )
        return LLMResponse(
            content=response.choices[0].message.content,
            model=self.model,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
        )


# --- Provider Factory ---


def get_provider(provider_name: str = None, model: str = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "anthropic" or "openai" (default: from LLM_PROVIDER env var)
        model: Model name (default: LLM_MODEL env var, then provider default)

    Returns:
        LLMProvider instance

    Raises:
        ValueError: Unknown provider or missing API key
        ImportError: Provider SDK not installed
    """
    if provider_name is None:
        provider_name = os.getenv("LLM_PROVIDER", "openai").lower()
    if model is None:
        model = os.getenv("LLM_MODEL") or None

    if provider_name == "anthropic":
        return AnthropicProvider(model=model) if model else AnthropicProvider()
    elif provider_name == "openai":
        return OpenAIProvider(model=model) if model else OpenAIProvider()
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Use 'anthropic' or 'openai'")


# --- Response Parsing Utilities ---


def _strip_code_fence(text: str) -> str:
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_object_response(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object from an LLM response.

    Accepts a bare object, an object wrapped in a ``` fence, or an object
    embedded in surrounding prose.

    Returns:
        The parsed dict, or None if no JSON object could be recovered

    Example:
        >>> parse_object_response('Here you go: {"score": 82}')
        {'score': 82}
    """
    text = _strip_code_fence((text or "").strip())

    # Try direct JSON parse
    try:
        result = json.loads(text)
        if isinstance(result, dict):
            return result
    except json.JSONDecodeError:
        pass

    # Try to find JSON object in the text
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            result = json.loads(text[start : end + 1])
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

    return None
