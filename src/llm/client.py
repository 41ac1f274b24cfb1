"""
OpenAI-compatible LLM Client.

Provides a single chat-completion call against OpenAI, or any
OpenAI-compatible endpoint such as OpenRouter, through the OpenAI SDK.
Calls are single-shot by default; a transient failure surfaces to the
caller immediately unless ``max_attempts`` is raised.
"""

import logging
import os
from typing import Optional

import httpx
from openai import AsyncOpenAI, OpenAIError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.config import Settings
from src.errors import ConfigurationError, LLMProviderError
from src.models.llm import LLMResponse


logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (OpenAIError, httpx.HTTPError)


class LLMClient:
    """
    Async client for chat completions.
    
    Uses the OpenAI SDK; ``base_url`` switches to any compatible provider.
    """
    
    OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        max_attempts: int = 1,
    ):
        """
        Initialize the LLM client.
        
        Args:
            api_key: Provider API key. Falls back to OPENAI_API_KEY, then OPENROUTER_API_KEY.
            base_url: Optional OpenAI-compatible base URL (defaults to OpenAI).
            timeout: Request timeout in seconds.
            max_attempts: Total attempts per call; 1 means no retry.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY") or os.getenv("OPENROUTER_API_KEY")
        if not self.api_key:
            raise ConfigurationError(
                "LLM API key required. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        
        self.base_url = base_url or os.getenv("LLM_BASE_URL") or None
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        
        # The SDK's own retries are disabled; attempts are governed by max_attempts
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=0,
        )
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(
            api_key=settings.openai_api_key,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
            max_attempts=settings.llm_max_attempts,
        )
    
    async def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        response_format: Optional[dict] = None,
    ) -> LLMResponse:
        """
        Generate a completion from the specified model.
        
        Args:
            model: Model identifier (e.g., "gpt-4o-mini")
            messages: List of message dicts with "role" and "content" keys
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate (optional)
            response_format: Optional provider response format, e.g. {"type": "json_object"}
        
        Returns:
            LLMResponse with content and token usage
        
        Raises:
            LLMProviderError: The provider failed, timed out, or returned no content.
        """
        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        if response_format:
            kwargs["response_format"] = response_format
        
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=1, min=2, max=10),
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.chat.completions.create(**kwargs)
        except RETRYABLE_ERRORS as e:
            logger.error(f"LLM call to {model} failed: {e}")
            raise LLMProviderError(f"LLM provider request failed ({type(e).__name__})") from e
        
        if not response.choices:
            raise LLMProviderError(f"No choices returned by {model}")
        
        content = response.choices[0].message.content or ""
        if not content.strip():
            raise LLMProviderError(f"Empty completion returned by {model}")
        
        finish_reason = response.choices[0].finish_reason or "stop"
        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0
        
        logger.debug(f"{model} returned {output_tokens} tokens ({finish_reason})")
        
        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=finish_reason,
        )


class MockLLMClient:
    """
    Mock LLM client for testing and offline demos.
    
    Returns predefined responses without making actual API calls.
    """
    
    def __init__(
        self,
        responses: Optional[dict[str, str]] = None,
        default: Optional[str] = None,
        error: Optional[Exception] = None,
    ):
        """
        Initialize mock client.
        
        Args:
            responses: Optional dict mapping model names to response content.
            default: Content returned for models without an entry.
            error: If set, every call raises this exception.
        """
        self.responses = responses or {}
        self.default = default
        self.error = error
        self.calls: list[dict] = []
    
    async def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        response_format: Optional[dict] = None,
    ) -> LLMResponse:
        """Return a mock response."""
        self.calls.append({
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_format": response_format,
        })
        
        if self.error is not None:
            raise self.error
        
        if model in self.responses:
            content = self.responses[model]
        elif self.default is not None:
            content = self.default
        else:
            content = "[]"
        
        return LLMResponse(
            content=content,
            model=model,
            input_tokens=sum(len(m.get("content", "")) // 4 for m in messages),
            output_tokens=len(content) // 4,
            finish_reason="stop",
        )
    
    def reset(self):
        """Forget recorded calls."""
        self.calls = []
