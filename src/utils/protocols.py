"""
Shared Protocol definitions for type hints across the codebase.

These protocols define the interfaces expected from external collaborators
(LLM provider, hosted data store), allowing for dependency injection and
testing.
"""

from typing import Any, Optional, Protocol

from src.models.llm import LLMResponse


class LLMClientProtocol(Protocol):
    """
    Protocol defining the interface for LLM clients.
    
    Implemented by ``LLMClient`` and ``MockLLMClient``.
    """
    
    async def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float,
        max_tokens: Optional[int] = None,
        response_format: Optional[dict] = None,
    ) -> LLMResponse:
        """
        Complete a chat conversation with the LLM.
        
        Args:
            model: Model identifier (e.g., "gpt-4o-mini")
            messages: List of message dicts with "role" and "content"
            temperature: Sampling temperature (0-1)
            max_tokens: Optional maximum tokens to generate
            response_format: Optional structured-output hint
            
        Returns:
            LLMResponse with content and token usage
        """
        ...


class PatientStoreProtocol(Protocol):
    """Read interface of the hosted data store."""
    
    async def fetch_patients(self) -> list[dict[str, Any]]:
        """All patient rows, unordered."""
        ...
    
    async def fetch_updates(self) -> list[dict[str, Any]]:
        """All research update rows, newest first."""
        ...
