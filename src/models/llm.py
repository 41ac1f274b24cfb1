"""
Vital Canvas - LLM boundary models

``LLMResponse`` is what the client returns. ``LLMResult`` is the sum type
produced by parsing the completion text: exactly one of ``IdList``,
``Structured`` or ``Unparsable``.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, Field


class LLMResponse(BaseModel):
    """Response from an LLM API call."""
    
    content: str = Field(..., description="Response content")
    model: str = Field(..., description="Model that generated the response")
    input_tokens: int = Field(default=0)
    output_tokens: int = Field(default=0)
    finish_reason: str = Field(default="stop")


@dataclass(frozen=True)
class IdList:
    """Completion was a bare JSON array (array contract)."""

    ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Structured:
    """Completion was a JSON object (object contract)."""

    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Unparsable:
    """Completion was not valid JSON."""

    raw_text: str = ""


LLMResult = Union[IdList, Structured, Unparsable]
