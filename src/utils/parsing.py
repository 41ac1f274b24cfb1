"""
Shared text parsing utilities for LLM response extraction.

The completion text is classified once, at the boundary, into the
``LLMResult`` sum type (``IdList`` / ``Structured`` / ``Unparsable``).
Services dispatch on that variant instead of probing optional fields.
"""

import json
import re
from typing import Any, Iterable, Optional

from src.models.llm import IdList, LLMResult, Structured, Unparsable


UUID_PATTERN = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b"
)

# Keys under which models tend to nest an id list when they answer with an object
ID_LIST_KEYS = ("matchingPatientIds", "patientIds", "patient_ids", "highlightedPatients", "ids", "patients")


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    content = content.strip()
    if "```json" in content:
        return content.split("```json")[1].split("```")[0].strip()
    if content.startswith("```"):
        return content.split("```")[1].split("```")[0].strip()
    return content


def _classify(data: Any, raw: str) -> LLMResult:
    if isinstance(data, list):
        return IdList(ids=[item for item in data if isinstance(item, str)])
    if isinstance(data, dict):
        return Structured(payload=data)
    return Unparsable(raw_text=raw)


def _embedded_json(content: str) -> Optional[Any]:
    """Find the outermost JSON array or object embedded in prose."""
    starts = [index for index in (content.find("["), content.find("{")) if index != -1]
    if not starts:
        return None

    start = min(starts)
    closing = "]" if content[start] == "[" else "}"
    end = content.rfind(closing) + 1
    if end <= start:
        return None

    try:
        return json.loads(content[start:end])
    except json.JSONDecodeError:
        return None


def parse_llm_output(content: Optional[str]) -> LLMResult:
    """
    Classify raw completion text.

    Tries the whole text (minus code fences) as JSON first, then the
    outermost embedded array/object. Anything else is ``Unparsable``.
    """
    raw = content or ""
    text = strip_code_fences(raw)
    if not text:
        return Unparsable(raw_text=raw)

    try:
        return _classify(json.loads(text), raw)
    except json.JSONDecodeError:
        pass

    embedded = _embedded_json(text)
    if embedded is not None:
        return _classify(embedded, raw)

    return Unparsable(raw_text=raw)


def ids_from_payload(payload: dict) -> Optional[list[str]]:
    """Pull an id list out of an object-shaped answer to the array contract; None if absent."""
    for key in ID_LIST_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str)]
    return None


def extract_id_candidates(content: str) -> list[str]:
    """Best-effort recovery of UUID-shaped identifiers from free text."""
    seen: set[str] = set()
    candidates = []
    for match in UUID_PATTERN.findall(content or ""):
        if match not in seen:
            seen.add(match)
            candidates.append(match)
    return candidates


def string_list(value: Any) -> list[str]:
    """Keep the string items of a JSON value that should have been a list of strings."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]


def join_or(items: Iterable[str], empty: str = "None") -> str:
    items = [item for item in items if item]
    return ", ".join(items) if items else empty
