"""Utility functions and helpers."""

from src.utils.parsing import (
    extract_id_candidates,
    parse_llm_output,
    strip_code_fences,
)
from src.utils.protocols import LLMClientProtocol, PatientStoreProtocol

__all__ = [
    "extract_id_candidates",
    "parse_llm_output",
    "strip_code_fences",
    "LLMClientProtocol",
    "PatientStoreProtocol",
]
