"""
Whitelist validation of externally supplied patient ids.

Model output is untrusted: every id list coming back from the LLM is
reduced to ids that exist in the pool the request was made for. Unknown
ids are dropped silently (logged, never raised).
"""

import logging
from typing import Iterable, Protocol


logger = logging.getLogger(__name__)


class HasId(Protocol):
    id: str


def known_ids(patients: Iterable[HasId]) -> set[str]:
    return {patient.id for patient in patients}


def filter_known_ids(candidate_ids: Iterable[object], valid_ids: set[str]) -> tuple[list[str], list[str]]:
    """
    Split candidate ids into (kept, dropped).

    Kept ids preserve first-seen order and are de-duplicated; non-string
    candidates are always dropped.
    """
    kept: list[str] = []
    dropped: list[str] = []
    seen: set[str] = set()

    for candidate in candidate_ids:
        if not isinstance(candidate, str) or candidate not in valid_ids:
            dropped.append(str(candidate))
            continue
        if candidate in seen:
            continue
        seen.add(candidate)
        kept.append(candidate)

    if dropped:
        logger.info(f"Dropped {len(dropped)} unknown patient id(s) from model output")
    return kept, dropped
