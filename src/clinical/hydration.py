"""
Hydration of data-store rows into dashboard view models.

Patients get derived lab statuses, a risk score and priority, and a
humanized "last visit". Updates get a category, an urgency, display
timestamps and the ids of the patients their rules impact.
"""

import json
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from src.clinical.labs import classify_lab_status
from src.clinical.risk import assess_risk
from src.matching.criteria import UnrecognizedPolicy
from src.matching.rules import match_update_to_patients
from src.models.enums import UpdateCategory, UpdateUrgency
from src.models.patient import LabResult, Patient, PatientRecord
from src.models.update import ResearchUpdate, ResearchUpdateRecord


logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 180

CATEGORY_URGENCY = {
    UpdateCategory.DRUG_APPROVAL: UpdateUrgency.CRITICAL,
    UpdateCategory.GUIDELINES: UpdateUrgency.HIGH,
    UpdateCategory.RESEARCH: UpdateUrgency.HIGH,
    UpdateCategory.POLICY: UpdateUrgency.MEDIUM,
}


def _js_round(value: float) -> int:
    """Round half up, as the dashboard's display strings always have."""
    return int(math.floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the store; naive values are taken as UTC."""
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparsable timestamp: {raw!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


# ============================================================================
# Patients
# ============================================================================

def normalize_labs(raw_labs: Any, patient_id: str = "") -> list[LabResult]:
    """
    Turn the stored ``labs`` column into lab results with fresh statuses.

    The column may be a native list or a JSON-encoded list. Anything else,
    undecodable JSON, and entries without a name yield no labs.
    """
    entries: Any = []
    if isinstance(raw_labs, (list, tuple)):
        entries = raw_labs
    elif isinstance(raw_labs, str) and raw_labs.strip().startswith("["):
        try:
            entries = json.loads(raw_labs)
        except json.JSONDecodeError as e:
            logger.warning(f"Unable to parse labs for patient {patient_id}: {e}")
            entries = []

    if not isinstance(entries, list):
        return []

    labs = []
    for entry in entries:
        if not isinstance(entry, Mapping) or not entry.get("name"):
            continue
        name = str(entry["name"])
        value = entry.get("value")
        if value is None or not isinstance(value, (int, float, str)) or isinstance(value, bool):
            value = "" if value is None else str(value)
        labs.append(LabResult(name=name, value=value, status=classify_lab_status(name, value)))
    return labs


def humanize_last_visit(
    created_at: Optional[str],
    index: int,
    now: Optional[datetime] = None,
) -> str:
    """
    Describe how long ago the patient was last seen.

    Without a usable timestamp, a stable placeholder of 1-6 days is derived
    from the patient's position in the load order.
    """
    created = parse_timestamp(created_at)
    if created is None:
        fallback_days = (index % 6) + 1
        return _plural(fallback_days, "day")

    diff_seconds = (_now(now) - created).total_seconds()
    diff_days = max(0, math.floor(diff_seconds / 86400))
    if diff_days == 0:
        return "Today"
    if diff_days < 7:
        return _plural(diff_days, "day")
    return _plural(diff_days // 7, "week")


def hydrate_patient(
    record: Union[PatientRecord, Mapping[str, Any]],
    index: int,
    now: Optional[datetime] = None,
) -> Patient:
    """Build the patient view model from one stored row."""
    if not isinstance(record, PatientRecord):
        record = PatientRecord.model_validate(record)

    conditions = _string_list(record.conditions)
    labs = normalize_labs(record.labs, record.id)
    risk = assess_risk(conditions, labs)

    return Patient(
        id=record.id,
        name=record.name or "",
        age=max(record.age or 0, 0),
        conditions=conditions,
        meds=_string_list(record.meds),
        labs=labs,
        risk_score=risk.score,
        priority=risk.priority,
        last_visit=humanize_last_visit(record.created_at, index, now),
    )


def hydrate_patients(
    records: Iterable[Union[PatientRecord, Mapping[str, Any]]],
    now: Optional[datetime] = None,
) -> list[Patient]:
    """Hydrate every row and order the pool by risk score, highest first."""
    patients = [hydrate_patient(record, index, now) for index, record in enumerate(records)]
    return sorted(patients, key=lambda patient: patient.risk_score, reverse=True)


# ============================================================================
# Research updates
# ============================================================================

def map_source_to_category(source: str) -> UpdateCategory:
    normalized = (source or "").lower()
    if "guideline" in normalized:
        return UpdateCategory.GUIDELINES
    if "fda" in normalized:
        return UpdateCategory.DRUG_APPROVAL
    if "payer" in normalized:
        return UpdateCategory.POLICY
    return UpdateCategory.RESEARCH


def map_category_to_urgency(category: UpdateCategory) -> UpdateUrgency:
    return CATEGORY_URGENCY.get(UpdateCategory(category), UpdateUrgency.MEDIUM)


def estimate_read_time(summary: Optional[str]) -> str:
    words = len(re.split(r"\s+", summary)) if summary is not None else 0
    minutes = max(1, _js_round(words / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def format_relative_time(timestamp: Optional[str], now: Optional[datetime] = None) -> str:
    """Render a store timestamp as "Just now", "5 min ago", "2 hours ago" and so on."""
    created = parse_timestamp(timestamp)
    if created is None:
        return "Just now"

    diff_minutes = _js_round((_now(now) - created).total_seconds() / 60)
    if diff_minutes < 1:
        return "Just now"
    if diff_minutes < 60:
        return f"{diff_minutes} min ago"

    diff_hours = _js_round(diff_minutes / 60)
    if diff_hours < 24:
        return _plural(diff_hours, "hour")

    diff_days = _js_round(diff_hours / 24)
    if diff_days < 7:
        return _plural(diff_days, "day")

    diff_weeks = _js_round(diff_days / 7)
    if diff_weeks < 5:
        return _plural(diff_weeks, "week")

    diff_months = _js_round(diff_days / 30)
    if diff_months < 12:
        return _plural(diff_months, "month")

    return _plural(_js_round(diff_days / 365), "year")


def hydrate_update(
    record: Union[ResearchUpdateRecord, Mapping[str, Any]],
    patients: Sequence[Patient],
    now: Optional[datetime] = None,
    policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
) -> ResearchUpdate:
    """Build the update view model, including the impacted patients of ``patients``."""
    if not isinstance(record, ResearchUpdateRecord):
        record = ResearchUpdateRecord.model_validate(record)

    category = map_source_to_category(record.source)

    return ResearchUpdate(
        **record.model_dump(),
        category=category,
        urgency=map_category_to_urgency(category),
        read_time=estimate_read_time(record.summary),
        timestamp=format_relative_time(record.created_at, now),
        impacted_patients=match_update_to_patients(record, patients, policy),
    )


def hydrate_updates(
    records: Iterable[Union[ResearchUpdateRecord, Mapping[str, Any]]],
    patients: Sequence[Patient],
    now: Optional[datetime] = None,
    policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
) -> list[ResearchUpdate]:
    return [hydrate_update(record, patients, now, policy) for record in records]
