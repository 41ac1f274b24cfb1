"""
Lab status classification.

Maps a lab name and raw value to a qualitative status. The vocabulary depends
on the lab's category (glycemic control, blood pressure, oxygenation); any
other lab is reported as ``normal``.
"""

import math
import re

from src.models.enums import LabStatus
from src.models.patient import LabValue


_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def to_numeric(value: LabValue) -> float:
    """
    Coerce a raw lab value to a float.

    Numbers pass through. Strings keep only digits, ``.`` and ``-`` before
    conversion, so ``"7.5%"`` becomes ``7.5`` and ``"120/80"`` becomes
    ``12080``. Anything that still fails to convert (including an empty
    remainder) is ``nan``.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return math.nan
    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def is_hba1c(name: str) -> bool:
    return "hba1c" in name.lower()


def classify_lab_status(name: str, value: LabValue) -> str:
    """
    Classify a lab reading.

    Categories are checked in order and the first match wins:
    HbA1c, blood pressure ("bp"/"blood pressure"), oxygenation
    ("oxygen"/"o2"), then the ``normal`` default.
    """
    normalized = name.lower()
    numeric = to_numeric(value)
    finite = math.isfinite(numeric)

    if "hba1c" in normalized:
        if not finite:
            return LabStatus.UNKNOWN.value
        if numeric >= 9:
            return LabStatus.HIGH.value
        if numeric >= 8:
            return LabStatus.ELEVATED.value
        if numeric >= 7:
            return LabStatus.PRE_DIABETIC.value
        return LabStatus.CONTROLLED.value

    if "bp" in normalized or "blood pressure" in normalized:
        if not finite:
            return LabStatus.UNKNOWN.value
        if numeric >= 140:
            return LabStatus.HIGH.value
        if numeric >= 130:
            return LabStatus.ELEVATED.value
        return LabStatus.CONTROLLED.value

    if "oxygen" in normalized or "o2" in normalized:
        if not finite:
            return LabStatus.UNKNOWN.value
        if numeric < 92:
            return LabStatus.LOW.value
        return LabStatus.GOOD.value

    return LabStatus.NORMAL.value
