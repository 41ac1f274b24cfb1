"""
Vital Canvas - Criterion variants

Tagged representation of an update's free-text criterion rule. The stored
text is parsed once into one of these variants and evaluated by pattern
matching on ``kind``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class LabThreshold(BaseModel):
    """Patient has a lab whose name contains ``lab`` and whose value satisfies ``op value``."""

    kind: Literal["lab_threshold"] = "lab_threshold"
    lab: str
    op: Literal[">", ">=", "<", "<="] = ">"
    value: float


class HasCondition(BaseModel):
    """Patient has a condition containing ``substring``."""

    kind: Literal["has_condition"] = "has_condition"
    substring: str


class HasMedication(BaseModel):
    """Patient takes a medication containing ``substring``."""

    kind: Literal["has_medication"] = "has_medication"
    substring: str


class ConditionWithMinRisk(BaseModel):
    """Patient has a condition containing ``substring`` and a risk score of at least ``min_risk``."""

    kind: Literal["condition_with_min_risk"] = "condition_with_min_risk"
    substring: str
    min_risk: int


class AllOf(BaseModel):
    """
    Every nested criterion must hold.

    The phrase table never produces this; it is for composite rules built in
    code or loaded from stored JSON.
    """

    kind: Literal["all_of"] = "all_of"
    criteria: list["Criterion"] = Field(default_factory=list)


class Unrecognized(BaseModel):
    """Rule text that no known phrase covers; outcome decided by policy."""

    kind: Literal["unrecognized"] = "unrecognized"
    text: str
    reason: str = "no_pattern"


Criterion = Annotated[
    Union[LabThreshold, HasCondition, HasMedication, ConditionWithMinRisk, AllOf, Unrecognized],
    Field(discriminator="kind"),
]

AllOf.model_rebuild()
