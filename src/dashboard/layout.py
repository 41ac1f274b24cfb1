"""
Canvas placement for patient cards and AI-created groups.

Positions are plain data; the renderer decides how to draw them.
"""

import math
from typing import Iterable, Mapping, Sequence

from src.models.grouping import PatientGroup
from src.models.patient import Position


CARD_SPACING_X = 300
CARD_SPACING_Y = 400
CANVAS_MARGIN = 50

GROUP_SPACING_X = 360
GROUP_MEMBER_SPACING_Y = 420
GROUP_FIRST_MEMBER_Y = 120
GROUP_ANCHOR_OFFSET_Y = 60


def initial_position(index: int, total: int) -> Position:
    """Grid slot for the ``index``-th card of ``total``, roughly square."""
    cols = max(1, math.ceil(math.sqrt(max(total, 1))))
    return Position(
        x=(index % cols) * CARD_SPACING_X + CANVAS_MARGIN,
        y=(index // cols) * CARD_SPACING_Y + CANVAS_MARGIN,
    )


def initial_positions(patient_ids: Sequence[str]) -> dict[str, Position]:
    total = len(patient_ids)
    return {patient_id: initial_position(index, total) for index, patient_id in enumerate(patient_ids)}


def layout_groups(
    groups: Sequence[PatientGroup],
    known_ids: Iterable[str],
) -> tuple[list[PatientGroup], dict[str, Position]]:
    """
    Place each group in its own column band and stack its members.
    
    Args:
        groups: Groups in display order
        known_ids: Ids currently on the canvas; other ids are skipped
    
    Returns:
        The groups with their anchor positions set, and the new card
        position of every placed member.
    """
    known = set(known_ids)
    placed_groups = []
    positions: dict[str, Position] = {}
    
    for group_index, group in enumerate(groups):
        x = CANVAS_MARGIN + group_index * GROUP_SPACING_X
        members = [patient_id for patient_id in group.patient_ids if patient_id in known]
        
        for member_index, patient_id in enumerate(members):
            positions[patient_id] = Position(
                x=x,
                y=GROUP_FIRST_MEMBER_Y + member_index * GROUP_MEMBER_SPACING_Y,
            )
        
        placed_groups.append(
            group.model_copy(
                update={"position": Position(x=x, y=GROUP_FIRST_MEMBER_Y - GROUP_ANCHOR_OFFSET_Y)}
            )
        )
    
    return placed_groups, positions


def merge_positions(
    current: Mapping[str, Position],
    moved: Mapping[str, Position],
) -> dict[str, Position]:
    merged = dict(current)
    merged.update(moved)
    return merged
