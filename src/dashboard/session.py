"""
Per-session dashboard state.

Everything the canvas needs between user actions lives on one
``DashboardSession`` object: highlighted and glowing patients, selection,
AI-created groups, card positions, modifier-key state and the status of
each AI trigger. Nothing here is global; each UI session owns its own.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, TypeVar

from src.dashboard.layout import initial_positions, layout_groups, merge_positions
from src.matching.validation import filter_known_ids
from src.models.dashboard import DashboardSnapshot
from src.models.enums import RequestStatus
from src.models.grouping import GroupingResult, MatchResult, PatientGroup
from src.models.patient import Position


logger = logging.getLogger(__name__)

T = TypeVar("T")

GLOW_DURATION = timedelta(seconds=3)

# AI triggers exposed by the assistant panel
MATCH_TRIGGER = "match"
GROUP_TRIGGER = "group"
MEDICATION_TRIGGER = "medications"
FIND_MATCHES_TRIGGER = "find-matches"


@dataclass
class RequestTracker:
    """
    Status of one user-triggered AI request.
    
    A trigger that is already requesting refuses to begin again. Results
    from different triggers are applied in completion order, so the last
    one to finish wins.
    """
    trigger: str
    status: RequestStatus = RequestStatus.IDLE
    request_seq: int = 0
    error: Optional[str] = None
    
    @property
    def is_requesting(self) -> bool:
        return self.status == RequestStatus.REQUESTING
    
    def begin(self) -> Optional[int]:
        """Start a request; returns its sequence number, or None if one is in flight."""
        if self.is_requesting:
            logger.debug(f"Ignoring duplicate '{self.trigger}' request while one is in flight")
            return None
        self.request_seq += 1
        self.status = RequestStatus.REQUESTING
        self.error = None
        return self.request_seq
    
    def succeed(self) -> None:
        self.status = RequestStatus.SUCCEEDED
        self.error = None
    
    def fail(self, error: str) -> None:
        self.status = RequestStatus.FAILED
        self.error = error
        logger.warning(f"'{self.trigger}' request #{self.request_seq} failed: {error}")
    
    def run(self, request: Callable[[], T]) -> Optional[T]:
        """
        Begin a request, call ``request`` and return its result.

        Returns None when a request is already in flight or ``request``
        raises. A raised exception marks the tracker failed with its message.
        The caller still records success or failure for a returned result.
        """
        if self.begin() is None:
            return None
        try:
            return request()
        except Exception as e:
            logger.exception(f"'{self.trigger}' request #{self.request_seq} raised")
            self.fail(str(e) or type(e).__name__)
            return None
    
    def reset(self) -> None:
        self.status = RequestStatus.IDLE
        self.error = None


@dataclass
class InputState:
    """Modifier keys held during a canvas interaction."""
    shift: bool = False
    multi_select: bool = False
    
    @property
    def extends_selection(self) -> bool:
        return self.shift or self.multi_select


@dataclass
class DashboardSession:
    """Mutable UI state for one dashboard session."""
    snapshot: DashboardSnapshot = field(default_factory=DashboardSnapshot)
    highlighted_ids: list[str] = field(default_factory=list)
    glowing_ids: list[str] = field(default_factory=list)
    glow_until: Optional[datetime] = None
    selected_ids: list[str] = field(default_factory=list)
    groups: list[PatientGroup] = field(default_factory=list)
    positions: dict[str, Position] = field(default_factory=dict)
    input_state: InputState = field(default_factory=InputState)
    trackers: dict[str, RequestTracker] = field(default_factory=dict)
    
    def __post_init__(self):
        if not self.positions:
            self.positions = initial_positions(self.snapshot.patient_ids())
    
    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------
    
    def load(self, snapshot: DashboardSnapshot) -> None:
        """Replace the pool. Session state tied to the old pool is dropped."""
        self.snapshot = snapshot
        self.highlighted_ids = []
        self.glowing_ids = []
        self.glow_until = None
        self.selected_ids = []
        self.groups = []
        self.positions = initial_positions(snapshot.patient_ids())
    
    def tracker(self, trigger: str) -> RequestTracker:
        if trigger not in self.trackers:
            self.trackers[trigger] = RequestTracker(trigger=trigger)
        return self.trackers[trigger]
    
    # ------------------------------------------------------------------
    # Highlighting
    # ------------------------------------------------------------------
    
    def highlight(self, patient_ids: Iterable[str], now: Optional[datetime] = None) -> list[str]:
        """
        Highlight ``patient_ids`` and make them glow for the glow window.
        
        Ids not in the current pool are ignored.
        
        Returns:
            The ids actually highlighted
        """
        kept, _ = filter_known_ids(patient_ids, set(self.snapshot.patient_ids()))
        self.highlighted_ids = kept
        self.glowing_ids = list(kept)
        self.glow_until = (now or datetime.now()) + GLOW_DURATION if kept else None
        return kept
    
    def current_glowing(self, now: Optional[datetime] = None) -> list[str]:
        """Glowing ids, clearing them once the glow window has passed."""
        if self.glow_until is not None and (now or datetime.now()) >= self.glow_until:
            self.glowing_ids = []
            self.glow_until = None
        return list(self.glowing_ids)
    
    def clear_highlights(self) -> None:
        self.highlighted_ids = []
        self.glowing_ids = []
        self.glow_until = None
    
    def highlight_update(self, update_id: str, now: Optional[datetime] = None) -> list[str]:
        """Highlight the precomputed impacted patients of an update card."""
        update = self.snapshot.find_update(update_id)
        if update is None:
            logger.warning(f"Update {update_id} is not in the current snapshot")
            return []
        return self.highlight(update.impacted_patients, now)
    
    def apply_match(self, result: MatchResult, now: Optional[datetime] = None) -> list[str]:
        """Highlight the matched patients. A failed match leaves the highlight unchanged."""
        if not result.ok:
            return list(self.highlighted_ids)
        return self.highlight(result.matching_patient_ids, now)
    
    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    
    def select(self, patient_id: str, input_state: Optional[InputState] = None) -> list[str]:
        """Click a card: toggle it into the selection with a modifier held, otherwise select only it."""
        state = input_state or self.input_state
        if patient_id not in self.snapshot.patient_ids():
            return list(self.selected_ids)
        
        if state.extends_selection:
            if patient_id in self.selected_ids:
                self.selected_ids = [pid for pid in self.selected_ids if pid != patient_id]
            else:
                self.selected_ids = self.selected_ids + [patient_id]
        else:
            self.selected_ids = [patient_id]
        return list(self.selected_ids)
    
    def clear_selection(self) -> None:
        self.selected_ids = []
    
    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------
    
    def apply_grouping(self, result: GroupingResult, now: Optional[datetime] = None) -> list[PatientGroup]:
        """
        Turn a grouping result into canvas groups and move member cards.
        
        Existing groups are replaced. Highlighted patients from the result,
        when present, become the new highlight.
        """
        if not result.ok:
            return list(self.groups)
        
        groups = [
            PatientGroup(
                id=f"group-{uuid.uuid4().hex[:8]}",
                name=grouping.name,
                description=grouping.description,
                patient_ids=grouping.patient_ids,
                criteria=grouping.criteria,
                priority=grouping.priority,
            )
            for grouping in result.groupings
        ]
        placed, moved = layout_groups(groups, self.snapshot.patient_ids())
        
        self.groups = placed
        self.positions = merge_positions(self.positions, moved)
        if result.highlighted_patients:
            self.highlight(result.highlighted_patients, now)
        
        logger.info(f"Applied {len(placed)} group(s), moved {len(moved)} card(s)")
        return list(self.groups)
    
    def clear_groups(self) -> None:
        """Drop all groups and return cards to the grid."""
        self.groups = []
        self.positions = initial_positions(self.snapshot.patient_ids())
    
    def group_members(self, group: PatientGroup) -> list[str]:
        """Members of ``group`` still present in the pool; stale ids are skipped."""
        known = set(self.snapshot.patient_ids())
        return [patient_id for patient_id in group.patient_ids if patient_id in known]
