"""Tests for dashboard loading and per-session canvas state."""

from datetime import timedelta

import pytest

from src.clinical.hydration import hydrate_updates
from src.dashboard import DashboardService, DashboardSession, InputState, RequestTracker
from src.dashboard.layout import initial_positions
from src.dashboard.session import GLOW_DURATION, MATCH_TRIGGER
from src.models.dashboard import DashboardSnapshot
from src.models.enums import RequestStatus
from src.models.grouping import Grouping, GroupingResult, MatchResult
from src.models.patient import Position
from src.store import InMemoryStore
from tests.conftest import NOW, PATIENT_1, PATIENT_2, PATIENT_3


@pytest.fixture
def snapshot(patients, update_rows, now):
    return DashboardSnapshot(patients=patients, updates=hydrate_updates(update_rows, patients, now))


@pytest.fixture
def session(snapshot):
    return DashboardSession(snapshot=snapshot)


class TestDashboardService:
    """Tests for DashboardService.load."""

    @pytest.mark.asyncio
    async def test_load_hydrates_both_collections(self, patient_rows, update_rows, now):
        service = DashboardService(InMemoryStore(patients=patient_rows, updates=update_rows))
        
        snapshot = await service.load(now)
        
        assert snapshot.error is None
        assert snapshot.patient_ids() == [PATIENT_1, PATIENT_2, PATIENT_3]
        assert [update.id for update in snapshot.updates] == ["update-1", "update-2"]
        assert snapshot.find_update("update-1").impacted_patients == [PATIENT_1]

    @pytest.mark.asyncio
    async def test_store_error_gives_empty_snapshot(self):
        service = DashboardService(InMemoryStore(error="Supabase environment variables are not configured."))
        
        snapshot = await service.load(NOW)
        
        assert snapshot.error == "Supabase environment variables are not configured."
        assert snapshot.patients == []
        assert snapshot.updates == []

    @pytest.mark.asyncio
    async def test_malformed_rows(self, update_rows):
        store = InMemoryStore(patients=[{"id": "p-1", "age": "not a number"}], updates=update_rows)
        
        snapshot = await DashboardService(store).load(NOW)
        
        assert snapshot.error == "Data store returned malformed records"
        assert snapshot.patients == []

    @pytest.mark.asyncio
    async def test_empty_store(self):
        snapshot = await DashboardService(InMemoryStore()).load(NOW)
        
        assert snapshot.error is None
        assert snapshot.patients == []
        assert snapshot.updates == []


class TestRequestTracker:
    """Tests for RequestTracker."""

    def test_lifecycle(self):
        tracker = RequestTracker(trigger=MATCH_TRIGGER)
        
        assert tracker.begin() == 1
        assert tracker.is_requesting
        tracker.succeed()
        assert tracker.status == RequestStatus.SUCCEEDED
        tracker.reset()
        assert tracker.status == RequestStatus.IDLE

    def test_refuses_duplicate_while_requesting(self):
        tracker = RequestTracker(trigger=MATCH_TRIGGER)
        tracker.begin()
        
        assert tracker.begin() is None
        assert tracker.request_seq == 1

    def test_failure_keeps_error_until_next_begin(self):
        tracker = RequestTracker(trigger=MATCH_TRIGGER)
        tracker.begin()
        tracker.fail("Failed to process AI analysis")
        
        assert tracker.status == RequestStatus.FAILED
        assert tracker.error == "Failed to process AI analysis"
        
        assert tracker.begin() == 2
        assert tracker.error is None

    def test_run_returns_result_and_leaves_outcome_to_caller(self):
        tracker = RequestTracker(trigger=MATCH_TRIGGER)
        
        assert tracker.run(lambda: "answer") == "answer"
        assert tracker.is_requesting

    def test_run_marks_failed_when_request_raises(self):
        tracker = RequestTracker(trigger=MATCH_TRIGGER)
        
        def request():
            raise RuntimeError("event loop closed")
        
        assert tracker.run(request) is None
        assert tracker.status == RequestStatus.FAILED
        assert tracker.error == "event loop closed"
        assert tracker.begin() == 2

    def test_run_skips_request_while_one_is_in_flight(self):
        tracker = RequestTracker(trigger=MATCH_TRIGGER)
        tracker.begin()
        calls = []
        
        assert tracker.run(lambda: calls.append(1)) is None
        assert calls == []
        assert tracker.request_seq == 1


class TestHighlighting:
    """Tests for highlight and glow state."""

    def test_highlight_filters_unknown_ids(self, session):
        kept = session.highlight([PATIENT_2, "not-in-pool"], NOW)
        
        assert kept == [PATIENT_2]
        assert session.highlighted_ids == [PATIENT_2]
        assert session.glow_until == NOW + GLOW_DURATION

    def test_glow_expires(self, session):
        session.highlight([PATIENT_1], NOW)
        
        assert session.current_glowing(NOW + timedelta(seconds=1)) == [PATIENT_1]
        assert session.current_glowing(NOW + GLOW_DURATION) == []
        # Highlight outlives the glow
        assert session.highlighted_ids == [PATIENT_1]

    def test_empty_highlight_has_no_glow(self, session):
        session.highlight([], NOW)
        
        assert session.glow_until is None
        assert session.current_glowing(NOW) == []

    def test_highlight_update(self, session):
        assert session.highlight_update("update-2", NOW) == [PATIENT_2]

    def test_highlight_unknown_update(self, session):
        session.highlight([PATIENT_1], NOW)
        
        assert session.highlight_update("missing", NOW) == []
        assert session.highlighted_ids == [PATIENT_1]

    def test_failed_match_keeps_highlight(self, session):
        session.highlight([PATIENT_1], NOW)
        
        session.apply_match(MatchResult(error="Failed to process AI analysis"), NOW)
        
        assert session.highlighted_ids == [PATIENT_1]

    def test_last_match_wins(self, session):
        session.apply_match(MatchResult(matching_patient_ids=[PATIENT_1]), NOW)
        session.apply_match(MatchResult(matching_patient_ids=[PATIENT_3]), NOW)
        
        assert session.highlighted_ids == [PATIENT_3]

    def test_empty_match_clears_highlight(self, session):
        session.highlight([PATIENT_1], NOW)
        
        session.apply_match(MatchResult(matching_patient_ids=[]), NOW)
        
        assert session.highlighted_ids == []

    def test_clear_highlights(self, session):
        session.highlight([PATIENT_1], NOW)
        session.clear_highlights()
        
        assert session.highlighted_ids == []
        assert session.current_glowing(NOW) == []


class TestSelection:
    """Tests for card selection."""

    def test_plain_click_replaces_selection(self, session):
        session.select(PATIENT_1)
        session.select(PATIENT_2)
        
        assert session.selected_ids == [PATIENT_2]

    def test_modifier_toggles(self, session):
        multi = InputState(multi_select=True)
        session.select(PATIENT_1, multi)
        session.select(PATIENT_2, multi)
        session.select(PATIENT_1, InputState(shift=True))
        
        assert session.selected_ids == [PATIENT_2]

    def test_session_input_state_is_default(self, session):
        session.input_state = InputState(shift=True)
        session.select(PATIENT_1)
        session.select(PATIENT_3)
        
        assert session.selected_ids == [PATIENT_1, PATIENT_3]

    def test_unknown_patient_ignored(self, session):
        session.select(PATIENT_1)
        
        assert session.select("not-in-pool") == [PATIENT_1]

    def test_clear_selection(self, session):
        session.select(PATIENT_1)
        session.clear_selection()
        
        assert session.selected_ids == []


class TestGroups:
    """Tests for applying AI groupings to the canvas."""

    def test_initial_grid(self, session):
        assert session.positions == initial_positions([PATIENT_1, PATIENT_2, PATIENT_3])

    def test_apply_grouping(self, session):
        result = GroupingResult(
            groupings=[
                Grouping(name="Metabolic", patient_ids=[PATIENT_1, "stale-id"]),
                Grouping(name="Respiratory", patient_ids=[PATIENT_2, PATIENT_3]),
            ],
            highlighted_patients=[PATIENT_2],
        )
        
        groups = session.apply_grouping(result, NOW)
        
        assert [group.name for group in groups] == ["Metabolic", "Respiratory"]
        assert all(group.id.startswith("group-") for group in groups)
        assert groups[0].id != groups[1].id
        assert session.positions[PATIENT_1] == Position(x=50, y=120)
        assert session.positions[PATIENT_3] == Position(x=410, y=540)
        assert "stale-id" not in session.positions
        assert session.group_members(groups[0]) == [PATIENT_1]
        assert session.highlighted_ids == [PATIENT_2]

    def test_failed_grouping_changes_nothing(self, session):
        before = dict(session.positions)
        
        groups = session.apply_grouping(GroupingResult(error="Failed to process AI analysis"), NOW)
        
        assert groups == []
        assert session.positions == before

    def test_clear_groups_restores_grid(self, session):
        session.apply_grouping(GroupingResult(groupings=[Grouping(name="All", patient_ids=[PATIENT_3])]), NOW)
        
        session.clear_groups()
        
        assert session.groups == []
        assert session.positions == initial_positions([PATIENT_1, PATIENT_2, PATIENT_3])

    def test_load_resets_session_state(self, session):
        session.highlight([PATIENT_1], NOW)
        session.select(PATIENT_2)
        
        session.load(DashboardSnapshot(patients=session.snapshot.patients[:1]))
        
        assert session.highlighted_ids == []
        assert session.selected_ids == []
        assert list(session.positions) == [PATIENT_1]
