"""
Assistant panel for the Vital Canvas UI.

Free-text prompt plus the AI actions. Each action has its own request
tracker; its button is disabled while that trigger is requesting.
"""

import streamlit as st

from src.dashboard.session import (
    GROUP_TRIGGER,
    MATCH_TRIGGER,
    MEDICATION_TRIGGER,
    DashboardSession,
)
from src.models.enums import RequestStatus
from src.models.grouping import GroupingResult
from src.models.medication import MedicationSuggestionResult
from ui.config import EXAMPLE_PROMPTS, GROUPING_TYPES, MEDICATION_EXAMPLE
from ui.services.state import get_grouping_service, get_matcher, get_medication_service
from ui.utils import run_async


def _run_match(session: DashboardSession, prompt: str):
    tracker = session.tracker(MATCH_TRIGGER)
    result = tracker.run(lambda: run_async(get_matcher().match(prompt, session.snapshot.patients)))
    if result is None:
        return
    if result.ok:
        session.apply_match(result)
        tracker.succeed()
    else:
        tracker.fail(result.error)


def _run_grouping(session: DashboardSession, prompt: str, grouping_type: str):
    tracker = session.tracker(GROUP_TRIGGER)
    result = tracker.run(
        lambda: run_async(
            get_grouping_service().group(
                prompt,
                session.snapshot.patients,
                grouping_type=grouping_type,
                highlighted=session.highlighted_ids,
            )
        )
    )
    if result is None:
        return
    st.session_state.last_grouping = result
    if result.ok:
        session.apply_grouping(result)
        tracker.succeed()
    else:
        tracker.fail(result.error)


def _run_medications(session: DashboardSession, prompt: str):
    tracker = session.tracker(MEDICATION_TRIGGER)
    result = tracker.run(lambda: run_async(get_medication_service().suggest(prompt)))
    if result is None:
        return
    st.session_state.last_medications = result
    if result.ok:
        tracker.succeed()
    else:
        tracker.fail(result.error)


def render_grouping_result(result: GroupingResult):
    if result.analysis:
        st.markdown(result.analysis)
    for item in result.recommendations:
        st.markdown(f"- {item}")
    if result.summary:
        st.caption(result.summary)


def render_medication_result(result: MedicationSuggestionResult):
    for alternative in result.alternatives:
        with st.expander(f"💊 **{alternative.medication}**", expanded=False):
            st.markdown(alternative.reason)
            st.markdown(f"**Coverage:** {alternative.coverage}")
            st.markdown(f"**Effectiveness:** {alternative.effectiveness}")
            st.markdown(f"**Side effects:** {alternative.side_effects}")
    if result.recommendations:
        st.markdown("**Recommendations**")
        for item in result.recommendations:
            st.markdown(f"- {item}")


def render_assistant_panel(session: DashboardSession, ai_enabled: bool):
    """Render the prompt box, the action buttons and the latest AI results."""
    st.markdown("### Assistant")
    
    if not ai_enabled:
        st.warning("⚠️ OPENAI_API_KEY not set. AI actions are disabled.")
    
    example_cols = st.columns(len(EXAMPLE_PROMPTS))
    for col, (label, text) in zip(example_cols, EXAMPLE_PROMPTS):
        with col:
            if st.button(label, key=f"example_{label}", use_container_width=True):
                st.session_state.assistant_prompt = text
    
    prompt = st.text_area(
        "Ask about your patients",
        key="assistant_prompt",
        placeholder=MEDICATION_EXAMPLE,
        height=100,
    )
    grouping_label = st.selectbox("Grouping", options=list(GROUPING_TYPES.keys()))
    session.input_state.multi_select = st.checkbox(
        "Multi-select cards",
        value=session.input_state.multi_select,
    )
    
    has_prompt = bool(prompt and prompt.strip())
    cols = st.columns(3)
    with cols[0]:
        if st.button(
            "Find matches",
            use_container_width=True,
            disabled=not (ai_enabled and has_prompt) or session.tracker(MATCH_TRIGGER).is_requesting,
        ):
            with st.spinner("Matching patients..."):
                _run_match(session, prompt)
    with cols[1]:
        if st.button(
            "Group patients",
            use_container_width=True,
            disabled=not (ai_enabled and has_prompt) or session.tracker(GROUP_TRIGGER).is_requesting,
        ):
            with st.spinner("Grouping patients..."):
                _run_grouping(session, prompt, GROUPING_TYPES[grouping_label])
    with cols[2]:
        if st.button(
            "Suggest medications",
            use_container_width=True,
            disabled=not (ai_enabled and has_prompt) or session.tracker(MEDICATION_TRIGGER).is_requesting,
        ):
            with st.spinner("Generating suggestions..."):
                _run_medications(session, prompt)
    
    # Finished requests return to idle once their outcome has been shown
    for trigger in (MATCH_TRIGGER, GROUP_TRIGGER, MEDICATION_TRIGGER):
        tracker = session.tracker(trigger)
        if tracker.error:
            st.error(f"❌ {tracker.error}")
        if tracker.status in (RequestStatus.SUCCEEDED, RequestStatus.FAILED):
            tracker.reset()
    
    clear_cols = st.columns(2)
    with clear_cols[0]:
        if st.button("Clear highlights", use_container_width=True):
            session.clear_highlights()
    with clear_cols[1]:
        if st.button("Clear groups", use_container_width=True, disabled=not session.groups):
            session.clear_groups()
    
    grouping = st.session_state.get("last_grouping")
    if grouping is not None and grouping.ok:
        with st.expander("📊 **Grouping analysis**", expanded=True):
            render_grouping_result(grouping)
    
    medications = st.session_state.get("last_medications")
    if medications is not None and medications.ok:
        with st.expander("💊 **Medication alternatives**", expanded=True):
            render_medication_result(medications)
