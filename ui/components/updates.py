"""
Research stream component for the Vital Canvas UI.
"""

from html import escape

import streamlit as st

from src.dashboard.session import FIND_MATCHES_TRIGGER, DashboardSession
from src.matching.update_analyzer import filter_patients_by_criteria
from src.models.update import ResearchUpdate
from ui.config import get_category_color, get_priority_color
from ui.services.state import get_criteria_analyzer
from ui.utils import run_async


def _update_text(update: ResearchUpdate) -> str:
    parts = [update.title, update.summary, update.rule_condition, update.rule_criterion]
    return "\n".join(part for part in parts if part)


def _run_find_matches(session: DashboardSession, update: ResearchUpdate):
    """Extract criteria from the update text and highlight the patients meeting them."""
    tracker = session.tracker(FIND_MATCHES_TRIGGER)
    criteria = tracker.run(lambda: run_async(get_criteria_analyzer().analyze(_update_text(update))))
    if criteria is None:
        return
    matching = filter_patients_by_criteria(criteria, session.snapshot.patients)
    session.highlight([patient.id for patient in matching])
    tracker.succeed()


def render_research_stream(session: DashboardSession):
    """Render the update cards. "Show impacted" highlights the precomputed matches."""
    updates = session.snapshot.updates
    if not updates:
        st.caption("No research updates.")
        return
    
    finding = session.tracker(FIND_MATCHES_TRIGGER).is_requesting
    
    for update in updates:
        color = get_category_color(update.category)
        st.markdown(
            f'<div class="update-card" style="border-left: 3px solid {color};">'
            f'<div class="update-meta">'
            f'<span style="color: {color};">{escape(update.category)}</span> · '
            f'<span style="color: {get_priority_color(update.urgency)};">{escape(update.urgency)}</span> · '
            f'{escape(update.read_time)} · {escape(update.timestamp)}'
            f'</div>'
            f'<div class="update-title">{escape(update.title or "Untitled update")}</div>'
            f'<div class="update-summary">{escape(update.summary or "")}</div>'
            f'</div>',
            unsafe_allow_html=True
        )
        count = len(update.impacted_patients)
        cols = st.columns(2)
        with cols[0]:
            if st.button(
                f"Show impacted ({count})",
                key=f"update_{update.id}",
                disabled=count == 0,
                use_container_width=True,
            ):
                session.highlight_update(update.id)
                st.rerun()
        with cols[1]:
            if st.button(
                "AI match",
                key=f"find_matches_{update.id}",
                disabled=finding,
                use_container_width=True,
            ):
                with st.spinner("Extracting criteria..."):
                    _run_find_matches(session, update)
                session.tracker(FIND_MATCHES_TRIGGER).reset()
                st.rerun()
