"""
Patient card components for the Vital Canvas UI.

Renders the patient grid, either as one flat grid or one column per AI group.
"""

from html import escape

import streamlit as st

from src.dashboard.session import DashboardSession
from src.models.patient import Patient
from ui.config import get_lab_status_color, get_priority_color, get_priority_emoji


def render_patient_card(patient: Patient, highlighted: bool = False, glowing: bool = False):
    """Render one patient card as HTML."""
    color = get_priority_color(patient.priority)
    classes = "patient-card"
    if highlighted:
        classes += " highlighted"
    if glowing:
        classes += " glowing"
    
    labs = "".join(
        f'<span class="lab-chip" style="border-color: {get_lab_status_color(lab.status)};">'
        f'{escape(lab.name)}: {escape(str(lab.value))} '
        f'<span style="color: {get_lab_status_color(lab.status)};">({escape(lab.status)})</span>'
        f'</span>'
        for lab in patient.labs
    )
    conditions = ", ".join(escape(condition) for condition in patient.conditions) or "None recorded"
    meds = ", ".join(escape(med) for med in patient.meds) or "None recorded"
    
    st.markdown(
        f'<div class="{classes}" style="border-top: 3px solid {color};">'
        f'<div class="patient-header">'
        f'<span class="patient-name">{escape(patient.name) or "Unnamed patient"}</span>'
        f'<span class="risk-badge" style="background: {color};">{patient.risk_score}</span>'
        f'</div>'
        f'<div class="patient-meta">{get_priority_emoji(patient.priority)} {patient.priority.title()} · '
        f'Age {patient.age} · Last visit {escape(patient.last_visit)}</div>'
        f'<div class="patient-row"><b>Conditions:</b> {conditions}</div>'
        f'<div class="patient-row"><b>Meds:</b> {meds}</div>'
        f'<div class="patient-labs">{labs}</div>'
        f'</div>',
        unsafe_allow_html=True
    )


def _render_cards(patients: list[Patient], session: DashboardSession, columns: int):
    highlighted = set(session.highlighted_ids)
    glowing = set(session.current_glowing())
    cols = st.columns(columns)
    for i, patient in enumerate(patients):
        with cols[i % columns]:
            render_patient_card(
                patient,
                highlighted=patient.id in highlighted,
                glowing=patient.id in glowing,
            )
            if st.button("Select", key=f"select_{patient.id}", use_container_width=True):
                session.select(patient.id)


def render_patient_grid(session: DashboardSession, columns: int = 3):
    """Render every patient, grouped when AI groups are active."""
    patients = session.snapshot.patients
    if not patients:
        st.info("No patients loaded.")
        return
    
    if not session.groups:
        _render_cards(patients, session, columns)
        return
    
    by_id = {patient.id: patient for patient in patients}
    grouped: set[str] = set()
    for group in session.groups:
        members = [by_id[pid] for pid in session.group_members(group)]
        grouped.update(patient.id for patient in members)
        st.markdown(
            f'<div class="group-header" style="border-left: 3px solid {get_priority_color(group.priority)};">'
            f'<b>{escape(group.name)}</b> · {len(members)} patient(s)'
            f'<div class="group-description">{escape(group.description)}</div>'
            f'</div>',
            unsafe_allow_html=True
        )
        if members:
            _render_cards(members, session, columns)
    
    ungrouped = [patient for patient in patients if patient.id not in grouped]
    if ungrouped:
        st.markdown("**Ungrouped**")
        _render_cards(ungrouped, session, columns)
