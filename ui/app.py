"""
Streamlit UI for Vital Canvas.

Patient risk dashboard: research updates on the left, patient cards in the
middle, and the AI assistant on the right.
"""

from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import streamlit as st
from dotenv import load_dotenv

from src.utils.logging import setup_logging

# UI module imports
from ui.styles import STYLES
from ui.utils import run_async
from ui.services.state import (
    get_dashboard_service,
    get_llm_client,
    get_session,
    get_settings,
)
from ui.components.assistant import render_assistant_panel
from ui.components.patients import render_patient_grid
from ui.components.updates import render_research_stream

# Load environment variables
load_dotenv()

# Page configuration
st.set_page_config(
    page_title="Vital Canvas",
    page_icon="🩺",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# Apply styles
st.markdown(STYLES, unsafe_allow_html=True)


def load_dashboard():
    """Read and hydrate the pool into the session."""
    snapshot = run_async(get_dashboard_service().load())
    get_session().load(snapshot)


def main():
    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    
    session = get_session()
    if "dashboard_loaded" not in st.session_state:
        load_dashboard()
        st.session_state.dashboard_loaded = True
    
    header_cols = st.columns([6, 1])
    with header_cols[0]:
        st.markdown("## 🩺 Vital Canvas")
        st.caption(
            f"{len(session.snapshot.patients)} patients · "
            f"{len(session.snapshot.updates)} research updates · "
            f"loaded {session.snapshot.loaded_at:%H:%M}"
        )
    with header_cols[1]:
        if st.button("🔄 Reload", use_container_width=True):
            load_dashboard()
            st.rerun()
    
    if session.snapshot.error:
        st.error(f"❌ Failed to load data: {session.snapshot.error}")
    
    if session.selected_ids:
        st.caption(f"Selected: {len(session.selected_ids)} patient(s)")
    
    stream_col, canvas_col, assistant_col = st.columns([1, 3, 1.3])
    
    with stream_col:
        st.markdown("### Research Stream")
        render_research_stream(session)
    
    with assistant_col:
        render_assistant_panel(session, ai_enabled=get_llm_client() is not None)
    
    with canvas_col:
        render_patient_grid(session)


main()
