"""
Cached state management for the Vital Canvas UI.

Clients and services are shared across reruns with ``st.cache_resource``;
the per-user ``DashboardSession`` lives in ``st.session_state``.
"""

import logging
from typing import Optional

import streamlit as st

from src.config import Settings
from src.dashboard.service import DashboardService
from src.dashboard.session import DashboardSession
from src.errors import ConfigurationError
from src.llm.client import LLMClient
from src.matching.criteria import UnrecognizedPolicy
from src.matching.grouping import AIGroupingService
from src.matching.llm_matcher import LLMPatientMatcher
from src.matching.medications import MedicationSuggestionService
from src.matching.update_analyzer import UpdateCriteriaAnalyzer
from src.store.supabase import InMemoryStore, SupabaseStore
from ui.utils import get_api_key, get_secret


logger = logging.getLogger(__name__)


@st.cache_resource
def get_settings() -> Settings:
    settings = Settings.from_env()
    return settings.model_copy(
        update={
            "openai_api_key": get_api_key(),
            "supabase_url": get_secret("SUPABASE_URL"),
            "supabase_anon_key": get_secret("SUPABASE_ANON_KEY"),
        }
    )


@st.cache_resource
def get_llm_client() -> Optional[LLMClient]:
    """Get the shared LLM client.
    
    Returns None when no API key is configured; the AI actions are then disabled.
    """
    try:
        return LLMClient.from_settings(get_settings())
    except ConfigurationError as e:
        logger.warning(f"AI features disabled: {e}")
        return None


@st.cache_resource
def get_dashboard_service() -> DashboardService:
    settings = get_settings()
    if settings.store_configured:
        store = SupabaseStore.from_settings(settings)
    else:
        store = InMemoryStore(error="Supabase environment variables are not configured.")
    return DashboardService(store, policy=UnrecognizedPolicy(settings.unrecognized_criterion_policy))


@st.cache_resource
def get_matcher() -> Optional[LLMPatientMatcher]:
    client = get_llm_client()
    if client is None:
        return None
    return LLMPatientMatcher(client, model=get_settings().match_model)


@st.cache_resource
def get_grouping_service() -> Optional[AIGroupingService]:
    client = get_llm_client()
    if client is None:
        return None
    return AIGroupingService(client, model=get_settings().grouping_model)


@st.cache_resource
def get_medication_service() -> Optional[MedicationSuggestionService]:
    client = get_llm_client()
    if client is None:
        return None
    return MedicationSuggestionService(client, model=get_settings().medication_model)


@st.cache_resource
def get_criteria_analyzer() -> UpdateCriteriaAnalyzer:
    """Works without a client by falling back to keyword extraction."""
    return UpdateCriteriaAnalyzer(get_llm_client(), model=get_settings().criteria_model)


def get_session() -> DashboardSession:
    """The dashboard session of the current browser tab."""
    if "dashboard_session" not in st.session_state:
        st.session_state.dashboard_session = DashboardSession()
    return st.session_state.dashboard_session
