"""
FastAPI dependency providers.

Every route gets its collaborators from here, so tests can swap them with
``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends

from src.config import Settings
from src.dashboard.service import DashboardService
from src.llm.client import LLMClient
from src.matching.criteria import UnrecognizedPolicy
from src.matching.grouping import AIGroupingService
from src.matching.llm_matcher import LLMPatientMatcher
from src.matching.medications import MedicationSuggestionService
from src.matching.update_analyzer import UpdateCriteriaAnalyzer
from src.store.supabase import InMemoryStore, SupabaseStore
from src.utils.protocols import LLMClientProtocol, PatientStoreProtocol


STORE_NOT_CONFIGURED = "Supabase environment variables are not configured."


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def get_optional_llm_client(settings: Settings = Depends(get_settings)) -> Optional[LLMClientProtocol]:
    if not settings.llm_configured:
        return None
    return LLMClient.from_settings(settings)


def get_store(settings: Settings = Depends(get_settings)) -> PatientStoreProtocol:
    """The Supabase store, or a store whose reads fail with a configuration error."""
    if not settings.store_configured:
        return InMemoryStore(error=STORE_NOT_CONFIGURED)
    return SupabaseStore.from_settings(settings)


def get_dashboard_service(
    store: PatientStoreProtocol = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> DashboardService:
    return DashboardService(store, policy=UnrecognizedPolicy(settings.unrecognized_criterion_policy))


def get_matcher_factory(settings: Settings = Depends(get_settings)) -> Callable[[], LLMPatientMatcher]:
    """
    A builder for the matcher.

    The LLM client is created only when the builder is called, which raises
    ConfigurationError when no API key is set.
    """
    return lambda: LLMPatientMatcher(LLMClient.from_settings(settings), model=settings.match_model)


def get_grouping_factory(settings: Settings = Depends(get_settings)) -> Callable[[], AIGroupingService]:
    return lambda: AIGroupingService(LLMClient.from_settings(settings), model=settings.grouping_model)


def get_medication_factory(
    settings: Settings = Depends(get_settings),
) -> Callable[[], MedicationSuggestionService]:
    return lambda: MedicationSuggestionService(LLMClient.from_settings(settings), model=settings.medication_model)


def get_criteria_analyzer(
    llm_client: Optional[LLMClientProtocol] = Depends(get_optional_llm_client),
    settings: Settings = Depends(get_settings),
) -> UpdateCriteriaAnalyzer:
    return UpdateCriteriaAnalyzer(llm_client, model=settings.criteria_model)
