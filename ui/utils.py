"""
Utility functions for the Vital Canvas UI.

This module contains async helpers and credential lookup.
"""

import asyncio
import os
from typing import TypeVar, Coroutine, Any, Optional

import streamlit as st

# Type variable for async return type
T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run an async coroutine safely in Streamlit context.
    
    Handles the case where an event loop may already be running
    (e.g., future Streamlit async features).
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop, safe to use asyncio.run
        return asyncio.run(coro)
    
    # Loop already running - use nest_asyncio pattern
    import nest_asyncio
    nest_asyncio.apply()
    return loop.run_until_complete(coro)


def get_secret(name: str) -> Optional[str]:
    """
    Read a credential from Streamlit secrets (cloud) or the environment (local).
    
    Priority:
    1. Streamlit secrets (for Streamlit Cloud deployment)
    2. Environment variable (for local development)
    """
    try:
        return st.secrets[name]
    except (KeyError, FileNotFoundError):
        pass
    
    return os.getenv(name)


def get_api_key() -> Optional[str]:
    """LLM API key: OPENAI_API_KEY, falling back to OPENROUTER_API_KEY."""
    return get_secret("OPENAI_API_KEY") or get_secret("OPENROUTER_API_KEY")
