"""
Supabase (PostgREST) read client.

Only two read queries are needed: all patients, and all research updates
newest first. Rows are returned as plain dicts; hydration normalizes them.
"""

import logging
from typing import Any, Optional

import httpx

from src.config import Settings
from src.errors import ConfigurationError, DataStoreError


logger = logging.getLogger(__name__)


class SupabaseStore:
    """
    Client for the Supabase REST API.
    
    Uses the anon key for both the ``apikey`` header and the bearer token,
    as the browser client does.
    """
    
    PATIENTS_TABLE = "patients"
    UPDATES_TABLE = "research_updates"
    
    def __init__(self, url: str, anon_key: str, timeout: float = 15.0):
        """
        Initialize the store client.
        
        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            anon_key: Public anon key
            timeout: HTTP request timeout in seconds
        """
        if not url or not anon_key:
            raise ConfigurationError("Supabase environment variables are not configured.")
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.anon_key = anon_key
        self.timeout = timeout
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseStore":
        return cls(url=settings.supabase_url or "", anon_key=settings.supabase_anon_key or "")
    
    def _headers(self) -> dict:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Accept": "application/json",
        }
    
    async def _select(self, table: str, order: Optional[str] = None) -> list[dict[str, Any]]:
        params = {"select": "*"}
        if order:
            params["order"] = order
        
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.base_url}/{table}",
                    params=params,
                    headers=self._headers(),
                )
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to read '{table}' from Supabase: {e}")
            raise DataStoreError(f"Unable to load {table} from Supabase: {e}") from e
        except ValueError as e:
            raise DataStoreError(f"Supabase returned invalid JSON for {table}") from e
        
        if not isinstance(rows, list):
            raise DataStoreError(f"Unexpected response shape for {table}")
        
        logger.debug(f"Loaded {len(rows)} rows from '{table}'")
        return rows
    
    async def fetch_patients(self) -> list[dict[str, Any]]:
        return await self._select(self.PATIENTS_TABLE)
    
    async def fetch_updates(self) -> list[dict[str, Any]]:
        return await self._select(self.UPDATES_TABLE, order="created_at.desc")


class InMemoryStore:
    """
    Store double backed by plain lists.
    
    Used by tests and offline demos; ``error`` makes every read fail.
    """
    
    def __init__(
        self,
        patients: Optional[list[dict[str, Any]]] = None,
        updates: Optional[list[dict[str, Any]]] = None,
        error: Optional[str] = None,
    ):
        self.patients = list(patients or [])
        self.updates = list(updates or [])
        self.error = error
    
    async def fetch_patients(self) -> list[dict[str, Any]]:
        if self.error:
            raise DataStoreError(self.error)
        return [dict(row) for row in self.patients]
    
    async def fetch_updates(self) -> list[dict[str, Any]]:
        if self.error:
            raise DataStoreError(self.error)
        return sorted(
            (dict(row) for row in self.updates),
            key=lambda row: row.get("created_at") or "",
            reverse=True,
        )
