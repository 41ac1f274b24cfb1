"""
Dashboard loading.

Reads patients and research updates from the store concurrently and
hydrates them into a ``DashboardSnapshot``. A failed read yields an empty
snapshot carrying the error, never a partially hydrated one.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from src.clinical.hydration import hydrate_patients, hydrate_updates
from src.errors import DataStoreError
from src.matching.criteria import UnrecognizedPolicy
from src.models.dashboard import DashboardSnapshot
from src.utils.protocols import PatientStoreProtocol


logger = logging.getLogger(__name__)


class DashboardService:
    """Loads and hydrates the dashboard pool."""
    
    def __init__(
        self,
        store: PatientStoreProtocol,
        policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
    ):
        self.store = store
        self.policy = policy
    
    async def load(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        """
        Load and hydrate both collections.
        
        Args:
            now: Reference time for relative timestamps (defaults to now)
        
        Returns:
            DashboardSnapshot; on failure ``error`` is set and both lists are empty.
        """
        try:
            patient_rows, update_rows = await asyncio.gather(
                self.store.fetch_patients(),
                self.store.fetch_updates(),
            )
        except DataStoreError as e:
            logger.error(f"Dashboard load failed: {e}")
            return DashboardSnapshot(error=str(e))
        
        try:
            patients = hydrate_patients(patient_rows, now)
            updates = hydrate_updates(update_rows, patients, now, self.policy)
        except ValidationError as e:
            logger.error(f"Data store returned malformed rows: {e}")
            return DashboardSnapshot(error="Data store returned malformed records")
        
        logger.info(f"Loaded {len(patients)} patients and {len(updates)} research updates")
        return DashboardSnapshot(patients=patients, updates=updates)
