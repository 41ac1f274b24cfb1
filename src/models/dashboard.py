"""
Vital Canvas - Dashboard snapshot
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.models.patient import Patient
from src.models.update import ResearchUpdate


class DashboardSnapshot(BaseModel):
    """Everything the hosting page needs after one load from the data store."""

    patients: list[Patient] = Field(default_factory=list)
    updates: list[ResearchUpdate] = Field(default_factory=list)
    error: Optional[str] = None
    loaded_at: datetime = Field(default_factory=datetime.now)

    def patient_ids(self) -> list[str]:
        return [patient.id for patient in self.patients]

    def find_update(self, update_id: str) -> Optional[ResearchUpdate]:
        for update in self.updates:
            if update.id == update_id:
                return update
        return None
