"""
Trial repository - read access to stored clinical trials
"""

from typing import Optional, List
import logging

from ..models.trial import Trial, TrialStatus
from core.database import BaseRepository, DatabaseManager


logger = logging.getLogger(__name__)


class TrialRepository(BaseRepository):
    """Repository for clinical trials"""

    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, "trials")

    async def find_by_id(self, trial_id: str) -> Optional[Trial]:
        """Find trial by ID"""
        doc = await self.find_one({"id": trial_id}, {"_id": 0})
        return Trial.from_document(doc) if doc else None

    async def find_by_status(self, status: TrialStatus) -> List[Trial]:
        """All trials in a lifecycle state, oldest first"""
        docs = await self.find_many(
            {"status": status.value},
            projection={"_id": 0},
            sort=[("created_at", 1), ("id", 1)]
        )

        trials = []
        for doc in docs:
            try:
                trials.append(Trial.from_document(doc))
            except (KeyError, ValueError) as e:
                logger.error(f"Unreadable trial document {doc.get('id')}: {e}")
                raise
        return trials
