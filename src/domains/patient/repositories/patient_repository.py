"""
Patient repository - read access to stored patient intakes
"""

from typing import Optional
import logging

from ..models.patient import PatientProfile
from core.database import BaseRepository, DatabaseManager
from core.cache import CacheManager, CacheKeyBuilder


logger = logging.getLogger(__name__)


class PatientRepository(BaseRepository):
    """Repository for patient profiles with an optional Redis read-through cache"""

    def __init__(
        self,
        db_manager: DatabaseManager,
        cache_manager: Optional[CacheManager] = None,
        cache_ttl_seconds: int = 300
    ):
        super().__init__(db_manager, "patients")
        self.cache_manager = cache_manager
        self.cache_ttl_seconds = cache_ttl_seconds

    async def find_by_id(self, patient_id: str) -> Optional[PatientProfile]:
        """Find patient by ID"""
        cache_key = CacheKeyBuilder.patient_key(patient_id)

        if self.cache_manager:
            cached_data = await self.cache_manager.get(cache_key)
            if cached_data:
                return PatientProfile.from_document(cached_data)

        doc = await self.find_one({"id": patient_id}, {"_id": 0})
        if not doc:
            return None

        profile = PatientProfile.from_document(doc)

        if self.cache_manager:
            await self.cache_manager.set(cache_key, profile.to_document(), self.cache_ttl_seconds)

        return profile
