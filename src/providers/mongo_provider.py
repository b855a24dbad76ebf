"""
MongoDB Data Provider

Reads patients and trials through the domain repositories, optionally
caching patient snapshots in Redis.
"""

from typing import Dict, List, Any, Optional
import logging

from core.database import DatabaseManager, get_database_manager
from core.cache import CacheManager, get_cache_manager
from domains.patient.models.patient import PatientProfile
from domains.patient.repositories.patient_repository import PatientRepository
from domains.trial.models.trial import Trial, TrialStatus
from domains.trial.repositories.trial_repository import TrialRepository
from .base_provider import (
    BaseDataProvider,
    ProviderConfig,
    PatientNotFoundError,
    TrialNotFoundError,
)

logger = logging.getLogger(__name__)


class MongoDataProvider(BaseDataProvider):
    """Provider backed by the patients/trials Mongo collections"""

    def __init__(
        self,
        config: ProviderConfig = None,
        db_manager: Optional[DatabaseManager] = None,
        cache_manager: Optional[CacheManager] = None
    ):
        super().__init__(config)
        self.db_manager = db_manager
        self.cache_manager = cache_manager
        self.patient_repository: Optional[PatientRepository] = None
        self.trial_repository: Optional[TrialRepository] = None

    async def initialize(self) -> None:
        """Connect to Mongo (and Redis when caching is enabled) and build repositories"""
        try:
            if self.db_manager is None:
                self.db_manager = get_database_manager()
            await self.db_manager.initialize()

            if self.config.cache_enabled and self.cache_manager is None:
                self.cache_manager = get_cache_manager()
            if self.cache_manager:
                await self.cache_manager.initialize()

            self._build_repositories()

            self._initialized = True
            logger.info("Mongo data provider initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Mongo data provider: {e}")
            raise

    def _build_repositories(self) -> None:
        self.patient_repository = PatientRepository(
            self.db_manager,
            self.cache_manager,
            self.config.cache_ttl_seconds
        )
        self.trial_repository = TrialRepository(self.db_manager)

    async def get_patient_by_id(self, patient_id: str) -> PatientProfile:
        patient = await self.patient_repository.find_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    async def list_recruiting_trials(self) -> List[Trial]:
        return await self.trial_repository.find_by_status(TrialStatus.RECRUITING)

    async def get_trial_by_id(self, trial_id: str) -> Trial:
        trial = await self.trial_repository.find_by_id(trial_id)
        if trial is None:
            raise TrialNotFoundError(trial_id)
        return trial

    async def health_check(self) -> Dict[str, Any]:
        health = {
            'status': 'healthy',
            'provider': self.provider_name,
            'database': await self.db_manager.health_check()
        }
        if self.cache_manager:
            health['cache'] = await self.cache_manager.health_check()

        if health['database'].get('status') != 'healthy':
            health['status'] = 'unhealthy'
        return health

    async def cleanup(self) -> None:
        if self.cache_manager:
            await self.cache_manager.cleanup()
        if self.db_manager:
            await self.db_manager.cleanup()
        await super().cleanup()
