"""
Base Data Provider Interface

Defines the read-only data-access contract the matching engine consumes.
Every provider exposes the same two lookups (patient by id, recruiting
trials) plus lifecycle hooks, so the ranking service never depends on how
patients or trials are stored.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
from dataclasses import dataclass
import logging

from domains.patient.models.patient import PatientProfile
from domains.trial.models.trial import Trial

logger = logging.getLogger(__name__)


class RecordNotFoundError(LookupError):
    """A requested record does not exist in the data store"""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class PatientNotFoundError(RecordNotFoundError):
    def __init__(self, patient_id: str):
        super().__init__("Patient", patient_id)


class TrialNotFoundError(RecordNotFoundError):
    def __init__(self, trial_id: str):
        super().__init__("Trial", trial_id)


@dataclass
class ProviderConfig:
    """Base configuration for providers"""
    seed_file: Optional[str] = None
    cache_enabled: bool = False
    cache_ttl_seconds: int = 300

    def __post_init__(self):
        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")


class BaseDataProvider(ABC):
    """
    Abstract base class for all data providers

    Providers propagate storage failures unchanged; the engine performs no
    retries and returns no partial results.
    """

    def __init__(self, config: ProviderConfig = None):
        self.config = config or ProviderConfig()
        self.provider_name = self.__class__.__name__.replace('DataProvider', '').lower()
        self._initialized = False

    @abstractmethod
    async def initialize(self) -> None:
        """Set up connections or load data needed by the provider"""
        pass

    @abstractmethod
    async def get_patient_by_id(self, patient_id: str) -> PatientProfile:
        """
        Load one patient profile

        Raises:
            PatientNotFoundError: If no patient has this id
        """
        pass

    @abstractmethod
    async def list_recruiting_trials(self) -> List[Trial]:
        """All trials currently in the RECRUITING state, in a stable order"""
        pass

    @abstractmethod
    async def get_trial_by_id(self, trial_id: str) -> Trial:
        """
        Load one trial regardless of its state

        Raises:
            TrialNotFoundError: If no trial has this id
        """
        pass

    async def health_check(self) -> Dict[str, Any]:
        """
        Check provider health status

        Returns:
            Dictionary with health status information
        """
        try:
            trials = await self.list_recruiting_trials()
            return {
                'status': 'healthy',
                'provider': self.provider_name,
                'recruiting_trials': len(trials)
            }
        except Exception as e:
            logger.error(f"Health check failed for {self.provider_name}: {e}")
            return {
                'status': 'unhealthy',
                'provider': self.provider_name,
                'error': str(e)
            }

    def get_stats(self) -> Dict[str, Any]:
        """Basic provider statistics"""
        return {
            'provider': self.provider_name,
            'initialized': self._initialized,
            'config': {
                'cache_enabled': self.config.cache_enabled,
                'cache_ttl_seconds': self.config.cache_ttl_seconds
            }
        }

    async def cleanup(self) -> None:
        """Release provider resources"""
        self._initialized = False
