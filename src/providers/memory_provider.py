"""
In-memory Data Provider

Holds patient and trial snapshots in dictionaries. Used for local runs,
demos and tests; can be seeded from a JSON file of the form
{"patients": [...], "trials": [...]} using the same document shapes as the
Mongo collections.
"""

from pathlib import Path
from typing import Dict, List, Any, Iterable, Optional
import logging

import orjson

from domains.patient.models.patient import PatientProfile
from domains.trial.models.trial import Trial
from .base_provider import (
    BaseDataProvider,
    ProviderConfig,
    PatientNotFoundError,
    TrialNotFoundError,
)

logger = logging.getLogger(__name__)


class InMemoryDataProvider(BaseDataProvider):
    """Dictionary-backed provider; trials keep their insertion order"""

    def __init__(
        self,
        config: ProviderConfig = None,
        patients: Iterable[PatientProfile] = (),
        trials: Iterable[Trial] = ()
    ):
        super().__init__(config)
        self.provider_name = 'memory'
        self._patients: Dict[str, PatientProfile] = {}
        self._trials: Dict[str, Trial] = {}

        for patient in patients:
            self.add_patient(patient)
        for trial in trials:
            self.add_trial(trial)

    def add_patient(self, patient: PatientProfile) -> None:
        self._patients[patient.id] = patient

    def add_trial(self, trial: Trial) -> None:
        self._trials[trial.id] = trial

    async def initialize(self) -> None:
        """Load the seed file, if configured"""
        if self.config.seed_file:
            self.load_seed_file(self.config.seed_file)
        self._initialized = True
        logger.info(
            f"In-memory provider ready with {len(self._patients)} patients "
            f"and {len(self._trials)} trials"
        )

    def load_seed_file(self, path: str) -> None:
        """
        Load patients and trials from a JSON seed file

        Raises:
            FileNotFoundError: If the file does not exist
            orjson.JSONDecodeError: If the file is not valid JSON
        """
        try:
            data: Dict[str, Any] = orjson.loads(Path(path).read_bytes())
        except FileNotFoundError:
            logger.error(f"Seed file not found: {path}")
            raise
        except orjson.JSONDecodeError as e:
            logger.error(f"Invalid JSON in seed file {path}: {e}")
            raise

        for doc in data.get("patients", []):
            self.add_patient(PatientProfile.from_document(doc))
        for doc in data.get("trials", []):
            self.add_trial(Trial.from_document(doc))

        logger.info(f"Seed file {path} loaded")

    async def get_patient_by_id(self, patient_id: str) -> PatientProfile:
        patient = self._patients.get(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    async def list_recruiting_trials(self) -> List[Trial]:
        return [trial for trial in self._trials.values() if trial.is_recruiting]

    async def get_trial_by_id(self, trial_id: str) -> Trial:
        trial = self._trials.get(trial_id)
        if trial is None:
            raise TrialNotFoundError(trial_id)
        return trial

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update({
            'patients': len(self._patients),
            'trials': len(self._trials)
        })
        return stats
