"""
Matching service - ranks recruiting trials for a patient
"""

from typing import List, Optional
import time
import logging

from ..models.matching import MatchResult
from .compatibility_scorer import CompatibilityScorer
from providers.base_provider import BaseDataProvider


logger = logging.getLogger(__name__)


class MatchingService:
    """
    Service layer for trial suggestions

    Performs only the provider reads; scoring itself is synchronous and
    side-effect free, so concurrent requests need no coordination.
    """

    def __init__(self, provider: BaseDataProvider, scorer: Optional[CompatibilityScorer] = None):
        self.provider = provider
        self.scorer = scorer or CompatibilityScorer()

    async def rank_suggestions(self, patient_id: str) -> List[MatchResult]:
        """
        Score every recruiting trial for a patient.

        Returns:
            Non-zero results sorted by score descending; ties keep the
            provider's trial order

        Raises:
            PatientNotFoundError: If the patient does not exist
        """
        start_time = time.perf_counter()

        patient = await self.provider.get_patient_by_id(patient_id)
        trials = await self.provider.list_recruiting_trials()

        results = [
            self.scorer.score(patient, trial)
            for trial in trials
            if trial.is_recruiting
        ]
        suggestions = sorted(
            (result for result in results if result.score > 0),
            key=lambda result: result.score,
            reverse=True
        )

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Ranked {len(trials)} recruiting trials for patient {patient_id}: "
            f"{len(suggestions)} suggestions in {processing_time:.1f}ms"
        )

        return suggestions

    async def explain_match(self, patient_id: str, trial_id: str) -> MatchResult:
        """
        Score a single trial for a patient, zero scores included.

        Raises:
            PatientNotFoundError: If the patient does not exist
            TrialNotFoundError: If the trial does not exist
        """
        patient = await self.provider.get_patient_by_id(patient_id)
        trial = await self.provider.get_trial_by_id(trial_id)

        if not trial.is_recruiting:
            return MatchResult(
                trial=trial,
                score=0,
                reasons=[f"Trial is not recruiting (status: {trial.status.value})"]
            )

        return self.scorer.score(patient, trial)
