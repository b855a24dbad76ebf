"""
Compatibility scoring between a patient profile and a clinical trial.

Scoring algorithm:
1. No criteria document -> 0, no reasons
2. Excluded diagnostic codes (eliminatory) -> 0 with a single reason
3. Required diagnostic codes (+50)
4. Primary condition vs trial conditions (+40)
5. Pathology tags vs trial conditions (+10 each, capped at +30)
6. Condition description vs trial conditions (+20)
7. Trial has participant capacity (+10)
8. Total capped at 100

Steps 3-7 are independent and additive. Absent fields contribute nothing.
"""

from typing import List, Mapping, Optional
from dataclasses import dataclass
import logging

from domains.patient.models.patient import PatientProfile
from domains.trial.models.trial import Trial
from ..models.matching import MatchResult
from .code_matcher import matching_codes
from .criteria_extractor import (
    extract_conditions,
    extract_codes,
    REQUIRED_CODES_KEYS,
    EXCLUDED_CODES_KEYS,
)
from .text_matcher import fuzzy_matches, normalize_text

logger = logging.getLogger(__name__)


# Default scoring policy (points)
REQUIRED_CODES_POINTS = 50
PRIMARY_CONDITION_POINTS = 40
PATHOLOGY_POINTS_PER_MATCH = 10
PATHOLOGY_POINTS_CAP = 30
DESCRIPTION_POINTS = 20
CAPACITY_POINTS = 10
MAX_SCORE = 100


@dataclass(frozen=True)
class ScoringWeights:
    """Point weights for each scoring signal"""
    required_codes: int = REQUIRED_CODES_POINTS
    primary_condition: int = PRIMARY_CONDITION_POINTS
    pathology_per_match: int = PATHOLOGY_POINTS_PER_MATCH
    pathology_cap: int = PATHOLOGY_POINTS_CAP
    description: int = DESCRIPTION_POINTS
    capacity: int = CAPACITY_POINTS
    max_score: int = MAX_SCORE

    def __post_init__(self):
        for name, points in self.__dict__.items():
            if not isinstance(points, int) or isinstance(points, bool):
                raise ValueError(f"{name} must be an integer")
            if points < 0:
                raise ValueError(f"{name} cannot be negative")
        if self.max_score > MAX_SCORE:
            raise ValueError(f"max_score cannot exceed {MAX_SCORE}")

    @classmethod
    def from_config(cls, config) -> "ScoringWeights":
        """Build weights from a ScoringConfig section"""
        return cls(
            required_codes=config.required_codes,
            primary_condition=config.primary_condition,
            pathology_per_match=config.pathology_per_match,
            pathology_cap=config.pathology_cap,
            description=config.description,
            capacity=config.capacity,
            max_score=config.max_score,
        )


class CompatibilityScorer:
    """Scores one trial for one patient; stateless apart from its weights"""

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def score(self, patient: PatientProfile, trial: Trial) -> MatchResult:
        criteria = trial.inclusion_criteria

        if not isinstance(criteria, Mapping):
            if criteria is not None:
                logger.debug(f"Trial {trial.id} has malformed inclusion criteria, scoring 0")
            return MatchResult(trial=trial, score=0, reasons=[])

        excluded_hits = matching_codes(
            patient.diagnostic_codes,
            extract_codes(criteria, EXCLUDED_CODES_KEYS)
        )
        if excluded_hits:
            return MatchResult(
                trial=trial,
                score=0,
                reasons=[f"Patient has excluded diagnostic code(s): {', '.join(excluded_hits)}"]
            )

        w = self.weights
        score = 0
        reasons: List[str] = []

        required_hits = matching_codes(
            patient.diagnostic_codes,
            extract_codes(criteria, REQUIRED_CODES_KEYS)
        )
        if required_hits:
            score += w.required_codes
            reasons.append(
                f"{len(required_hits)} diagnostic code(s) match required codes: {', '.join(required_hits)}"
            )

        conditions = extract_conditions(criteria)

        if patient.primary_condition and self._matches_any(patient.primary_condition, conditions):
            score += w.primary_condition
            reasons.append(f"Primary condition matches: {patient.primary_condition}")

        matched_tags = self._matching_pathologies(patient.pathologies, conditions)
        if matched_tags:
            score += min(w.pathology_cap, len(matched_tags) * w.pathology_per_match)
            reasons.append(f"{len(matched_tags)} pathology tag(s) match: {', '.join(matched_tags)}")

        if patient.condition_description and self._matches_any(patient.condition_description, conditions):
            score += w.description
            reasons.append("Condition description matches trial conditions")

        if (trial.max_participants or 0) > 0:
            score += w.capacity
            reasons.append(f"Trial has participant capacity ({trial.max_participants} max)")

        return MatchResult(trial=trial, score=min(w.max_score, score), reasons=reasons)

    @staticmethod
    def _matches_any(text: str, conditions: List[str]) -> bool:
        return any(fuzzy_matches(text, condition) for condition in conditions)

    def _matching_pathologies(self, pathologies, conditions: List[str]) -> List[str]:
        """Distinct pathology tags (first spelling kept) matching any condition"""
        matched: List[str] = []
        seen = set()
        for tag in pathologies:
            key = normalize_text(tag)
            if key in seen:
                continue
            seen.add(key)
            if self._matches_any(tag, conditions):
                matched.append(tag)
        return matched


def score(patient: PatientProfile, trial: Trial, weights: Optional[ScoringWeights] = None) -> MatchResult:
    """Convenience function scoring with the default (or given) weights"""
    return CompatibilityScorer(weights).score(patient, trial)
