"""
Tests for the trial ranking service

Run with: python -m pytest test_matching_service.py -v
"""

import asyncio
import sys
import os

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from domains.patient.models.patient import PatientProfile
from domains.trial.models.trial import Trial, TrialStatus
from domains.matching.services.matching_service import MatchingService
from domains.matching.services.compatibility_scorer import CompatibilityScorer, ScoringWeights
from providers import InMemoryDataProvider, PatientNotFoundError, TrialNotFoundError


PATIENT = PatientProfile.create(
    "p1",
    primary_condition="Diabetes tipo 2",
    pathologies=["hipertensión"],
    diagnostic_codes=["E11.9"],
)


def build_trials():
    return [
        # primary + capacity = 50
        Trial(id="t-primary", title="Metformina", inclusion_criteria={"conditions": ["diabetes"]}, max_participants=20),
        # capacity only = 10
        Trial(id="t-capacity", title="Vacuna", inclusion_criteria={}, max_participants=50),
        # required + primary + pathology + capacity = 100
        Trial(
            id="t-best",
            title="Insulina",
            inclusion_criteria={"required_codes": ["E11"], "conditions": ["diabetes", "hipertensión"]},
            max_participants=10,
        ),
        # excluded = 0
        Trial(
            id="t-excluded",
            title="Cardio",
            inclusion_criteria={"excluded_codes": ["E11"], "conditions": ["diabetes"]},
            max_participants=10,
        ),
        # no criteria = 0
        Trial(id="t-empty", title="Sin criterios", max_participants=10),
        # same score as t-primary, inserted later
        Trial(id="t-primary-2", title="Dieta", inclusion_criteria={"diagnosis": "Diabetes"}, max_participants=5),
        # would be 100 but is not recruiting
        Trial(
            id="t-closed",
            title="Cerrado",
            status=TrialStatus.CLOSED,
            inclusion_criteria={"required_codes": ["E11"], "conditions": ["diabetes"]},
            max_participants=10,
        ),
    ]


def build_service(trials=None, patients=None, scorer=None):
    provider = InMemoryDataProvider(
        patients=[PATIENT] if patients is None else patients,
        trials=build_trials() if trials is None else trials,
    )
    return MatchingService(provider, scorer)


class FailingProvider(InMemoryDataProvider):
    """Provider whose trial listing fails like an unreachable store"""

    async def list_recruiting_trials(self):
        raise ConnectionError("trial store unreachable")


# =============================================================================
# RANKING
# =============================================================================

def test_rank_orders_by_score_descending():
    results = asyncio.run(build_service().rank_suggestions("p1"))

    assert [r.trial.id for r in results] == ["t-best", "t-primary", "t-primary-2", "t-capacity"]
    assert [r.score for r in results] == [100, 50, 50, 10]


def test_rank_ties_keep_provider_order():
    trials = [
        Trial(id=f"t{i}", title=f"Trial {i}", inclusion_criteria={}, max_participants=i + 1)
        for i in range(5)
    ]

    results = asyncio.run(build_service(trials=trials).rank_suggestions("p1"))

    assert [r.trial.id for r in results] == ["t0", "t1", "t2", "t3", "t4"]


def test_rank_drops_zero_scores_and_closed_trials():
    results = asyncio.run(build_service().rank_suggestions("p1"))
    ids = {r.trial.id for r in results}

    assert "t-excluded" not in ids
    assert "t-empty" not in ids
    assert "t-closed" not in ids
    assert all(r.score > 0 for r in results)


def test_rank_without_trials_is_empty():
    assert asyncio.run(build_service(trials=[]).rank_suggestions("p1")) == []


def test_rank_without_overlap_is_empty():
    patient = PatientProfile.create("p2", primary_condition="Asma", diagnostic_codes=["J45"])
    trials = [
        Trial(id="t1", title="Insulina", inclusion_criteria={"required_codes": ["E11"], "conditions": ["diabetes"]}),
        Trial(
            id="t2",
            title="Cardio",
            inclusion_criteria={"codigos_cie10_requeridos": ["I50"], "diseases": ["insuficiencia cardiaca"]},
            max_participants=0,
        ),
    ]

    results = asyncio.run(build_service(trials=trials, patients=[patient]).rank_suggestions("p2"))

    assert results == []


def test_rank_without_overlap_keeps_capacity_only_trials():
    patient = PatientProfile.create("p2", primary_condition="Asma", diagnostic_codes=["J45"])
    trials = [
        Trial(
            id="t1",
            title="Insulina",
            inclusion_criteria={"required_codes": ["E11"], "conditions": ["diabetes"]},
            max_participants=30,
        ),
    ]

    results = asyncio.run(build_service(trials=trials, patients=[patient]).rank_suggestions("p2"))

    assert [(r.trial.id, r.score) for r in results] == [("t1", 10)]
    assert results[0].reasons == ["Trial has participant capacity (30 max)"]


def test_rank_excludes_through_cie10_field():
    patient = PatientProfile.create("p3", diagnostic_codes=["I50"])
    trials = [
        Trial(
            id="t1",
            title="Cardio",
            inclusion_criteria={"codigos_cie10_excluidos": ["I50"], "conditions": ["x"]},
            max_participants=30,
        ),
    ]

    assert asyncio.run(build_service(trials=trials, patients=[patient]).rank_suggestions("p3")) == []


def test_rank_unknown_patient():
    with pytest.raises(PatientNotFoundError) as exc_info:
        asyncio.run(build_service().rank_suggestions("missing"))

    assert str(exc_info.value) == "Patient missing not found"
    assert exc_info.value.record_id == "missing"


def test_rank_propagates_store_failures():
    service = MatchingService(FailingProvider(patients=[PATIENT]))

    with pytest.raises(ConnectionError):
        asyncio.run(service.rank_suggestions("p1"))


def test_rank_uses_configured_weights():
    scorer = CompatibilityScorer(ScoringWeights(capacity=0))

    results = asyncio.run(build_service(scorer=scorer).rank_suggestions("p1"))

    assert [r.trial.id for r in results] == ["t-best", "t-primary", "t-primary-2"]
    assert [r.score for r in results] == [100, 40, 40]


# =============================================================================
# SINGLE-TRIAL EXPLANATION
# =============================================================================

def test_explain_match_returns_reasons():
    result = asyncio.run(build_service().explain_match("p1", "t-best"))

    assert result.score == 100
    assert result.reasons == [
        "1 diagnostic code(s) match required codes: E11.9",
        "Primary condition matches: Diabetes tipo 2",
        "1 pathology tag(s) match: hipertensión",
        "Trial has participant capacity (10 max)",
    ]


def test_explain_match_includes_zero_scores():
    result = asyncio.run(build_service().explain_match("p1", "t-excluded"))

    assert result.score == 0
    assert result.reasons == ["Patient has excluded diagnostic code(s): E11.9"]


def test_explain_match_for_closed_trial():
    result = asyncio.run(build_service().explain_match("p1", "t-closed"))

    assert result.score == 0
    assert result.reasons == ["Trial is not recruiting (status: CLOSED)"]


def test_explain_match_unknown_records():
    service = build_service()

    with pytest.raises(TrialNotFoundError):
        asyncio.run(service.explain_match("p1", "missing"))
    with pytest.raises(PatientNotFoundError):
        asyncio.run(service.explain_match("missing", "t-best"))
