#!/usr/bin/env python3
"""
Tests for provider registration, the in-memory provider and configuration

Run with: python -m pytest test_providers.py -v
"""

import asyncio
import sys
import os

import orjson
import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from providers import (
    BaseDataProvider,
    InMemoryDataProvider,
    MongoDataProvider,
    ProviderConfig,
    PatientNotFoundError,
    TrialNotFoundError,
    RecordNotFoundError,
    PROVIDER_REGISTRY,
    get_provider_class,
    create_provider,
)
from core.config import ApplicationConfig, DataProviderConfig, ScoringConfig, LoggingConfig
from domains.trial.models.trial import Trial, TrialStatus
from domains.matching.services.compatibility_scorer import ScoringWeights


SEED = {
    "patients": [
        {
            "id": "p1",
            "primary_condition": "Asma bronquial",
            "condition_description": "  ",
            "pathologies": ["asma", "", 12, "rinitis"],
            "diagnostic_codes": ["J45.9"],
        },
        {"id": 2},
    ],
    "trials": [
        {
            "id": "t1",
            "title": "Broncodilatador",
            "status": "RECRUITING",
            "inclusion_criteria": {"required_codes": ["J45"], "conditions": ["asma"]},
            "max_participants": "40",
            "current_participants": 3,
            "recruitment_deadline": "2026-12-31T00:00:00Z",
            "sponsor": {"name": "Laboratorio Andes"},
        },
        {"id": "t2", "title": "Seguimiento", "status": "FOLLOW_UP"},
        {"id": "t3", "title": "Preparación", "status": "PREPARATION"},
        {"id": "t4", "title": "Antialérgico", "max_participants": True},
    ],
}


def write_seed(tmp_path, data=SEED):
    seed_file = tmp_path / "seed.json"
    seed_file.write_bytes(orjson.dumps(data))
    return str(seed_file)


# =============================================================================
# REGISTRY
# =============================================================================

def test_provider_registry():
    assert set(PROVIDER_REGISTRY) == {"mongo", "memory"}
    assert get_provider_class("mongo") is MongoDataProvider
    assert get_provider_class("MEMORY") is InMemoryDataProvider


def test_unknown_provider_rejected():
    with pytest.raises(ValueError, match="Unknown provider 'sqlite'"):
        get_provider_class("sqlite")


def test_create_provider_passes_config():
    config = ProviderConfig(cache_ttl_seconds=60)
    provider = create_provider("memory", config)

    assert isinstance(provider, InMemoryDataProvider)
    assert isinstance(provider, BaseDataProvider)
    assert provider.config is config
    assert provider.provider_name == "memory"
    assert create_provider("mongo").provider_name == "mongo"


def test_interface_compliance():
    required_methods = [
        'initialize', 'get_patient_by_id', 'list_recruiting_trials',
        'get_trial_by_id', 'health_check', 'get_stats', 'cleanup'
    ]
    for provider_class in PROVIDER_REGISTRY.values():
        for method in required_methods:
            assert hasattr(provider_class, method), f"{provider_class.__name__} missing {method}"


def test_provider_config_validation():
    with pytest.raises(ValueError):
        ProviderConfig(cache_ttl_seconds=0)


def test_not_found_errors_share_base():
    error = TrialNotFoundError("t9")

    assert isinstance(error, RecordNotFoundError)
    assert isinstance(error, LookupError)
    assert str(error) == "Trial t9 not found"
    assert error.kind == "Trial"


# =============================================================================
# IN-MEMORY PROVIDER
# =============================================================================

def test_memory_provider_seed_file(tmp_path):
    provider = InMemoryDataProvider(ProviderConfig(seed_file=write_seed(tmp_path)))
    asyncio.run(provider.initialize())

    patient = asyncio.run(provider.get_patient_by_id("p1"))
    assert patient.primary_condition == "Asma bronquial"
    assert patient.condition_description is None
    assert patient.pathologies == ("asma", "rinitis")
    assert patient.diagnostic_codes == ("J45.9",)

    # numeric ids are stored as strings
    assert asyncio.run(provider.get_patient_by_id("2")).primary_condition is None

    trial = asyncio.run(provider.get_trial_by_id("t1"))
    assert trial.max_participants == 40
    assert trial.current_participants == 3
    assert trial.sponsor_name == "Laboratorio Andes"
    assert trial.recruitment_deadline.isoformat() == "2026-12-31"

    # a boolean is not a participant count; missing status means recruiting
    odd = asyncio.run(provider.get_trial_by_id("t4"))
    assert odd.max_participants is None
    assert odd.status is TrialStatus.RECRUITING


def test_memory_provider_lists_only_recruiting(tmp_path):
    provider = InMemoryDataProvider(ProviderConfig(seed_file=write_seed(tmp_path)))
    asyncio.run(provider.initialize())

    trials = asyncio.run(provider.list_recruiting_trials())

    assert [t.id for t in trials] == ["t1", "t4"]
    assert asyncio.run(provider.get_trial_by_id("t2")).status is TrialStatus.FOLLOW_UP


def test_memory_provider_missing_records():
    provider = InMemoryDataProvider()

    with pytest.raises(PatientNotFoundError):
        asyncio.run(provider.get_patient_by_id("nobody"))
    with pytest.raises(TrialNotFoundError):
        asyncio.run(provider.get_trial_by_id("nothing"))


def test_memory_provider_missing_seed_file(tmp_path):
    provider = InMemoryDataProvider(ProviderConfig(seed_file=str(tmp_path / "absent.json")))

    with pytest.raises(FileNotFoundError):
        asyncio.run(provider.initialize())


def test_memory_provider_invalid_seed_file(tmp_path):
    seed_file = tmp_path / "broken.json"
    seed_file.write_text("{not json")
    provider = InMemoryDataProvider(ProviderConfig(seed_file=str(seed_file)))

    with pytest.raises(orjson.JSONDecodeError):
        asyncio.run(provider.initialize())


def test_memory_provider_stats_and_health(tmp_path):
    provider = InMemoryDataProvider(ProviderConfig(seed_file=write_seed(tmp_path)))
    asyncio.run(provider.initialize())

    stats = provider.get_stats()
    assert stats["provider"] == "memory"
    assert stats["initialized"] is True
    assert stats["patients"] == 2
    assert stats["trials"] == 4

    health = asyncio.run(provider.health_check())
    assert health == {"status": "healthy", "provider": "memory", "recruiting_trials": 2}

    asyncio.run(provider.cleanup())
    assert provider.get_stats()["initialized"] is False


def test_memory_provider_direct_records():
    trial = Trial(id="t1", title="Closed", status=TrialStatus.CLOSED)
    provider = InMemoryDataProvider(trials=[trial])

    assert asyncio.run(provider.list_recruiting_trials()) == []
    assert asyncio.run(provider.get_trial_by_id("t1")) is trial


def test_bundled_sample_seed_loads():
    seed_file = os.path.join(os.path.dirname(__file__), "data", "sample_seed.json")
    provider = InMemoryDataProvider(ProviderConfig(seed_file=seed_file))
    asyncio.run(provider.initialize())

    assert provider.get_stats()["patients"] > 0
    assert asyncio.run(provider.list_recruiting_trials())


# =============================================================================
# CONFIGURATION
# =============================================================================

def test_config_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unknown data provider"):
        ApplicationConfig(data_provider=DataProviderConfig(provider_name="sqlite"))


def test_config_rejects_negative_weights():
    with pytest.raises(ValueError, match="cannot be negative"):
        ApplicationConfig(scoring=ScoringConfig(capacity=-1))


def test_config_rejects_unknown_log_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        ApplicationConfig(logging=LoggingConfig(level="CHATTY"))


def test_scoring_weights_from_environment(monkeypatch):
    monkeypatch.setenv("SCORE_CAPACITY", "5")
    monkeypatch.setenv("SCORE_MAX", "90")

    weights = ScoringWeights.from_config(ScoringConfig())

    assert weights.capacity == 5
    assert weights.max_score == 90
    assert weights.required_codes == 50


def test_config_masks_redis_password(monkeypatch):
    monkeypatch.setenv("REDIS_PASSWORD", "secret")

    config = ApplicationConfig(data_provider=DataProviderConfig(provider_name="memory"))

    assert config.to_dict()["redis"]["password"] == "***masked***"
