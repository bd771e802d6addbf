"""Shared test fixtures for CareWise Health tests."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ENCRYPTION_KEY", "")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "health.db"))
    monkeypatch.setenv("PROFILE_KEY", "health_data")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from carewise.domains.health.domain_logic.intake import DEFAULT_HEALTH_PROFILE  # noqa: E402
from carewise.domains.health.domain_logic.profile_models import HealthProfile  # noqa: E402


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@pytest.fixture
def make_profile() -> Callable[..., HealthProfile]:
    """Factory for profiles: the form defaults (BMI 24.2, no risks) plus overrides."""

    def _make(**overrides: Any) -> HealthProfile:
        return replace(DEFAULT_HEALTH_PROFILE, **overrides)

    return _make


@pytest.fixture
def assessment_payload() -> dict[str, Any]:
    """A complete wire-form assessment, as the intake form submits it."""
    return {
        "age": 52,
        "height": 175,
        "weight": 82,
        "gender": "female",
        "preExistingConditions": ["hypertension"],
        "eatingHabits": {
            "dietType": "vegetarian",
            "mealsPerDay": 3,
            "snacksPerDay": 1,
            "waterConsumption": 6,
            "alcoholConsumption": "none",
            "caffeineConsumption": "light",
        },
        "physicalActivity": "light",
        "sleepHours": 6.5,
        "smokingStatus": "former",
        "familyHistory": ["cancer"],
    }


# ---------------------------------------------------------------------------
# In-memory storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def health_db():
    """Create an in-memory HealthDatabase for testing."""
    from carewise.core.storage.database import HealthDatabase

    db = HealthDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def field_encryptor():
    """Create a FieldEncryptor with a fresh key."""
    from carewise.core.storage.encryption import FieldEncryptor

    return FieldEncryptor(FieldEncryptor.generate_key())


@pytest.fixture
def memory_repository():
    from carewise.core.storage.repository import InMemoryKeyValueRepository

    return InMemoryKeyValueRepository()


@pytest.fixture
def profile_store(memory_repository):
    """Create a HealthProfileStore over an in-memory repository."""
    from carewise.domains.health.connectors.profile_store import HealthProfileStore

    return HealthProfileStore(memory_repository)


@pytest.fixture
def activity_logger(health_db):
    """Create an ActivityLogger backed by in-memory SQLite."""
    from carewise.core.audit.logger import ActivityLogger

    return ActivityLogger(health_db)
