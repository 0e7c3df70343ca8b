"""Shared fixtures for the audit test suite."""

from pathlib import Path

import pytest

from core.infrastructure.adapters.persistence.memory_audit_store import InMemoryAuditStore
from core.settings import AuditSettings
from tests.fakes import RecordingBus, make_settings


@pytest.fixture
def audit_settings(tmp_path: Path) -> AuditSettings:
    return make_settings(tmp_path)


@pytest.fixture
def memory_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def recording_bus() -> RecordingBus:
    return RecordingBus()
