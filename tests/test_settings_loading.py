"""
Test settings loading.

Verifies that every key documented in .env.example maps onto a settings
field and that environment values reach the typed settings objects.
"""
from __future__ import annotations

from pathlib import Path
import re

import pytest

# 1) Import api.dependencies so dotenv loads exactly once (canonical location).
import api.dependencies  # noqa: F401

from core.infrastructure.database.config import DatabaseSettings
from core.settings import AuditSettings, ServerSettings, get_app_settings


def _parse_env_keys(env_path: Path) -> list[str]:
    text = env_path.read_text(encoding="utf-8", errors="replace")
    keys: list[str] = []
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        if s.startswith("export "):
            s = s[len("export ") :].strip()
        if "=" not in s:
            continue
        k, _ = s.split("=", 1)
        k = k.strip()
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", k):
            continue
        if k not in keys:
            keys.append(k)
    return keys


def _collect_env_names(model_cls) -> dict[str, str]:
    """
    Return map: ENV_NAME -> field_name for a settings class.
    Aliased fields use the alias, the rest the class env_prefix.
    """
    prefix = model_cls.model_config.get("env_prefix", "")
    names: dict[str, str] = {}
    for field_name, field in model_cls.model_fields.items():
        names[field.alias or f"{prefix}{field_name}".upper()] = field_name
    return names


def test_every_documented_env_key_is_mapped():
    repo_root = Path(__file__).resolve().parents[1]
    keys = _parse_env_keys(repo_root / ".env.example")

    env_to_field: dict[str, tuple[type, str]] = {}
    for model_cls in (AuditSettings, ServerSettings, DatabaseSettings):
        for env_name, field_name in _collect_env_names(model_cls).items():
            if env_name in env_to_field:
                pytest.fail(f"Duplicate env name mapped twice: {env_name}")
            env_to_field[env_name] = (model_cls, field_name)

    missing = [k for k in keys if k not in env_to_field]
    assert not missing, f"Unmapped env keys: {missing}"

    undocumented = [k for k in env_to_field if k not in keys]
    assert not undocumented, f"Settings missing from .env.example: {undocumented}"


def test_environment_overrides_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("AUDIT_PROJECT_DIR", str(tmp_path))
    monkeypatch.setenv("AUDIT_COMMAND_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("AUDIT_LINT_COMMAND", '["npx", "eslint", "."]')
    monkeypatch.setenv("ASTRO_STORE_BACKEND", "sqlalchemy")

    audit = AuditSettings()
    server = ServerSettings()

    assert audit.project_dir == tmp_path
    assert audit.command_timeout_seconds == 5.0
    assert audit.lint_command == ["npx", "eslint", "."]
    assert server.store_backend == "sqlalchemy"


def test_defaults(monkeypatch):
    for name in ("AUDIT_COMMAND_TIMEOUT_SECONDS", "AUDIT_INSTALL_COMMAND", "AUDIT_LOG_DIRS"):
        monkeypatch.delenv(name, raising=False)

    audit = AuditSettings(_env_file=None)

    assert audit.command_timeout_seconds == 60.0
    assert audit.install_command == ["npm", "install"]
    assert audit.log_dirs == ["server/logs", "client/logs"]


def test_app_settings_aggregate_is_cached():
    assert get_app_settings() is get_app_settings()
    assert get_app_settings().audit.poll_interval_seconds > 0
