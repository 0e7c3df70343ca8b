from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.infrastructure.database.config import DatabaseSettings
from core.settings.modules.audit_settings import AuditSettings
from core.settings.modules.server_settings import ServerSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    audit: AuditSettings
    server: ServerSettings
    database: DatabaseSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        audit=AuditSettings(),
        server=ServerSettings(),
        database=DatabaseSettings(),
    )
