from __future__ import annotations

from typing import Literal

from pydantic import Field

from core.settings.base import AstroBaseSettings


class ServerSettings(AstroBaseSettings):
    """
    HTTP server and storage backend settings.
    Loaded from .env with exact variable name matching.
    """

    log_level: str = Field("INFO", alias="ASTRO_LOG_LEVEL")
    store_backend: Literal["memory", "sqlalchemy"] = Field("memory", alias="ASTRO_STORE_BACKEND")
    cors_origins: list[str] = Field(["*"], alias="ASTRO_CORS_ORIGINS")
