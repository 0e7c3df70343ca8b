from __future__ import annotations

from pathlib import Path

from pydantic import Field

from core.settings.base import AstroBaseSettings


class AuditSettings(AstroBaseSettings):
    """
    Settings for the audit step runner.
    Loaded from .env with exact variable name matching.
    """

    project_dir: Path = Field(Path("."), alias="AUDIT_PROJECT_DIR")
    command_timeout_seconds: float = Field(60.0, gt=0, alias="AUDIT_COMMAND_TIMEOUT_SECONDS")
    serve_window_seconds: int = Field(10, gt=0, alias="AUDIT_SERVE_WINDOW_SECONDS")
    poll_interval_seconds: float = Field(2.0, gt=0, alias="AUDIT_POLL_INTERVAL_SECONDS")

    install_command: list[str] = Field(["npm", "install"], alias="AUDIT_INSTALL_COMMAND")
    dev_command: list[str] = Field(["npm", "run", "dev"], alias="AUDIT_DEV_COMMAND")
    lint_command: list[str] = Field(["npx", "tsc", "--noEmit"], alias="AUDIT_LINT_COMMAND")
    build_command: list[str] = Field(["npm", "run", "build"], alias="AUDIT_BUILD_COMMAND")
    start_command: list[str] = Field(["npm", "start"], alias="AUDIT_START_COMMAND")

    form_scan_dir: str = Field("client/src", alias="AUDIT_FORM_SCAN_DIR")
    log_dirs: list[str] = Field(["server/logs", "client/logs"], alias="AUDIT_LOG_DIRS")

    # storefront dotenv files, relative to project_dir
    storefront_env_file: str = Field(".env", alias="AUDIT_STOREFRONT_ENV_FILE")
    storefront_env_example_file: str = Field(".env.example", alias="AUDIT_STOREFRONT_ENV_EXAMPLE_FILE")

    connection_http_checks: bool = Field(False, alias="AUDIT_CONNECTION_HTTP_CHECKS")
    connection_timeout_seconds: float = Field(10.0, gt=0, alias="AUDIT_CONNECTION_TIMEOUT_SECONDS")

    @property
    def storefront_env_path(self) -> Path:
        return self.project_dir / self.storefront_env_file

    @property
    def storefront_env_example_path(self) -> Path:
        return self.project_dir / self.storefront_env_example_file
