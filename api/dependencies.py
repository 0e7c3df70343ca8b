"""
FastAPI Dependencies.

Provides dependency injection for the run controller, the status store
and the application services.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional
from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from sqlalchemy.ext.asyncio import AsyncEngine

from core.application.services import (
    ConnectionService,
    DashboardService,
    EnvironmentService,
    IssueApplicationService,
)
from core.domain.repositories import AuditStore
from core.infrastructure.adapters.connections.http_connection_checker import HttpConnectionChecker
from core.infrastructure.adapters.environment.dotenv_file import DotenvFile
from core.infrastructure.adapters.persistence.memory_audit_store import InMemoryAuditStore
from core.infrastructure.database.config import close_database, create_engine, create_session_factory
from core.settings import AuditSettings, get_app_settings
from orchestration import InMemoryEventBus, RunController, create_default_controller

if TYPE_CHECKING:
    from api.websocket import ConnectionManager

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_audit_settings: Optional[AuditSettings] = None
_event_bus: Optional[InMemoryEventBus] = None
_engine: Optional[AsyncEngine] = None
_audit_store: Optional[AuditStore] = None
_run_controller: Optional[RunController] = None
_connection_manager: Optional[ConnectionManager] = None
_connection_checker: Optional[HttpConnectionChecker] = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_audit_settings() -> AuditSettings:
    return _audit_settings or get_app_settings().audit


def get_event_bus() -> InMemoryEventBus:
    global _event_bus
    if _event_bus is None:
        _event_bus = InMemoryEventBus()
        logger.info("Created InMemoryEventBus instance")
    return _event_bus


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_engine(get_app_settings().database)
    return _engine


def get_audit_store() -> AuditStore:
    global _audit_store

    if _audit_store is None:
        backend = get_app_settings().server.store_backend

        if backend == "sqlalchemy":
            from core.infrastructure.database.repositories.sqlalchemy_audit_store import SQLAlchemyAuditStore
            _audit_store = SQLAlchemyAuditStore(create_session_factory(get_engine()))
            logger.info("Created SQLAlchemyAuditStore instance")
        else:
            _audit_store = InMemoryAuditStore()
            logger.info("Created InMemoryAuditStore instance")

    return _audit_store


def get_connection_manager() -> ConnectionManager:
    global _connection_manager
    if _connection_manager is None:
        from api.websocket import ConnectionManager
        _connection_manager = ConnectionManager(get_event_bus())
        logger.info("Created ConnectionManager subscribed to audit events")
    return _connection_manager


def get_run_controller() -> RunController:
    global _run_controller
    if _run_controller is None:
        _run_controller = create_default_controller(
            store=get_audit_store(),
            settings=get_audit_settings(),
            notifier=get_event_bus(),
        )
        logger.info(f"Created RunController ({len(_run_controller.registry)} steps)")
    return _run_controller


def get_issue_service() -> IssueApplicationService:
    return IssueApplicationService(store=get_audit_store(), notifier=get_event_bus())


def get_dashboard_service() -> DashboardService:
    return DashboardService(
        store=get_audit_store(),
        poll_interval_seconds=get_audit_settings().poll_interval_seconds,
    )


def get_environment_service() -> EnvironmentService:
    settings = get_audit_settings()
    return EnvironmentService(
        store=get_audit_store(),
        env_file=DotenvFile(settings.storefront_env_path),
        example_file=DotenvFile(settings.storefront_env_example_path),
    )


def get_connection_checker() -> HttpConnectionChecker:
    global _connection_checker
    if _connection_checker is None:
        settings = get_audit_settings()
        _connection_checker = HttpConnectionChecker(
            http_checks=settings.connection_http_checks,
            timeout_seconds=settings.connection_timeout_seconds,
        )
        logger.info(f"Created HttpConnectionChecker (http_checks={settings.connection_http_checks})")
    return _connection_checker


def get_connection_service() -> ConnectionService:
    return ConnectionService(
        store=get_audit_store(),
        notifier=get_event_bus(),
        checker=get_connection_checker(),
    )


# =============================================================================
# SHUTDOWN / RESET
# =============================================================================

async def shutdown_dependencies() -> None:
    """Cancel running audit jobs and release database connections."""
    if _run_controller is not None:
        await _run_controller.shutdown()
    if _engine is not None:
        await close_database(_engine)


def reset_dependencies():
    global _audit_settings, _event_bus, _engine, _audit_store, _run_controller
    global _connection_manager, _connection_checker

    _audit_settings = None
    _event_bus = None
    _engine = None
    _audit_store = None
    _run_controller = None
    _connection_manager = None
    _connection_checker = None

    logger.info("Dependencies reset")
