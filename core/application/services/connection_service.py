"""Application service for provider connection checks."""

import time
from typing import List

from core.domain.entities import ApiConnection
from core.domain.providers import PROVIDERS, get_provider
from core.domain.repositories import AuditStore
from core.infrastructure.adapters.connections.http_connection_checker import HttpConnectionChecker
from core.infrastructure.logging import get_logger
from core.utils.datetime import utc_now
from orchestration.bus import NotifierProtocol
from orchestration.events import Event, EventMetadata, EventType


class ConnectionService:
    """
    Checks the storefront's provider credentials and records the outcome.

    Credentials come from the managed environment variables; only active
    variables named by the provider are handed to the checker.
    """

    def __init__(
        self,
        store: AuditStore,
        notifier: NotifierProtocol,
        checker: HttpConnectionChecker,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._checker = checker
        self._logger = get_logger("application.connection_service")

    async def list_connections(self) -> List[ApiConnection]:
        return await self._store.list_connections()

    async def test_connection(self, service: str) -> ApiConnection:
        """Check one provider and broadcast ``connection_tested``.

        Raises:
            UnknownServiceError: If ``service`` is not a known provider
        """
        connection = await self._check(service)
        await self._publish(EventType.CONNECTION_TESTED, {"result": connection.to_dict()})
        return connection

    async def test_all(self) -> List[ApiConnection]:
        """Check every provider in turn and broadcast ``connections_tested``."""
        results = [await self._check(provider.name) for provider in PROVIDERS]
        await self._publish(
            EventType.CONNECTIONS_TESTED,
            {"results": [connection.to_dict() for connection in results]},
        )
        return results

    async def _check(self, service: str) -> ApiConnection:
        provider = get_provider(service)
        env_vars = await self._store.list_env_vars()
        credentials = {
            v.key: v.value
            for v in env_vars
            if v.is_active and v.key in provider.required_vars
        }

        started = time.monotonic()
        result = await self._checker.check(provider, credentials)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        connection = await self._store.get_connection(service) or ApiConnection(service=service)
        connection.record_check(result.success, result.error, elapsed_ms)
        stored = await self._store.save_connection(connection)
        self._logger.info(f"Connection check {service}: {stored.status.value} ({elapsed_ms}ms)")
        return stored

    async def _publish(self, event_type: EventType, payload: dict) -> None:
        await self._notifier.broadcast(
            Event(
                type=event_type,
                payload=payload,
                metadata=EventMetadata(run_id=None, timestamp=utc_now()),
            )
        )
