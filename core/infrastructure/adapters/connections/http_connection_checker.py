"""
HTTP Connection Checker.

Checks whether the credentials configured for a provider are complete and,
when HTTP checks are enabled, whether the provider accepts them.
"""
from dataclasses import dataclass
from typing import Dict, Optional
import asyncio
import logging

import aiohttp

from core.domain.providers import Provider


logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    success: bool
    error: Optional[str] = None


class HttpConnectionChecker:
    """
    Credential checker for storefront providers.

    Without HTTP checks only the presence of the required variables is
    verified. With them, one authenticated GET goes to the provider's check
    endpoint; a 2xx/3xx answer (or a provider specific accepted status)
    counts as connected.
    """

    def __init__(
        self,
        http_checks: bool = False,
        timeout_seconds: float = 10.0,
        endpoints: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize connection checker.

        Args:
            http_checks: Send a request to the provider after the variable check
            timeout_seconds: Total timeout of one request
            endpoints: Check URL per provider name, overriding the catalog
        """
        self.http_checks = http_checks
        self.timeout_seconds = timeout_seconds
        self._endpoints = endpoints or {}

    async def check(self, provider: Provider, credentials: Dict[str, str]) -> CheckResult:
        """
        Check one provider.

        Args:
            provider: Provider to check
            credentials: Configured variable values by key

        Returns:
            CheckResult; network problems are reported, never raised
        """
        missing = provider.missing_vars(key for key, value in credentials.items() if value)
        if missing:
            return CheckResult(success=False, error=f"Missing {' or '.join(missing)}")

        if not self.http_checks:
            return CheckResult(success=True)

        return await self._request(provider, credentials)

    async def _request(self, provider: Provider, credentials: Dict[str, str]) -> CheckResult:
        url = self._endpoints.get(provider.name, provider.check_url)
        first, second = (credentials[name] for name in provider.required_vars[:2])

        headers = {"Content-Type": "application/json"}
        auth = None
        if provider.auth_scheme == "basic":
            auth = aiohttp.BasicAuth(first, second)
        else:
            headers["Authorization"] = f"Bearer {first}"

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, headers=headers, auth=auth) as response:
                    if response.ok or response.status in provider.accepted_statuses:
                        return CheckResult(success=True)
                    if response.status == 401:
                        return CheckResult(success=False, error="Invalid API credentials")
                    return CheckResult(
                        success=False,
                        error=f"HTTP {response.status}: {response.reason}",
                    )
        except asyncio.TimeoutError:
            logger.warning(f"{provider.name} check timed out after {self.timeout_seconds:g}s")
            return CheckResult(
                success=False,
                error=f"Network error: timed out after {self.timeout_seconds:g} seconds",
            )
        except aiohttp.ClientError as e:
            logger.warning(f"{provider.name} check failed: {e}")
            return CheckResult(success=False, error=f"Network error: {e}")
