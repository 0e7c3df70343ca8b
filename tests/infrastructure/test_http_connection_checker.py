"""Tests for HttpConnectionChecker against a local aiohttp server."""

from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from core.domain.providers import get_provider
from core.infrastructure.adapters.connections.http_connection_checker import HttpConnectionChecker

RAZORPAY = {"RAZORPAY_KEY_ID": "rzp_test_123", "RAZORPAY_KEY_SECRET": "s3cret"}
PROKERALA = {"PROKERALA_API_KEY": "pk_live", "PROKERALA_USER_ID": "user-7"}

SEEN = web.AppKey("seen", dict)


@pytest_asyncio.fixture
async def provider_server() -> AsyncGenerator[test_utils.TestServer, None]:
    """Fake provider API; records the Authorization header of each request."""
    seen: Dict[str, str] = {}

    async def payments(request: web.Request) -> web.Response:
        seen["razorpay"] = request.headers.get("Authorization", "")
        if request.headers.get("Authorization") != "Basic cnpwX3Rlc3RfMTIzOnMzY3JldA==":
            return web.Response(status=401)
        return web.json_response({"items": []})

    async def kundli(request: web.Request) -> web.Response:
        seen["prokerala"] = request.headers.get("Authorization", "")
        return web.json_response({"errors": ["datetime is required"]}, status=422)

    async def broken(request: web.Request) -> web.Response:
        return web.Response(status=503)

    app = web.Application()
    app.router.add_get("/v1/payments", payments)
    app.router.add_get("/v2/astrology/kundli", kundli)
    app.router.add_get("/affiliates", broken)
    app[SEEN] = seen

    server = test_utils.TestServer(app)
    await server.start_server()
    yield server
    await server.close()


def _checker(server: test_utils.TestServer) -> HttpConnectionChecker:
    return HttpConnectionChecker(
        http_checks=True,
        timeout_seconds=5,
        endpoints={
            "razorpay": str(server.make_url("/v1/payments")),
            "prokerala": str(server.make_url("/v2/astrology/kundli")),
            "goaffpro": str(server.make_url("/affiliates")),
        },
    )


@pytest.mark.asyncio
async def test_missing_variables_fail_without_a_request():
    checker = HttpConnectionChecker(http_checks=True, endpoints={"razorpay": "http://127.0.0.1:9/"})

    result = await checker.check(get_provider("razorpay"), {"RAZORPAY_KEY_ID": "rzp_test_123", "RAZORPAY_KEY_SECRET": ""})

    assert result.success is False
    assert result.error == "Missing RAZORPAY_KEY_SECRET"


@pytest.mark.asyncio
async def test_variable_check_only_when_http_checks_disabled():
    checker = HttpConnectionChecker(http_checks=False)

    result = await checker.check(get_provider("prokerala"), PROKERALA)

    assert result.success is True
    assert result.error is None


@pytest.mark.asyncio
async def test_basic_auth_accepted(provider_server):
    result = await _checker(provider_server).check(get_provider("razorpay"), RAZORPAY)

    assert result.success is True
    assert provider_server.app[SEEN]["razorpay"].startswith("Basic ")


@pytest.mark.asyncio
async def test_rejected_credentials(provider_server):
    credentials = dict(RAZORPAY, RAZORPAY_KEY_SECRET="wrong")

    result = await _checker(provider_server).check(get_provider("razorpay"), credentials)

    assert result.success is False
    assert result.error == "Invalid API credentials"


@pytest.mark.asyncio
async def test_provider_specific_accepted_status(provider_server):
    result = await _checker(provider_server).check(get_provider("prokerala"), PROKERALA)

    assert result.success is True
    assert provider_server.app[SEEN]["prokerala"] == "Bearer pk_live"


@pytest.mark.asyncio
async def test_server_error_reported(provider_server):
    credentials = {"GOAFFPRO_API_KEY": "gk", "GOAFFPRO_STORE_ID": "42"}

    result = await _checker(provider_server).check(get_provider("goaffpro"), credentials)

    assert result.success is False
    assert result.error == "HTTP 503: Service Unavailable"


@pytest.mark.asyncio
async def test_unreachable_provider_is_a_network_error(provider_server):
    url = str(provider_server.make_url("/v1/payments"))
    await provider_server.close()
    checker = HttpConnectionChecker(http_checks=True, timeout_seconds=2, endpoints={"razorpay": url})

    result = await checker.check(get_provider("razorpay"), RAZORPAY)

    assert result.success is False
    assert result.error.startswith("Network error")
