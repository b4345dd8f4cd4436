"""Tests for the published spreadsheet fetch controller."""

import asyncio

import httpx
import pytest

from wagerboard.datasources import PublishedSheetSource
from wagerboard.exceptions import FetchErrorKind, FetchFailure
from wagerboard.models import FetchState

SHEET_URL = "https://sheet.test/pub?output=csv"
PROXY_URL = "https://proxy.test/" + SHEET_URL
CSV_BODY = "username,wagered\nZoë,500\n".encode("utf-8")


def _csv(status: int = 200) -> httpx.Response:
    return httpx.Response(status, content=CSV_BODY, headers={"content-type": "text/csv; charset=utf-8"})


def _source(handler, state: FetchState | None = None, clock=lambda: 100000.0, sleep=None):
    async def no_sleep(seconds: float) -> None:
        pass

    return PublishedSheetSource(
        sheet_url=SHEET_URL,
        proxy_url=PROXY_URL,
        state=state or FetchState(refresh_interval_ms=30000),
        transport=httpx.MockTransport(handler),
        clock=clock,
        sleep=sleep or no_sleep,
    )


def _fetch(source: PublishedSheetSource) -> str:
    async def run() -> str:
        try:
            return await source.fetch_text()
        finally:
            await source.close()

    return asyncio.run(run())


def test_direct_csv_is_used_when_usable():
    hosts = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        return _csv()

    text = _fetch(_source(handler))

    assert text == "username,wagered\nZoë,500\n"
    assert hosts == ["sheet.test"]


def test_non_csv_content_type_falls_back_to_proxy():
    hosts = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        if request.url.host == "sheet.test":
            return httpx.Response(200, content=b"<html></html>", headers={"content-type": "text/html"})
        return _csv()

    text = _fetch(_source(handler))

    assert text.startswith("username,wagered")
    assert hosts == ["sheet.test", "proxy.test"]


def test_direct_transport_error_falls_back_to_proxy():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "sheet.test":
            raise httpx.ConnectError("blocked", request=request)
        return _csv()

    assert _fetch(_source(handler)).startswith("username")


def test_proxy_accepts_any_successful_content_type():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "sheet.test":
            return httpx.Response(503)
        return httpx.Response(200, content=CSV_BODY, headers={"content-type": "text/plain"})

    assert _fetch(_source(handler)).startswith("username")


def test_final_server_error_raises_fetch_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(FetchFailure) as exc_info:
        _fetch(_source(handler))

    assert exc_info.value.kind == FetchErrorKind.SERVER
    assert exc_info.value.status_code == 500
    assert exc_info.value.reason == "Internal Server Error"
    assert "500" in str(exc_info.value)


def test_rate_limited_proxy_is_classified():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "sheet.test":
            raise httpx.ConnectError("blocked", request=request)
        return httpx.Response(429)

    with pytest.raises(FetchFailure) as exc_info:
        _fetch(_source(handler))

    assert exc_info.value.is_rate_limited


def test_proxy_connect_error_is_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(FetchFailure) as exc_info:
        _fetch(_source(handler))

    assert exc_info.value.kind == FetchErrorKind.NETWORK
    assert exc_info.value.status_code is None


def test_proxy_protocol_error_is_connection_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "sheet.test":
            return httpx.Response(403)
        raise httpx.RemoteProtocolError("bad response", request=request)

    with pytest.raises(FetchFailure) as exc_info:
        _fetch(_source(handler))

    assert exc_info.value.kind == FetchErrorKind.CONNECTION


def test_requests_are_spaced():
    waits = []

    async def record_sleep(seconds: float) -> None:
        waits.append(seconds)

    state = FetchState(refresh_interval_ms=30000, last_request_at_ms=1000.0)
    source = _source(lambda request: _csv(), state=state, clock=lambda: 3000.0, sleep=record_sleep)

    _fetch(source)

    assert waits == [3.0]
    assert state.last_request_at_ms == 3000.0


def test_no_wait_when_spacing_has_elapsed():
    waits = []

    async def record_sleep(seconds: float) -> None:
        waits.append(seconds)

    state = FetchState(refresh_interval_ms=30000, last_request_at_ms=1000.0)
    source = _source(lambda request: _csv(), state=state, clock=lambda: 6000.0, sleep=record_sleep)

    _fetch(source)

    assert waits == []


def test_failed_attempt_still_stamps_request_time():
    state = FetchState(refresh_interval_ms=30000)
    source = _source(lambda request: httpx.Response(500), state=state, clock=lambda: 4242.0)

    with pytest.raises(FetchFailure):
        _fetch(source)

    assert state.last_request_at_ms == 4242.0
