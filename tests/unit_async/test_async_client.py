from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from uk_covid19_client.async_client import AsyncCov19Client
from uk_covid19_client.config import Cov19ClientConfig
from uk_covid19_client.core.async_transport import AsyncTransport
from uk_covid19_client.core.errors import (
    Cov19ClientClosedError,
    Cov19DecodeError,
    Cov19TransportError,
    Cov19UpstreamError,
    Cov19ValidationError,
)
from uk_covid19_client.data.queries import Cov19Query
from tests.shared.payloads import (
    json_page,
    make_openapi_payload,
    make_record,
    no_content,
    xml_page,
)
from tests.shared.transport import Response, build_async_transport, build_config

QUERY = Cov19Query(
    filters={"areaType": "nation", "areaName": "England"},
    structure={"MyDate": "date", "newCases": "newCasesByPublishDate"},
)


@pytest.mark.asyncio
async def test_async_client_context_manager_closes_transport():
    transport, _ = build_async_transport()
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        assert client is not None
    assert transport.closed is True


@pytest.mark.asyncio
async def test_async_client_raises_when_used_after_close():
    transport, _ = build_async_transport()
    client = AsyncCov19Client(QUERY, transport=transport)
    await client.close()
    with pytest.raises(Cov19ClientClosedError):
        await client.get()
    with pytest.raises(Cov19ClientClosedError):
        await client.options()


@pytest.mark.asyncio
async def test_async_get_returns_all_pages():
    transport, recorder = build_async_transport(
        [
            json_page([make_record("2021-01-02", 2)], last_modified="2021-01-02T00:00:00Z"),
            json_page([make_record("2021-01-01", 1)], page=2),
            no_content(),
        ]
    )
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        result = await client.get()
        cached = await client.last_update()

    assert result.length == 2
    assert result.total_pages == 2
    assert [item["MyDate"] for item in result.data] == ["2021-01-02", "2021-01-01"]
    assert result.last_update == "2021-01-02T00:00:00+00:00"
    assert cached == datetime(2021, 1, 2, tzinfo=timezone.utc)
    assert len(recorder.clients) == 1
    assert recorder.clients[0].closed is True


@pytest.mark.asyncio
async def test_async_get_xml_finalizes_document():
    transport, _ = build_async_transport(
        [
            xml_page([make_record("2021-01-02", 2)]),
            xml_page([make_record("2021-01-01", 1)], page=2),
            no_content(),
        ]
    )
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        result = await client.get_xml()

    assert result.length == 2
    assert result.document.findtext("totalPages") == "2"
    assert result.document.findtext("lastUpdate") == ""
    assert list(result.document.iter("pagination")) == []


@pytest.mark.asyncio
async def test_async_failed_fetch_closes_handle():
    transport, recorder = build_async_transport([Response(404)])
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        with pytest.raises(Cov19UpstreamError) as exc_info:
            await client.get()
    assert exc_info.value.status_code == 404
    assert recorder.clients[0].closed is True


@pytest.mark.asyncio
async def test_async_transport_error_is_wrapped():
    transport, _ = build_async_transport([httpx.ReadTimeout("slow")])
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        with pytest.raises(Cov19TransportError) as exc_info:
            await client.get()
    assert exc_info.value.cause == "timeout"


@pytest.mark.asyncio
async def test_async_last_update_probes_once():
    transport, recorder = build_async_transport(
        [Response(200, b"{}", {"Last-Modified": "Fri, 01 Jan 2021 00:00:00 GMT"})]
    )
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        first = await client.last_update()
        second = await client.last_update()
    assert first == second == datetime(2021, 1, 1, tzinfo=timezone.utc)
    assert len(recorder.clients) == 1


@pytest.mark.asyncio
async def test_async_options_and_head():
    endpoint = build_config().endpoint
    transport, recorder = build_async_transport(
        [Response(200, json.dumps(make_openapi_payload(endpoint)).encode("utf-8"))],
        [Response(200, b"{}", {"Content-Location": "/v1/data"})],
        [Response(200, b"not json")],
    )
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        description = await client.options()
        headers = await client.head()
        with pytest.raises(Cov19DecodeError):
            await client.options()

    assert description.servers == (endpoint,)
    assert headers["Content-Location"] == "/v1/data"
    assert recorder.clients[0].calls == [("OPTIONS", endpoint)]
    assert recorder.clients[1].calls == [("GET", client.base_url)]


class _HangingClient:
    def __init__(self):
        self.started = asyncio.Event()
        self.closed = False

    async def request(self, method: str, url: str):
        self.started.set()
        await asyncio.Event().wait()

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_async_cancelled_fetch_closes_handle_and_keeps_cache_unset():
    handle = _HangingClient()
    transport = AsyncTransport(build_config(), client_factory=lambda: handle)
    client = AsyncCov19Client(QUERY, transport=transport)

    task = asyncio.create_task(client.get())
    await handle.started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert handle.closed is True
    assert client._last_update.get() is None
    await client.close()


@pytest.mark.asyncio
async def test_async_client_takes_endpoint_from_injected_transport():
    transport, recorder = build_async_transport([no_content()])
    async with AsyncCov19Client(QUERY, transport=transport) as client:
        result = await client.get()

    assert result.total_pages == 0
    assert recorder.clients[0].urls[0].startswith(build_config().endpoint + "?")


@pytest.mark.asyncio
async def test_async_client_rejects_config_that_disagrees_with_transport():
    transport, _ = build_async_transport()
    with pytest.raises(Cov19ValidationError, match="does not match transport endpoint"):
        AsyncCov19Client(QUERY, config=Cov19ClientConfig(), transport=transport)
