from __future__ import annotations

import httpx
import pytest

from uk_covid19_client.core.async_transport import AsyncTransport
from uk_covid19_client.core.errors import Cov19TransportError
from tests.shared.transport import AsyncSequencedClient, Response, build_config


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("step", "expected_status", "expected_cause"),
    [
        (Response(200, b"{}"), 200, None),
        (Response(204), 204, None),
        (Response(500, b"err"), 500, None),
        (httpx.ConnectError("network down"), None, "network"),
        (httpx.ReadTimeout("slow"), None, "timeout"),
    ],
    ids=["ok", "no-content", "server-error-passthrough", "network", "timeout"],
)
async def test_async_session_status_matrix(step, expected_status, expected_cause):
    client = AsyncSequencedClient([step])
    transport = AsyncTransport(build_config(), client_factory=lambda: client)

    async with transport.session() as session:
        if expected_cause is not None:
            with pytest.raises(Cov19TransportError) as exc_info:
                await session.get("https://api.example.test/v1/data?page=1", page=1)
            assert exc_info.value.cause == expected_cause
            assert exc_info.value.page == 1
        else:
            response = await session.get("https://api.example.test/v1/data?page=1", page=1)
            assert response.status_code == expected_status

    assert client.closed is True
    assert client.calls == [("GET", "https://api.example.test/v1/data?page=1")]


@pytest.mark.asyncio
async def test_async_transport_can_open_and_close_real_httpx_session():
    transport = AsyncTransport(build_config())
    async with transport.session() as session:
        assert session is not None
    await transport.close()
    assert transport.closed is True
    with pytest.raises(Cov19TransportError):
        async with transport.session():
            pass
