import asyncio
import base64

import aiohttp
import pytest

from kraken_api.async_dispatcher import AsyncKrakenDispatcher
from kraken_api.exceptions import DecodeError, SigningPreconditionError, TransportError
from kraken_api.nonce import NonceGenerator

ZERO_SECRET_B64 = base64.b64encode(bytes(32)).decode()
BALANCE_SIGNATURE = "HjPRjfEPCqF9f4hhbOMvojPCjW3lApUOLSK7gUyFfTO8n2MndpxXIlXnk//TaVfVBcQWwNN00UtoCFmbHbIafw=="


class FakeResponse:
    def __init__(self, body=b'{"error": [], "result": {}}', status=200, gate=None):
        self.body = body
        self.status = status
        self.gate = gate
        self.finished = False

    async def read(self):
        if self.gate is not None:
            await self.gate.wait()
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.finished = True
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.post()."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers})
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self):
        self.closed = True


def fixed_dispatcher(session):
    return AsyncKrakenDispatcher(
        "K",
        ZERO_SECRET_B64,
        session=session,
        nonce_generator=NonceGenerator(clock=lambda: 1700000000123456),
    )


@pytest.mark.asyncio
async def test_private_balance_golden_request():
    session = FakeSession(FakeResponse(b'{"error": [], "result": {"ZUSD": "1.0"}}'))
    async with fixed_dispatcher(session) as kraken:
        response = await kraken.call_private("Balance", {})

    assert response.result == {"ZUSD": "1.0"}
    call = session.calls[0]
    assert call["url"] == "https://api.kraken.com/0/private/Balance"
    assert call["data"] == b"nonce=1700000000123456"
    assert call["headers"]["API-Key"] == "K"
    assert call["headers"]["API-Sign"] == BALANCE_SIGNATURE
    assert not session.closed  # injected sessions belong to the caller


@pytest.mark.asyncio
async def test_public_call_has_no_auth_headers():
    session = FakeSession(FakeResponse(b'{"error": [], "result": {"unixtime": 1}}'))
    kraken = fixed_dispatcher(session)

    response = await kraken.dispatch(False, "Time")

    assert response.result == {"unixtime": 1}
    assert "API-Sign" not in session.calls[0]["headers"]
    assert session.calls[0]["url"] == "https://api.kraken.com/0/public/Time"


@pytest.mark.asyncio
async def test_client_error_raises_transport_error():
    session = FakeSession(aiohttp.ClientConnectionError("refused"))
    with pytest.raises(TransportError, match="refused"):
        await fixed_dispatcher(session).call_private("Balance")


@pytest.mark.asyncio
async def test_timeout_raises_transport_error():
    session = FakeSession(asyncio.TimeoutError())
    with pytest.raises(TransportError, match="timeout"):
        await fixed_dispatcher(session).call_public("Time")


@pytest.mark.asyncio
async def test_non_2xx_raises_transport_error():
    session = FakeSession(FakeResponse(b"Bad Gateway", status=502))
    with pytest.raises(TransportError, match="502"):
        await fixed_dispatcher(session).call_public("Time")


@pytest.mark.asyncio
async def test_malformed_body_raises_decode_error():
    session = FakeSession(FakeResponse(b"not json"))
    with pytest.raises(DecodeError):
        await fixed_dispatcher(session).call_private("Balance")


@pytest.mark.asyncio
async def test_request_without_session_raises():
    kraken = AsyncKrakenDispatcher("K", ZERO_SECRET_B64)
    with pytest.raises(TransportError, match="Session not initialized"):
        await kraken.call_public("Time")


@pytest.mark.asyncio
async def test_private_call_without_credentials_fails_closed():
    kraken = AsyncKrakenDispatcher(session=FakeSession())
    with pytest.raises(SigningPreconditionError):
        await kraken.call_private("Balance")


def test_disabling_peer_verification_is_rejected():
    with pytest.raises(ValueError, match="verify_peer"):
        AsyncKrakenDispatcher(verify_peer=False)


@pytest.mark.asyncio
async def test_context_manager_creates_and_closes_own_session():
    kraken = AsyncKrakenDispatcher()
    assert kraken.session is None
    async with kraken:
        assert kraken.session is not None
    assert kraken.session.closed


@pytest.mark.asyncio
async def test_cancelled_private_call_completes_and_nonce_is_not_reused():
    """Cancelling the caller must not abort a request whose nonce was issued."""
    gate = asyncio.Event()
    slow = FakeResponse(gate=gate)
    session = FakeSession(slow, FakeResponse())
    kraken = fixed_dispatcher(session)

    task = asyncio.ensure_future(kraken.call_private("Balance"))
    while not session.calls:
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    gate.set()
    for _ in range(10):
        if slow.finished:
            break
        await asyncio.sleep(0.01)
    assert slow.finished

    await kraken.call_private("Balance")
    assert session.calls[0]["data"] == b"nonce=1700000000123456"
    assert session.calls[1]["data"] == b"nonce=1700000000123457"


@pytest.mark.asyncio
async def test_concurrent_private_calls_get_distinct_nonces():
    session = FakeSession(*[FakeResponse() for _ in range(50)])
    kraken = fixed_dispatcher(session)

    await asyncio.gather(*(kraken.call_private("Balance") for _ in range(50)))

    bodies = [call["data"] for call in session.calls]
    assert len(set(bodies)) == 50
