"""Async dispatcher using aiohttp.

Shares request building (nonce, encoding, signing) with ``KrakenDispatcher``.
Private requests are shielded from cancellation once their nonce is issued:
the caller sees ``CancelledError`` but the request still completes, so the
server and the nonce generator never disagree about the last nonce used.

Usage:
    async with AsyncKrakenDispatcher(api_key, api_secret) as kraken:
        response = await kraken.call_private("Balance")
"""
import asyncio
from typing import Any, Mapping, Optional

import aiohttp

from .decoding import ApiResponse, decode_response
from .dispatcher import BaseDispatcher, SignedRequest
from .exceptions import KrakenAPIError, TransportError
from .logging_setup import logger
from .transport import FORM_CONTENT_TYPE, USER_AGENT


class AsyncKrakenDispatcher(BaseDispatcher):
    """Non-blocking entry point for public and private Kraken calls.

    Peer verification cannot be disabled here: aiohttp gives no hook between
    the TLS handshake and writing the request, so the hostname of an
    untrusted certificate could not be checked before the signed body is sent.
    """

    def __init__(self, api_key: Optional[str] = None, api_secret: Optional[str] = None, *, session: Optional[aiohttp.ClientSession] = None, **kwargs):
        super().__init__(api_key, api_secret, **kwargs)
        if not self.verify_peer:
            raise ValueError("AsyncKrakenDispatcher requires verify_peer=True")
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(headers={"User-Agent": USER_AGENT})
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session and self._owns_session:
            await self.session.close()

    async def _post(self, url: str, body: str, headers: Mapping[str, str]) -> bytes:
        if not self.session:
            raise TransportError("Session not initialized; use 'async with' context manager")

        request_headers = {"Content-Type": FORM_CONTENT_TYPE}
        request_headers.update(headers)
        try:
            async with self.session.post(url, data=body.encode("utf-8"), headers=request_headers, timeout=aiohttp.ClientTimeout(total=self.timeout)) as resp:
                raw = await resp.read()
                if not (200 <= resp.status < 300):
                    raise TransportError(f"{resp.status}: {raw.decode('utf-8', errors='replace')}")
                return raw
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timeout: {e}", cause=e) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}", cause=e) from e

    async def _send(self, method: str, request: SignedRequest, *, atomic: bool) -> ApiResponse:
        post = self._post(self.url_for(request.path), request.body, request.headers)
        try:
            if atomic:
                task = asyncio.ensure_future(post)
                task.add_done_callback(_log_detached_failure)
                raw = await asyncio.shield(task)
            else:
                raw = await post
            response = decode_response(raw)
        except KrakenAPIError as e:
            logger.warning(f"Kraken call {method} failed: {e}")
            raise
        if not response.ok:
            logger.info(f"Kraken call {method} returned errors: {response.error}")
        return response

    async def call_public(self, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        logger.debug(f"Public call {method}")
        return await self._send(method, self.build_public(method, params), atomic=False)

    async def call_private(self, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return await self._send(method, self.build_private(method, params), atomic=True)

    async def dispatch(self, is_private: bool, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        if is_private:
            return await self.call_private(method, params)
        return await self.call_public(method, params)


def _log_detached_failure(task: "asyncio.Future") -> None:
    # a shielded request may outlive its cancelled caller
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Shielded private request finished with error: {exc}")
