"""Synchronous HTTP transport built on a pooled ``requests.Session``."""
from typing import Mapping, Optional

import requests
from requests.adapters import HTTPAdapter

from . import __version__
from .exceptions import TransportError
from .tls import HostnameCheckingAdapter

USER_AGENT = f"kraken-api-python/{__version__}"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpTransport:
    """POST url-encoded bodies and return the raw response bytes.

    Notes:
    - No retries: a resent private request would reuse its nonce.
    - ``verify_peer=False`` disables certificate trust checks only; the
      certificate must still match the requested hostname.
    - The session is safe to share between threads for independent calls.
    """

    def __init__(self, *, verify_peer: bool = True, timeout: float = 10, session: Optional[requests.Session] = None):
        self.verify_peer = verify_peer
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT
        if verify_peer:
            self.session.mount("https://", HTTPAdapter(max_retries=0))
        else:
            self.session.verify = False
            self.session.mount("https://", HostnameCheckingAdapter(max_retries=0))
        self.session.mount("http://", HTTPAdapter(max_retries=0))

    def post(self, url: str, body: str, headers: Optional[Mapping[str, str]] = None) -> bytes:
        """Send ``body`` to ``url``.

        Raises:
            TransportError: On connection/TLS failure, timeout or non-2xx status
        """
        request_headers = {"Content-Type": FORM_CONTENT_TYPE}
        request_headers.update(headers or {})
        try:
            resp = self.session.request("POST", url, data=body.encode("utf-8"), headers=request_headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", cause=e) from e

        if not resp.ok:
            raise TransportError(f"{resp.status_code}: {resp.text}")
        return resp.content

    def close(self) -> None:
        self.session.close()
