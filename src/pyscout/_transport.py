"""HTTP transport for remote record sync."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyscout._constants import DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from pyscout.exceptions import ScoutTransportError

_logger = logging.getLogger(__name__)


class SyncTransport(Protocol):
    """Structural transport interface used by the sync adapter.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def post_json(self, url: str, payload: Mapping[str, Any]) -> None: ...

    async def get_json(self, url: str) -> Any: ...


class HttpTransport:
    """aiohttp-backed transport talking plain JSON to the remote endpoint."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def post_json(self, url: str, payload: Mapping[str, Any]) -> None:
        """POST *payload* as JSON.

        Only transport-level failures are reported: the response status and
        body are not inspected, since the endpoint may not expose them.
        """
        headers = {
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        body = json.dumps(payload, separators=(",", ":"))

        _logger.debug("POST %s", url)

        try:
            async with self._http.post(url, data=body, headers=headers, timeout=self._timeout) as resp:
                await resp.read()
                _logger.debug("POST %s -> HTTP %s", url, resp.status)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ScoutTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc

    async def get_json(self, url: str) -> Any:
        """GET *url* and return the decoded JSON body."""
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                text = body.decode("utf-8", errors="replace")
                if not 200 <= resp.status < 300:
                    raise ScoutTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
                status = resp.status
        except ScoutTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ScoutTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ScoutTransportError(
                f"Invalid JSON from {url}: {text[:200]}",
                status_code=status,
                url=url,
            ) from exc
