"""HTTP transport returning decoded JSON documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pysmartnav._constants import USER_AGENT
from pysmartnav._redact import redact_for_log, redact_url
from pysmartnav.exceptions import NavTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the provider adapters.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`JsonTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any: ...

    async def post_json(self, url: str, data: str, *, content_type: str) -> Any: ...


class JsonTransport:
    """aiohttp transport that maps every failure to :class:`NavTransportError`."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        collaborator: str = "",
        user_agent: str = USER_AGENT,
        timeout: float | None = None,
    ) -> None:
        self._http = http_session
        self._collaborator = collaborator
        self._headers = {"user-agent": user_agent, "accept": "application/json"}
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout is not None else None

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        _logger.debug("GET %s params=%s", redact_url(url), redact_for_log(dict(params or {})))
        return await self._request("GET", url, params=params)

    async def post_json(self, url: str, data: str, *, content_type: str) -> Any:
        _logger.debug("POST %s", redact_url(url))
        return await self._request("POST", url, data=data, content_type=content_type)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        data: str | None = None,
        content_type: str | None = None,
    ) -> Any:
        headers = dict(self._headers)
        if content_type:
            headers["content-type"] = content_type
        endpoint = redact_url(url)
        extra: dict[str, Any] = {}
        if self._timeout is not None:
            extra["timeout"] = self._timeout

        try:
            async with self._http.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                **extra,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise NavTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                        collaborator=self._collaborator,
                    )
        except NavTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NavTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
                collaborator=self._collaborator,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise NavTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
                collaborator=self._collaborator,
            ) from exc
