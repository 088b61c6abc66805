"""
Transports carry :py:class:`Request` descriptors to a server and return response bodies.

Any async callable accepting a :py:class:`Request` can serve as a transport. Whatever it
raises reaches the caller of the client operation untouched.
"""

import logging
import typing

import httpx

from .models import Request
from .types import JSONValue

logger = logging.getLogger(__name__)


class Transport(typing.Protocol):
    async def __call__(self, request: Request) -> JSONValue:
        ...  # pragma: nocover


class HttpxTransport:
    """
    The default transport, backed by :py:class:`httpx.AsyncClient`.

    :param Optional[httpx.AsyncClient] client: a client to send requests through. It is
                                               reused across requests and never closed here.
                                               A short-lived client is opened per request
                                               when omitted.
    :param float timeout: timeout for the short-lived clients.
    """

    _client: typing.Optional[httpx.AsyncClient]
    _timeout: float

    async def _send(self, client: httpx.AsyncClient, request: Request) -> JSONValue:
        try:
            resp = await client.request(
                request.method or "GET",
                request.url,
                headers=request.headers,
                json=request.data,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as ex:
            logger.warning(
                "%s %s failed status=%s reason=%s",
                request.method,
                request.url,
                ex.response.status_code,
                ex.response.content,
            )
            raise
        except httpx.HTTPError as ex:
            logger.warning("%s %s failed: %s", request.method, request.url, ex)
            raise

        if not resp.content:
            return None
        return resp.json()

    async def __call__(self, request: Request) -> JSONValue:
        logger.debug("%s %s", request.method, request.url)
        if self._client is not None:
            return await self._send(self._client, request)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._send(client, request)

    def __init__(self, client: typing.Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._client = client
        self._timeout = timeout
