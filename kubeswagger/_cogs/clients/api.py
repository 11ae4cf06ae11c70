"""
The backends: the actual executors of the HTTP requests.

The resource tree does not know how to talk HTTP: every action is delegated
to a backend with the resolved path, the verb, and the caller's parameters.
Any object with a compatible ``request()`` coroutine method can be a backend,
e.g. a fake one in tests, or one wrapping another HTTP library.

The default backend is based on ``aiohttp``. It does not retry the failed
requests and does not validate the payloads: the errors are translated into
the package's API errors (see :mod:`errors`) and escalated to the callers.
"""
import asyncio
import logging
import urllib.parse
from collections.abc import AsyncIterator, Mapping
from typing import Any, Protocol

import aiohttp

from kubeswagger._cogs.clients import auth, errors, streaming
from kubeswagger._cogs.configs import configuration
from kubeswagger._cogs.helpers import typedefs
from kubeswagger._cogs.structs import credentials

logger = logging.getLogger(__name__)


class Backend(Protocol):
    """
    The contract of the backends as expected by the resource tree.

    For regular requests, the decoded response's content is returned.
    For streaming requests, a live :class:`streaming.RawStream` is returned.
    """

    async def request(
            self,
            *,
            method: str,
            path: str,
            params: typedefs.QueryParams | None = None,
            body: object | None = None,
            headers: Mapping[str, str] | None = None,
            streaming: bool = False,
    ) -> Any: ...


class ResponseStream:
    """ An aiohttp response as a raw stream of byte chunks. """

    def __init__(self, response: aiohttp.ClientResponse, *, chunk_size: int) -> None:
        super().__init__()
        self._response = response
        self._chunk_size = chunk_size

    @property
    def closed(self) -> bool:
        return self._response.closed

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for data in self._response.content.iter_chunked(self._chunk_size):
                yield data
        except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError) as e:
            raise streaming.StreamTransportError(f"Streaming from {self._response.url} failed.") from e

    def close(self) -> None:
        self._response.close()


class AiohttpBackend:
    """
    A backend based on an aiohttp session, either given or created on demand.

    The session is created lazily on the first request, so that the backend
    can be constructed outside of an event loop (e.g. at import time),
    while the session is created in the loop where it is used.
    """

    def __init__(
            self,
            info: credentials.ConnectionInfo,
            *,
            settings: configuration.ClientSettings | None = None,
            session: aiohttp.ClientSession | None = None,
    ) -> None:
        super().__init__()
        self.info = info
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self._session = session
        self._own_session = session is None
        self._responses: list[aiohttp.ClientResponse] = []

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = auth.make_session(self.info)
        return self._session

    async def __aenter__(self) -> 'AiohttpBackend':
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def close(self) -> None:
        # Close all open streams of this session before closing the session itself.
        for response in self._responses:
            if not response.closed:
                response.close()
        self._responses.clear()
        if self._session is not None and self._own_session:
            await self._session.close()
            self._session = None

    def build_url(self, path: str, params: typedefs.QueryParams | None = None) -> str:
        url = path if '://' in path else self.info.server.rstrip('/') + '/' + path.lstrip('/')
        query = urllib.parse.urlencode(render_params(params or {}), encoding='utf-8')
        return url + ('?' if query else '') + query

    async def request(
            self,
            *,
            method: str,
            path: str,
            params: typedefs.QueryParams | None = None,
            body: object | None = None,
            headers: Mapping[str, str] | None = None,
            streaming: bool = False,
    ) -> Any:
        url = self.build_url(path, params)
        what = f"{method.upper()} {url}"

        request_headers = dict(headers or {})
        if method.lower() == 'patch' and body is not None and 'Content-Type' not in request_headers:
            request_headers['Content-Type'] = 'application/merge-patch+json'

        networking = self.settings.networking
        watching = self.settings.watching
        timeout: aiohttp.ClientTimeout
        if streaming:
            connect_timeout = (
                watching.connect_timeout if watching.connect_timeout is not None else
                networking.connect_timeout if networking.connect_timeout is not None else
                networking.request_timeout
            )
            timeout = aiohttp.ClientTimeout(total=watching.client_timeout, sock_connect=connect_timeout)
        else:
            timeout = aiohttp.ClientTimeout(
                total=networking.request_timeout,
                sock_connect=networking.connect_timeout,
            )

        logger.debug(f"Requesting {what}")
        response = await self.session.request(
            method=method.upper(),
            url=url,
            json=body,
            headers=request_headers,
            timeout=timeout,
        )

        if not streaming:
            async with response:
                return await errors.parse_response(response)

        try:
            await errors.check_response(response)
        except errors.APIError:
            response.close()
            raise

        # Keep track of the open streams, so that they could be closed with the session.
        self._responses[:] = [r for r in self._responses if not r.closed]
        self._responses.append(response)
        return ResponseStream(response, chunk_size=watching.chunk_size)


def render_params(params: typedefs.QueryParams) -> dict[str, str]:
    """
    Render the query parameters as K8s API expects them: ``true``, not ``True``.
    """
    rendered: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        elif isinstance(value, bool):
            rendered[key] = 'true' if value else 'false'
        else:
            rendered[key] = str(value)
    return rendered
