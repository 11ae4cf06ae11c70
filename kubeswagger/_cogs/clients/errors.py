"""
Errors reported by the API server, as opposed to the client's own errors.

Every response with an HTTP status of 400 or above becomes an :class:`APIError`.
The commonly handled statuses get their own subclasses (401, 403, 404, 409);
the rest are split only into the client-side (4xx) and the server-side (5xx)
errors and are distinguished by their ``status`` field.

If the response body is a K8s ``Status`` object, its code, message, reason
and details are exposed on the error. Any other body is ignored, as it can
contain something not intended for logs (e.g. an echo of the request).

The ``aiohttp`` error is chained as the ``__cause__`` but never inherited from:
the callers catch these errors regardless of the HTTP library underneath.
Networking and TLS failures are not API errors and propagate as they are.
"""
import collections.abc
import json
from collections.abc import Collection
from typing import Any, Literal, cast

import aiohttp
from typing_extensions import TypedDict


class RawStatusCause(TypedDict):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#status-v1-meta
class RawStatus(TypedDict):
    apiVersion: str
    kind: Literal["Status"]
    code: int
    status: Literal["Success", "Failure"]
    reason: str
    message: str
    details: RawStatusDetails


class APIError(Exception):

    def __init__(
            self,
            payload: RawStatus | None,
            *,
            status: int,
    ) -> None:
        self._status = status
        self._payload = payload
        super().__init__(self.message or f"The API server responded with HTTP {status}.")

    @property
    def status(self) -> int:
        return self._status

    @property
    def payload(self) -> RawStatus | None:
        return self._payload

    @property
    def code(self) -> int | None:
        return self._payload.get('code') if self._payload else None

    @property
    def reason(self) -> str | None:
        return self._payload.get('reason') if self._payload else None

    @property
    def message(self) -> str | None:
        return self._payload.get('message') if self._payload else None

    @property
    def details(self) -> RawStatusDetails | None:
        return self._payload.get('details') if self._payload else None


class APIClientError(APIError):
    pass


class APIServerError(APIError):
    pass


class APIUnauthorizedError(APIClientError):
    pass


class APIForbiddenError(APIClientError):
    pass


class APINotFoundError(APIClientError):
    pass


class APIConflictError(APIClientError):
    pass


_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: APIUnauthorizedError,
    403: APIForbiddenError,
    404: APINotFoundError,
    409: APIConflictError,
}


def error_class_for(status: int) -> type[APIError]:
    if status in _STATUS_ERRORS:
        return _STATUS_ERRORS[status]
    return APIClientError if status < 500 else APIServerError


async def _read_status(response: aiohttp.ClientResponse) -> RawStatus | None:
    try:
        payload = await response.json(content_type=None)
    except (ValueError, aiohttp.ClientConnectionError):
        return None
    if isinstance(payload, collections.abc.Mapping) and payload.get('kind') == 'Status':
        return cast(RawStatus, payload)
    return None


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Raise an :class:`APIError` of a proper class if the response is an error.
    """
    if response.status < 400:
        return

    # The body must be read before raise_for_status(), which releases the connection.
    payload = await _read_status(response)
    cls = error_class_for(response.status)
    try:
        response.raise_for_status()
    except aiohttp.ClientResponseError as e:
        raise cls(payload, status=response.status) from e


async def parse_response(
        response: aiohttp.ClientResponse,
) -> Any:
    """
    Check the response for errors, and either raise or return the parsed data.

    The responses with no content or non-JSON content are returned as text,
    e.g. the pods' logs or the health checks.
    """
    await check_response(response)
    if response.content_type == 'application/json':
        return await response.json()
    text = await response.text()
    if response.content_type.endswith('+json') and text:
        return json.loads(text)
    return text
