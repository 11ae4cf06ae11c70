"""
The views of the resource tree: the nodes addressed by their concrete paths.

A view is what the users navigate: ``client.api.v1.namespaces('default').pods``.
Every step of the navigation produces a new view with the same backend,
a child node, and the path extended with one more segment. The views are
cheap, immutable, and never cached: ``ns('a')`` and ``ns('b')`` share
the template node and differ only in the identifier.

The verbs are methods of every view, but they only work if the node declares
them in the spec; otherwise, they fail with :class:`UnsupportedVerbError`.
"""
import dataclasses
import logging
import urllib.parse
import warnings
from collections.abc import Mapping
from typing import Any

from kubeswagger._cogs.clients import api, streaming
from kubeswagger._cogs.helpers import errors, typedefs
from kubeswagger._core.tree import building, nodes

logger = logging.getLogger(__name__)


class NavigationError(errors.ClientError, LookupError):
    """ There is no such child in the resource tree. """


class UnsupportedVerbError(errors.ClientError, TypeError):
    """ The verb is not declared for the resource. """


class UnsupportedStreamError(errors.ClientError, TypeError):
    """ The resource cannot be streamed in the requested way. """


@dataclasses.dataclass(frozen=True)
class Action:
    """
    A single operation on a concrete path: e.g. ``GET /api/v1/namespaces``.

    Calling the action issues exactly one request to the backend and returns
    what the backend returns (usually, the decoded JSON of the response).
    """
    backend: api.Backend | None
    verb: str
    path: str
    operation_id: str

    async def __call__(
            self,
            *,
            params: typedefs.QueryParams | None = None,
            body: object | None = None,
            headers: Mapping[str, str] | None = None,
    ) -> Any:
        if self.backend is None:
            raise RuntimeError(f"Cannot {self.verb} {self.path}: no backend is configured.")
        logger.debug(f"Invoking {self.operation_id or self.verb} as {self.verb.upper()} {self.path}")
        return await self.backend.request(
            method=self.verb,
            path=self.path,
            params=params,
            body=body,
            headers=headers,
        )


class NodeView:
    __slots__ = ('_node', '_segments', '_backend')

    def __init__(
            self,
            node: nodes.ResourceNode,
            segments: tuple[str, ...],
            backend: api.Backend | None,
    ) -> None:
        super().__init__()
        self._node = node
        self._segments = segments
        self._backend = backend

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.url}>'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeView):
            return NotImplemented
        return (self._node is other._node and
                self._segments == other._segments and
                self._backend is other._backend)

    def __hash__(self) -> int:
        return hash((id(self._node), self._segments))

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._node.children) | set(self._node.aliases))

    @property
    def template(self) -> nodes.ResourceNode:
        return self._node

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def url(self) -> str:
        return '/' + '/'.join(urllib.parse.quote(segment, safe='') for segment in self._segments)

    @property
    def verbs(self) -> frozenset[str]:
        return self._node.verbs

    @property
    def is_watch(self) -> bool:
        return self._node.watched

    @property
    def accepts_identifier(self) -> bool:
        return self._node.instance is not None

    def supports(self, verb: str) -> bool:
        return verb.lower() in self._node.operations

    #
    # Navigation.
    #

    def child(self, name: str) -> 'NodeView':
        """ Navigate to a literal child by its canonical name or alias. """
        found = self._node.lookup(name)
        if found is None:
            raise NavigationError(f"There is no {name!r} under {self.url}.")
        canonical, node = found
        return NodeView(node, self._segments + (canonical,), self._backend)

    def __getattr__(self, name: str) -> 'NodeView':
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self.child(name)
        except NavigationError as e:
            raise AttributeError(str(e)) from None

    def __getitem__(self, name: str) -> 'NodeView':
        try:
            return self.child(name)
        except NavigationError as e:
            raise KeyError(name) from e

    def __call__(self, identifier: str) -> 'NodeView':
        """ Navigate to a specific object, e.g. a namespace by its name. """
        if self._node.instance is None:
            raise NavigationError(f"There are no identifiable objects under {self.url}.")
        if not isinstance(identifier, str) or not identifier or '/' in identifier:
            raise ValueError(f"An identifier must be a non-empty string with no slashes; "
                             f"got {identifier!r}.")
        return NodeView(self._node.instance, self._segments + (identifier,), self._backend)

    #
    # Actions.
    #

    def action(self, verb: str) -> Action:
        verb = verb.lower()
        if verb not in self._node.operations:
            raise UnsupportedVerbError(f"{verb.upper()} is not supported by {self.url}. "
                                       f"Supported: {', '.join(sorted(self.verbs)) or 'nothing'}.")
        return Action(
            backend=self._backend,
            verb=verb,
            path=self.url,
            operation_id=self._node.operations[verb],
        )

    # The verbs are regular functions returning coroutines, so that
    # the unsupported verbs fail at the call, not at the await.
    def get(self, **kwargs: Any) -> Any:
        return self.action('get')(**kwargs)

    def put(self, **kwargs: Any) -> Any:
        return self.action('put')(**kwargs)

    def post(self, **kwargs: Any) -> Any:
        return self.action('post')(**kwargs)

    def delete(self, **kwargs: Any) -> Any:
        return self.action('delete')(**kwargs)

    def options(self, **kwargs: Any) -> Any:
        return self.action('options')(**kwargs)

    def head(self, **kwargs: Any) -> Any:
        return self.action('head')(**kwargs)

    def patch(self, **kwargs: Any) -> Any:
        return self.action('patch')(**kwargs)

    #
    # Streams.
    #

    def get_byte_stream(self, *, params: typedefs.QueryParams | None = None) -> streaming.ByteStream:
        """
        Stream the raw response, e.g. the pod's logs with ``follow=true``.

        The request is not sent until the stream is opened or iterated.
        """
        if 'bytes' not in building.streams_of(self._node):
            raise UnsupportedStreamError(f"{self.url} cannot be streamed.")
        backend = self._backend
        if backend is None:
            raise RuntimeError(f"Cannot stream {self.url}: no backend is configured.")
        url = self.url

        async def opener() -> streaming.RawStream:
            return await backend.request(method='get', path=url, params=params, streaming=True)

        return streaming.ByteStream(opener, description=url)

    def get_object_stream(self, *, params: typedefs.QueryParams | None = None) -> streaming.ObjectStream:
        """
        Stream the JSON objects of the response line by line, e.g. the watch-events.
        """
        if 'objects' not in building.streams_of(self._node):
            raise UnsupportedStreamError(f"{self.url} is not a watch-stream.")
        return streaming.ObjectStream(self.get_byte_stream(params=params))

    def get_stream(self, *, params: typedefs.QueryParams | None = None) -> streaming.ByteStream:
        warnings.warn("get_stream() is deprecated; use get_byte_stream().", DeprecationWarning)
        return self.get_byte_stream(params=params)
