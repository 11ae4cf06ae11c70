"""
The client: the entry point to the resource tree of one API server.

The client owns the tree and navigates to its top-level nodes as its own
attributes: ``client.api.v1.namespaces``, ``client.apis.apps.v1.deployments``.
Everything else is done by the views (see :mod:`views`).

There are several ways to get a client, depending on where the spec comes from::

    client = kubeswagger.Client(backend, spec=spec)  # already loaded
    client = kubeswagger.Client.from_file('swagger.json.gz', backend=backend)
    client = await kubeswagger.Client.connect(backend)  # from the API server

In all cases, a client is either built completely or not built at all.
"""
import logging
import os
from collections.abc import Iterator, Mapping
from typing import Any, cast

from kubeswagger._cogs.clients import api, fetching
from kubeswagger._cogs.configs import configuration
from kubeswagger._cogs.helpers import loaders
from kubeswagger._cogs.structs import specs
from kubeswagger._core.tree import building, crds, nodes, views

logger = logging.getLogger(__name__)


def load_spec_file(path: str | os.PathLike[str]) -> specs.RawSpec:
    spec = loaders.load_file(path)
    if not isinstance(spec, Mapping) or not isinstance(spec.get('paths'), Mapping):
        raise fetching.SpecRetrievalError(f"The API spec in {os.fspath(path)} has no paths.")
    return cast(specs.RawSpec, spec)


class Client:

    def __init__(
            self,
            backend: api.Backend | None = None,
            *,
            spec: specs.RawSpec | None = None,
            settings: configuration.ClientSettings | None = None,
    ) -> None:
        super().__init__()
        self.backend = backend
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.spec: specs.RawSpec | None = None
        self._root = nodes.ResourceNode()
        if spec is not None:
            self._ingest(spec)

    def __repr__(self) -> str:
        title = self.info.get('title', 'an unknown API')
        version = self.info.get('version', 'an unknown version')
        return f'<{self.__class__.__name__} of {title} {version}>'

    @classmethod
    async def connect(
            cls,
            backend: api.Backend,
            *,
            settings: configuration.ClientSettings | None = None,
    ) -> 'Client':
        """ Retrieve the spec from the API server and build a client for it. """
        settings = settings if settings is not None else configuration.ClientSettings()
        spec = await fetching.fetch_spec(backend, settings=settings)
        return cls(backend, spec=spec, settings=settings)

    @classmethod
    def from_file(
            cls,
            path: str | os.PathLike[str],
            *,
            backend: api.Backend | None = None,
            settings: configuration.ClientSettings | None = None,
    ) -> 'Client':
        return cls(backend, spec=load_spec_file(path), settings=settings)

    async def load_spec(self) -> None:
        """ Retrieve the spec from the API server and add it to the tree. """
        if self.backend is None:
            raise RuntimeError("Cannot retrieve the API spec: no backend is configured.")
        spec = await fetching.fetch_spec(self.backend, settings=self.settings)
        self._ingest(spec)

    def _ingest(self, spec: specs.RawSpec) -> None:
        index = specs.index_operations(spec)
        building.graft(self._root, index)
        logger.debug(f"Loaded the API spec with {len(index)} paths.")
        self.spec = spec

    @property
    def info(self) -> Mapping[str, Any]:
        return dict(self.spec.get('info') or {}) if self.spec is not None else {}

    @property
    def root(self) -> views.NodeView:
        return views.NodeView(self._root, (), self.backend)

    def routes(self) -> Iterator[building.Route]:
        return building.iter_routes(self._root)

    def add_custom_resource_definition(self, crd: Mapping[str, Any]) -> None:
        """
        Add the routes of a custom resource, as defined by its CRD (or CRD's spec).

        The CRD's versions are added under ``apis/{group}/{version}``,
        for the Namespaced CRDs also under ``.../namespaces/{namespace}``.
        Calling it again for the same CRD changes nothing.
        """
        crds.add_custom_resource_definition(self._root, crd)

    def __getattr__(self, name: str) -> views.NodeView:
        if name.startswith('_'):
            raise AttributeError(name)
        return getattr(self.root, name)

    def __getitem__(self, name: str) -> views.NodeView:
        return self.root[name]
