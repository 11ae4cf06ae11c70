"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubeswagger._cogs.clients.api import (
    Backend,
    AiohttpBackend,
)
from kubeswagger._cogs.clients.errors import (
    APIError,
    APIClientError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from kubeswagger._cogs.clients.fetching import (
    SpecRetrievalError,
    fetch_spec,
)
from kubeswagger._cogs.clients.streaming import (
    StreamState,
    StreamTransportError,
    StreamStateError,
    StreamDecodeWarning,
    RawStream,
    ByteStream,
    ObjectStream,
)
from kubeswagger._cogs.configs.configuration import (
    ClientSettings,
    NetworkingSettings,
    WatchingSettings,
    RetrievalSettings,
)
from kubeswagger._cogs.helpers.errors import (
    ClientError,
)
from kubeswagger._cogs.helpers.loggers import (
    LogFormat,
    configure,
)
from kubeswagger._cogs.helpers.versions import (
    version as __version__,
)
from kubeswagger._cogs.structs.credentials import (
    ConnectionInfo,
)
from kubeswagger._cogs.structs.descriptors import (
    InvalidDescriptorError,
    Scope,
    Version,
    Descriptor,
    parse_descriptor,
)
from kubeswagger._cogs.structs.paths import (
    MalformedPathError,
    Literal,
    Parameter,
    WatchMarker,
    Segment,
    parse_path,
    render_path,
)
from kubeswagger._cogs.structs.specs import (
    VERBS,
    RawSpec,
    index_operations,
)
from kubeswagger._core.client import (
    Client,
    load_spec_file,
)
from kubeswagger._core.tree.aliases import (
    aliases_for,
)
from kubeswagger._core.tree.building import (
    Route,
    build_tree,
    graft,
    iter_routes,
)
from kubeswagger._core.tree.nodes import (
    AliasConflictError,
    ResourceNode,
)
from kubeswagger._core.tree.views import (
    NavigationError,
    UnsupportedVerbError,
    UnsupportedStreamError,
    Action,
    NodeView,
)

__all__ = [
    'Backend', 'AiohttpBackend',
    'APIError', 'APIClientError', 'APIServerError',
    'APIUnauthorizedError', 'APIForbiddenError', 'APINotFoundError', 'APIConflictError',
    'SpecRetrievalError', 'fetch_spec',
    'StreamState', 'StreamTransportError', 'StreamStateError', 'StreamDecodeWarning',
    'RawStream', 'ByteStream', 'ObjectStream',
    'ClientSettings', 'NetworkingSettings', 'WatchingSettings', 'RetrievalSettings',
    'ClientError',
    'LogFormat', 'configure',
    'ConnectionInfo',
    'InvalidDescriptorError', 'Scope', 'Version', 'Descriptor', 'parse_descriptor',
    'MalformedPathError', 'Literal', 'Parameter', 'WatchMarker', 'Segment',
    'parse_path', 'render_path',
    'VERBS', 'RawSpec', 'index_operations',
    'Client', 'load_spec_file',
    'aliases_for',
    'Route', 'build_tree', 'graft', 'iter_routes',
    'AliasConflictError', 'ResourceNode',
    'NavigationError', 'UnsupportedVerbError', 'UnsupportedStreamError', 'Action', 'NodeView',
]
