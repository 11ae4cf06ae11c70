"""
All configuration flags, options, settings to fine-tune a client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).
"""
import dataclasses


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: float | None = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the regular (non-streaming) API requests, in seconds.
    ``None`` disables the timeout (on your own risk).
    """

    connect_timeout: float | None = None
    """
    A timeout for establishing a connection to the API server, in seconds.
    If ``None``, only the total ``request_timeout`` applies.
    """


@dataclasses.dataclass
class WatchingSettings:

    client_timeout: float | None = None
    """
    An HTTP/HTTPS session timeout to use in streaming requests.
    ``None`` means that the streams are never closed by the client itself:
    they last until closed by the caller or by the server.
    """

    connect_timeout: float | None = None
    """
    An HTTP/HTTPS connection timeout to use in streaming requests.
    If ``None``, it falls back to ``networking.connect_timeout``,
    then to ``networking.request_timeout``.
    """

    chunk_size: int = 1024 * 1024
    """
    The maximum size of one read from a stream, in bytes.

    The 1 MB is an empirical guess for keeping the memory footprint
    reasonably low on huge amount of small lines, while ensuring the
    near-instant reads of the huge lines (e.g. big secrets in watch-events).
    """


@dataclasses.dataclass
class RetrievalSettings:
    """
    Where to get the API spec from when it is not supplied directly.
    """

    preferred_path: str = '/openapi/v2'
    """
    The spec's endpoint on the modern API servers (K8s 1.10 and above).
    """

    legacy_path: str = '/swagger.json'
    """
    The spec's endpoint on the legacy API servers. Requested only if
    the preferred one is reported as not found (HTTP 404).
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    watching: WatchingSettings = dataclasses.field(default_factory=WatchingSettings)
    retrieval: RetrievalSettings = dataclasses.field(default_factory=RetrievalSettings)
