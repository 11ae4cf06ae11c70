"""
The grammar of the URL templates as declared in the API specs.

A template, such as ``/api/v1/namespaces/{namespace}/pods/{name}/log``,
is split into the typed segments: the literal path components,
the parameter slots (to be filled with the callers' identifiers),
and the watch marker, which opens a parallel namespace of watch-endpoints
(e.g. ``/api/v1/watch/namespaces/{namespace}/pods``).

The segments are hashable and comparable, so that a tuple of them
identifies a node of the resource tree regardless of how the parameter slots
are named in different templates: ``/namespaces/{name}`` and
``/namespaces/{namespace}/pods`` share the same ``namespaces/{...}`` node.
"""
import dataclasses
import re

from kubeswagger._cogs.helpers import errors

# Conventional API versions: "v1", "v2beta1", "v1alpha3", etc.
# Non-conventional versions are indistinguishable from other literals.
K8S_VERSION_PATTERN = re.compile(r'^v\d+(?:(?:alpha|beta)\d+)?$')

WATCH = 'watch'


class MalformedPathError(errors.ClientError, ValueError):
    """ A URL template cannot be parsed, e.g. due to unbalanced braces. """


@dataclasses.dataclass(frozen=True)
class Literal:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclasses.dataclass(frozen=True)
class Parameter:
    """
    A slot for a caller-supplied identifier, e.g. ``{namespace}``.

    The slot's name is informational only: all slots at the same position
    are the same slot, so it does not participate in equality and hashing.
    """
    name: str = dataclasses.field(default='name', compare=False)

    def __str__(self) -> str:
        return f'{{{self.name}}}'


@dataclasses.dataclass(frozen=True)
class WatchMarker:
    name: str = dataclasses.field(default=WATCH, init=False)

    def __str__(self) -> str:
        return self.name


Segment = Literal | Parameter | WatchMarker
Segments = tuple[Segment, ...]


def parse_path(template: str) -> Segments:
    """
    Split a URL template into the typed segments.

    Empty components are ignored, so the leading, trailing, and repeated
    slashes make no difference: ``/api/`` and ``api`` are the same path.
    """
    segments: list[Segment] = []
    for part in template.split('/'):
        if not part:
            continue

        opening, closing = part.count('{'), part.count('}')
        if opening == 0 and closing == 0:
            if part == WATCH and _opens_watch_namespace(segments):
                segments.append(WatchMarker())
            else:
                segments.append(Literal(part))
        elif opening == 1 and closing == 1 and part.startswith('{') and part.endswith('}'):
            name = part[1:-1].strip()
            if not name:
                raise MalformedPathError(f"Empty parameter slot in {template!r}.")
            segments.append(Parameter(name))
        else:
            raise MalformedPathError(f"Unbalanced parameter delimiters in {template!r}: {part!r}")
    return tuple(segments)


def _opens_watch_namespace(preceding: list[Segment]) -> bool:
    # Either the very first segment, or right after the API version: /api/v1/watch/...
    if not preceding:
        return True
    last = preceding[-1]
    return isinstance(last, Literal) and bool(K8S_VERSION_PATTERN.match(last.name))


def render_path(segments: Segments) -> str:
    return '/' + '/'.join(str(segment) for segment in segments)
