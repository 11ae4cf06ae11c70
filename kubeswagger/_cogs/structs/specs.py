"""
The API spec documents (OpenAPI v2 / Swagger) and their operations' index.

Only a tiny part of the spec is of interest for us: the paths, the HTTP verbs
declared for every path, and the operation ids. The schemas, the parameters,
and the responses are ignored: the payloads are not validated on the client.
"""
import logging
from collections.abc import Mapping

from typing_extensions import NotRequired, TypedDict

from kubeswagger._cogs.structs import paths

logger = logging.getLogger(__name__)

# The closed list of the HTTP verbs as they can be declared in the OpenAPI v2 path items.
# Other keys of the path items ("parameters", "$ref", "x-*" extensions) are not operations.
VERBS: tuple[str, ...] = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch')


class RawOperation(TypedDict, total=False):
    operationId: str
    description: str


class RawInfo(TypedDict, total=False):
    title: str
    version: str


class RawSpec(TypedDict):
    paths: Mapping[str, Mapping[str, RawOperation]]
    info: NotRequired[RawInfo]
    swagger: NotRequired[str]


# The verbs of a specific path, each mapped to its operation id (possibly an empty string).
Operations = dict[str, str]

# The index of the whole spec: the parsed path (as a sequence of segments) to its operations.
OperationsIndex = dict[paths.Segments, Operations]


def index_operations(spec: RawSpec) -> OperationsIndex:
    """
    Extract the declared operations of all paths, grouped by the parsed paths.

    The paths with no recognised verbs are indexed too (with no operations):
    they are needed to host the deeper paths, even if not invocable themselves.

    If the same parsed path is declared twice (e.g. ``/api`` & ``/api/``),
    their operations are merged, and the latest declaration of a verb wins.

    The whole indexing fails on the first malformed template.
    """
    index: OperationsIndex = {}
    for template, path_item in (spec.get('paths') or {}).items():
        segments = paths.parse_path(template)
        operations = index.setdefault(segments, {})
        for verb, operation in (path_item or {}).items():
            verb = verb.lower()
            if verb not in VERBS:
                continue
            operation_id = operation.get('operationId', '') if isinstance(operation, Mapping) else ''
            if verb in operations and operations[verb] != operation_id:
                logger.debug(f"Redeclared {verb.upper()} {template}: "
                             f"{operations[verb]!r} -> {operation_id!r}")
            operations[verb] = operation_id
    logger.debug(f"Indexed {len(index)} paths with {sum(map(len, index.values()))} operations.")
    return index
