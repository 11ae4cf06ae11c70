"""
Custom resource definitions (CRDs) as needed for extending the API surface.

Only the routing-relevant part of a CRD is used: the API group, the scope,
the plural name, and the served versions. The schemas are ignored.

Both the current multi-version form (``spec.versions: [{name: ...}, ...]``)
and the deprecated single-version form (``spec.version: v1``) are accepted;
the latter is normalized to a one-item list of versions.
"""
import dataclasses
import enum
from collections.abc import Mapping
from typing import Any

from typing_extensions import NotRequired, TypedDict

from kubeswagger._cogs.helpers import errors


class InvalidDescriptorError(errors.ClientError, ValueError):
    """ A CRD is missing the required fields or has invalid values in them. """


class Scope(str, enum.Enum):
    NAMESPACED = 'Namespaced'
    CLUSTER = 'Cluster'


class RawVersion(TypedDict, total=False):
    name: str
    served: bool
    storage: bool


class RawNames(TypedDict, total=False):
    plural: str
    singular: str
    kind: str
    shortNames: list[str]


class RawCRDSpec(TypedDict):
    group: str
    scope: str
    names: RawNames
    version: NotRequired[str]  # deprecated since apiextensions.k8s.io/v1beta1
    versions: NotRequired[list[RawVersion]]


@dataclasses.dataclass(frozen=True)
class Version:
    name: str
    served: bool = True
    storage: bool = False


@dataclasses.dataclass(frozen=True)
class Descriptor:
    group: str
    scope: Scope
    plural: str
    versions: tuple[Version, ...]

    @property
    def namespaced(self) -> bool:
        return self.scope is Scope.NAMESPACED


def parse_descriptor(raw: Mapping[str, Any]) -> Descriptor:
    """
    Normalize a CRD (either the whole object or its ``spec``) to a descriptor.

    All versions are used regardless of their ``served`` flag:
    the API server decides what it serves, the client only shapes the routes.
    """
    spec: Mapping[str, Any] = raw.get('spec', raw) if isinstance(raw, Mapping) else {}
    if not isinstance(spec, Mapping):
        raise InvalidDescriptorError(f"The CRD spec is not a mapping: {spec!r}")

    scope_name = spec.get('scope')
    try:
        scope = Scope(scope_name)
    except ValueError:
        raise InvalidDescriptorError(f"The CRD scope must be Namespaced or Cluster, "
                                     f"got {scope_name!r}.") from None

    group = spec.get('group')
    if not group or not isinstance(group, str):
        raise InvalidDescriptorError(f"The CRD has no API group: {group!r}")

    names = spec.get('names') or {}
    plural = names.get('plural') if isinstance(names, Mapping) else None
    if not plural or not isinstance(plural, str):
        raise InvalidDescriptorError(f"The CRD has no plural name: {names!r}")

    versions: list[Version] = []
    if spec.get('versions'):
        for raw_version in spec['versions']:
            name = raw_version.get('name') if isinstance(raw_version, Mapping) else None
            if not name or not isinstance(name, str):
                raise InvalidDescriptorError(f"The CRD version has no name: {raw_version!r}")
            versions.append(Version(
                name=name,
                served=bool(raw_version.get('served', True)),
                storage=bool(raw_version.get('storage', False)),
            ))
    elif spec.get('version'):
        versions.append(Version(name=str(spec['version']), served=True, storage=True))
    else:
        raise InvalidDescriptorError(f"The CRD {plural}.{group} has no versions.")

    return Descriptor(group=group, scope=scope, plural=plural, versions=tuple(versions))
