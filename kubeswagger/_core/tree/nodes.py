"""
The nodes of the resource tree: the shared, path-independent template data.

A node represents a path template, e.g. ``/api/v1/namespaces/{}/pods``,
not a specific path. The specific paths are addressed by the views
(see :mod:`views`), which combine a node with the concrete path segments.
This is why the parameterized children are never instantiated per identifier:
one template node serves all the namespaces, all the pods, etc.

The nodes are only ever added and extended, never removed or replaced.
The views that are already handed out remain valid after the tree changes.
"""
import dataclasses
from collections.abc import Iterator

from kubeswagger._cogs.helpers import errors
from kubeswagger._cogs.structs import paths, specs
from kubeswagger._core.tree import aliases


GROUPS_ROOT = 'apis'


class AliasConflictError(errors.ClientError):
    """ An alias clashes with a canonical name or with another alias. """


@dataclasses.dataclass(eq=False)
class ResourceNode:
    segment: paths.Segment | None = None  # None for the root.
    operations: specs.Operations = dataclasses.field(default_factory=dict)
    children: dict[str, 'ResourceNode'] = dataclasses.field(default_factory=dict)
    aliases: dict[str, str] = dataclasses.field(default_factory=dict)  # alias -> canonical
    instance: 'ResourceNode | None' = None  # the parameterized child, if any.
    watched: bool = False  # in the watch namespace (the node itself or its ancestors).
    declared: bool = False  # explicitly declared in a spec or a CRD, not only implied.
    grouping: bool = False  # the children are API groups (i.e. `/apis`), not resources.

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.segment or "/"}>'

    @property
    def verbs(self) -> frozenset[str]:
        return frozenset(self.operations)

    def lookup(self, name: str) -> tuple[str, 'ResourceNode'] | None:
        """ Find a literal child by its canonical name or alias. """
        canonical = name if name in self.children else self.aliases.get(name)
        if canonical is None or canonical not in self.children:
            return None
        return canonical, self.children[canonical]

    def walk(self, prefix: paths.Segments = ()) -> Iterator[tuple[paths.Segments, 'ResourceNode']]:
        """ Iterate over the node and its descendants, with their segments. """
        yield prefix, self
        for child in self.children.values():
            if child.segment is not None:
                yield from child.walk(prefix + (child.segment,))
        if self.instance is not None and self.instance.segment is not None:
            yield from self.instance.walk(prefix + (self.instance.segment,))


def ensure_child(parent: ResourceNode, segment: paths.Segment) -> ResourceNode:
    """
    Get the parent's child for the segment, creating it if absent.

    The literal children of non-root nodes get the aliases of their names.
    The top-level names (such as ``api`` & ``apis``) are never aliased,
    nor are the API groups under ``/apis``, nor the watch namespaces.
    """
    if isinstance(segment, paths.Parameter):
        if parent.instance is None:
            parent.instance = ResourceNode(segment=segment, watched=parent.watched)
        return parent.instance

    name = segment.name
    if name in parent.children:
        return parent.children[name]
    if name in parent.aliases:
        raise AliasConflictError(f"The name {name!r} is already an alias of "
                                 f"{parent.aliases[name]!r} under {parent!r}.")

    watched = parent.watched or isinstance(segment, paths.WatchMarker)
    grouping = parent.segment is None and name == GROUPS_ROOT
    child = ResourceNode(segment=segment, watched=watched, grouping=grouping)
    child_aliases: tuple[str, ...] = ()
    if parent.segment is not None and not parent.grouping and isinstance(segment, paths.Literal):
        child_aliases = aliases.aliases_for(name)
    for alias in child_aliases:
        _check_alias(parent, alias, name)

    parent.children[name] = child
    for alias in child_aliases:
        parent.aliases[alias] = name
    return child


def check_merge(target: ResourceNode, source: ResourceNode) -> None:
    """
    Ensure that the source tree can be merged into the target tree.

    It is a dry run of :func:`merge`: nothing is modified. It fails if any
    name or alias of the source clashes with the names or aliases of the target.
    """
    for name, child in source.children.items():
        if name in target.aliases:
            raise AliasConflictError(f"The name {name!r} is already an alias of "
                                     f"{target.aliases[name]!r} under {target!r}.")
        if name in target.children:
            check_merge(target.children[name], child)
    for alias, canonical in source.aliases.items():
        _check_alias(target, alias, canonical)
    if source.instance is not None and target.instance is not None:
        check_merge(target.instance, source.instance)


def merge(target: ResourceNode, source: ResourceNode) -> None:
    """
    Merge the source tree into the target tree, adding what is missing.

    The absent nodes are attached as is (they are not copied), the existing
    nodes get the missing verbs, children, and aliases; the redeclared verbs
    get the newer operation ids. The canonical children are attached before
    their aliases, so that an alias never refers to an absent child.
    """
    target.operations.update(source.operations)
    target.declared = target.declared or source.declared
    for name, child in source.children.items():
        if name in target.children:
            merge(target.children[name], child)
        else:
            target.children[name] = child
    for alias, canonical in source.aliases.items():
        target.aliases.setdefault(alias, canonical)
    if source.instance is not None:
        if target.instance is None:
            target.instance = source.instance
        else:
            merge(target.instance, source.instance)


def _check_alias(parent: ResourceNode, alias: str, canonical: str) -> None:
    if alias in parent.children:
        raise AliasConflictError(f"The alias {alias!r} of {canonical!r} clashes with "
                                 f"the existing name under {parent!r}.")
    if parent.aliases.get(alias, canonical) != canonical:
        raise AliasConflictError(f"The alias {alias!r} of {canonical!r} is already an alias of "
                                 f"{parent.aliases[alias]!r} under {parent!r}.")
