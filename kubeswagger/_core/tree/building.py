"""
Building of the resource trees from the indexed operations.

The trees are built in one go and never suspend, so within an event loop,
the building and grafting are atomic for all other coroutines.
"""
import logging
from collections.abc import Iterator
from typing import NamedTuple

from kubeswagger._cogs.structs import paths, specs
from kubeswagger._core.tree import nodes

logger = logging.getLogger(__name__)


class Route(NamedTuple):
    url: str  # the template, e.g. ``/api/v1/namespaces/{namespace}/pods``
    verbs: frozenset[str]
    streams: tuple[str, ...]  # ``bytes`` and/or ``objects``


def build_tree(index: specs.OperationsIndex) -> nodes.ResourceNode:
    """
    Build a new tree from the indexed operations, shallow paths first.

    The intermediate nodes are created on demand with no verbs, so
    ``/apis/apps/v1/deployments`` makes ``/apis`` & ``/apis/apps`` navigable
    even if they are not declared (though, they usually are).
    """
    root = nodes.ResourceNode()
    for segments in sorted(index, key=len):
        node = root
        for segment in segments:
            node = nodes.ensure_child(node, segment)
        node.declared = True
        node.operations.update(index[segments])
    return root


def graft(root: nodes.ResourceNode, index: specs.OperationsIndex) -> None:
    """
    Add the indexed operations into an existing tree.

    It is all-or-nothing: the whole index is built as a separate tree first,
    then checked for conflicts against the existing tree, and only then merged.
    If anything fails, the existing tree remains as it was.
    """
    scratch = build_tree(index)
    nodes.check_merge(root, scratch)
    nodes.merge(root, scratch)
    logger.debug(f"Grafted {len(index)} paths into the resource tree.")


def iter_routes(root: nodes.ResourceNode) -> Iterator[Route]:
    """
    Iterate over the declared routes of the tree, in the order of their addition.
    """
    for segments, node in root.walk():
        if node.declared:
            yield Route(
                url=paths.render_path(segments),
                verbs=node.verbs,
                streams=streams_of(node),
            )


def streams_of(node: nodes.ResourceNode) -> tuple[str, ...]:
    if node.watched:
        return ('bytes', 'objects')
    elif 'get' in node.operations:
        return ('bytes',)
    else:
        return ()
