"""
Extending the resource tree with the routes of the custom resources.

The CRDs are not in the API spec retrieved at startup (or they are there
only if they existed at that moment), so their routes are synthesized from
the CRDs themselves: the same shapes as the API server serves for them.
"""
import logging
from collections.abc import Mapping
from typing import Any

from kubeswagger._cogs.structs import descriptors, paths, specs
from kubeswagger._core.tree import building, nodes

logger = logging.getLogger(__name__)

COLLECTION_VERBS = ('get', 'post')
INSTANCE_VERBS = ('get', 'patch', 'put', 'delete')


def synthesize_index(descriptor: descriptors.Descriptor) -> specs.OperationsIndex:
    """
    Make the same index of operations as the API spec would have for the CRD.

    The operation ids are synthetic, e.g. ``get:kopfexamples.v1.kopf.dev``.
    The watch-endpoints have no verbs of their own: they are for streaming only.
    """
    index: specs.OperationsIndex = {}
    plural = descriptor.plural
    scopes: list[paths.Segments] = [()]
    if descriptor.namespaced:
        scopes.append((paths.Literal('namespaces'), paths.Parameter('namespace')))

    for version in descriptor.versions:
        prefix = (paths.Literal('apis'), paths.Literal(descriptor.group), paths.Literal(version.name))
        fqname = f'{plural}.{version.name}.{descriptor.group}'
        for scope in scopes:
            collection = prefix + scope + (paths.Literal(plural),)
            instance = collection + (paths.Parameter('name'),)
            watched = prefix + (paths.WatchMarker(),) + scope + (paths.Literal(plural),)
            index[collection] = {verb: f'{verb}:{fqname}' for verb in COLLECTION_VERBS}
            index[instance] = {verb: f'{verb}:{fqname}' for verb in INSTANCE_VERBS}
            index[watched] = {}
            index[watched + (paths.Parameter('name'),)] = {}
    return index


def add_custom_resource_definition(root: nodes.ResourceNode, raw: Mapping[str, Any]) -> descriptors.Descriptor:
    """
    Graft the routes of a CRD into the tree; the tree is unchanged on errors.
    """
    descriptor = descriptors.parse_descriptor(raw)
    index = synthesize_index(descriptor)
    building.graft(root, index)
    logger.debug(f"Added the custom resource {descriptor.plural}.{descriptor.group} "
                 f"with versions: {', '.join(v.name for v in descriptor.versions)}")
    return descriptor
