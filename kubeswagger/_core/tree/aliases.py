"""
Informal names of the resource collections: singulars and kubectl's shortcuts.

A collection declared as ``deployments`` is also reachable as ``deployment``
and ``deploy`` -- the same way as ``kubectl`` accepts them. The aliases are
a convenience for humans only: the URLs are always built with the canonical
(plural) names, as declared in the spec or in the CRD.

The singulars are guessed by English grammar, not by the API's knowledge of
the resources' singular names, so they can be imprecise for irregular plurals.
"""
import functools
from collections.abc import Mapping

import inflect

# The short names of the built-in resources as known to kubectl (``kubectl api-resources``).
SHORTCUTS: Mapping[str, str] = {
    'certificatesigningrequests': 'csr',
    'componentstatuses': 'cs',
    'configmaps': 'cm',
    'cronjobs': 'cj',
    'customresourcedefinitions': 'crd',
    'daemonsets': 'ds',
    'deployments': 'deploy',
    'endpoints': 'ep',
    'events': 'ev',
    'horizontalpodautoscalers': 'hpa',
    'ingresses': 'ing',
    'limitranges': 'limits',
    'namespaces': 'ns',
    'networkpolicies': 'netpol',
    'nodes': 'no',
    'persistentvolumeclaims': 'pvc',
    'persistentvolumes': 'pv',
    'poddisruptionbudgets': 'pdb',
    'pods': 'po',
    'podsecuritypolicies': 'psp',
    'priorityclasses': 'pc',
    'replicasets': 'rs',
    'replicationcontrollers': 'rc',
    'resourcequotas': 'quota',
    'serviceaccounts': 'sa',
    'services': 'svc',
    'statefulsets': 'sts',
    'storageclasses': 'sc',
}

_inflector = inflect.engine()


@functools.cache
def aliases_for(name: str) -> tuple[str, ...]:
    """
    Get the aliases of a canonical name: its singular form and its shortcut.

    The result is the same for the same name, and never includes the name itself.
    Singular names have no singular aliases (e.g. ``status`` or ``log``).
    """
    candidates: list[str] = []
    singular = _inflector.singular_noun(name)
    if singular:
        candidates.append(singular)
    if name in SHORTCUTS:
        candidates.append(SHORTCUTS[name])
    return tuple(dict.fromkeys(alias for alias in candidates if alias and alias != name))
