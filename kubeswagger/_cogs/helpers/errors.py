"""
The root of the client-specific errors.

The errors of specific areas are declared next to the code that raises them
(e.g. the path grammar, the streams, the CRD descriptors), and are re-exported
on the top-level package, so that they can be caught by their common base.

The K8s API errors (:mod:`kubeswagger._cogs.clients.errors`) are not included:
they reflect the HTTP statuses of the API server, not the client's own logic.
"""


class ClientError(Exception):
    """ A base for all errors of the client itself (not of the API server). """
