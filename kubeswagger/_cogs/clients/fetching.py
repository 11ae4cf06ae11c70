import logging
from collections.abc import Mapping
from typing import cast

from kubeswagger._cogs.clients import api, errors
from kubeswagger._cogs.configs import configuration
from kubeswagger._cogs.helpers import errors as helper_errors
from kubeswagger._cogs.structs import specs

logger = logging.getLogger(__name__)


class SpecRetrievalError(helper_errors.ClientError):
    """ The API spec could not be retrieved from any of the known endpoints. """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


async def fetch_spec(
        backend: api.Backend,
        *,
        settings: configuration.ClientSettings,
) -> specs.RawSpec:
    """
    Retrieve the API spec: from the preferred endpoint, else from the legacy one.

    The legacy endpoint is requested only if the preferred one is not found,
    since the API servers support one or the other, but never both.
    Any other error on either endpoint fails the retrieval with its status.
    """
    preferred = settings.retrieval.preferred_path
    legacy = settings.retrieval.legacy_path
    try:
        spec = await backend.request(method='get', path=preferred)
    except errors.APINotFoundError:
        logger.debug(f"No API spec at {preferred}; falling back to {legacy}.")
    except errors.APIError as e:
        raise SpecRetrievalError(f"Failed to retrieve the API spec from {preferred}: "
                                 f"status {e.status}.", status=e.status) from e
    else:
        return _validate(spec, path=preferred)

    try:
        spec = await backend.request(method='get', path=legacy)
    except errors.APIError as e:
        raise SpecRetrievalError(f"Failed to retrieve the API spec from {legacy}: "
                                 f"status {e.status}.", status=e.status) from e
    else:
        return _validate(spec, path=legacy)


def _validate(spec: object, *, path: str) -> specs.RawSpec:
    if not isinstance(spec, Mapping) or not isinstance(spec.get('paths'), Mapping):
        raise SpecRetrievalError(f"The API spec from {path} has no paths.")
    logger.debug(f"Retrieved the API spec from {path} with {len(spec['paths'])} paths.")
    return cast(specs.RawSpec, spec)
