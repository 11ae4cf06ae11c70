"""
The package's own version, as installed.

The version lives in the distribution's metadata only, so it is unknown
when the package is used from a source checkout without installing it.
"""
import importlib.metadata


def _detect_version(distribution: str) -> str | None:
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return None


version: str | None = _detect_version('kubeswagger')
