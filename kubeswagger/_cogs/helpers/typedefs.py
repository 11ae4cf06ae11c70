"""
Common plain type definitions used across the codebase (for convenience).
"""
from collections.abc import Mapping
from typing import Union

# Query parameters as accepted from the callers; rendered to strings by the backends.
QueryParams = Mapping[str, Union[str, int, float, bool, None]]
