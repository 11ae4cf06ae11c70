"""
Loading of the API specs and CRDs from the local files.

The files can be JSON or YAML (by their extensions), and can be gzipped
(with the ``.gz`` extension on top of the format's one), as the specs
of the K8s API are often stored to save the space: ``swagger-1.21.json.gz``.
"""
import gzip
import json
import os
from typing import Any

import yaml


def load_file(path: str | os.PathLike[str]) -> Any:
    name = os.fspath(path)
    base = name[:-len('.gz')] if name.endswith('.gz') else name
    opener = gzip.open if name.endswith('.gz') else open
    with opener(name, 'rt', encoding='utf-8') as f:
        if base.endswith(('.yaml', '.yml')):
            return yaml.safe_load(f)
        else:
            return json.load(f)
