import json
import logging

import click.testing
import pytest
import yaml

from kubeswagger._cogs.helpers import loggers


@pytest.fixture(autouse=True)
def _restore_logging():
    logger = logging.getLogger()
    original_handlers = logger.handlers[:]
    original_level = logger.level
    yield
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)
    loggers._handler = None


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def spec_file(tmp_path, spec):
    path = tmp_path / 'swagger.json'
    path.write_text(json.dumps(spec))
    return path


@pytest.fixture()
def crd_file(tmp_path, namespaced_crd):
    path = tmp_path / 'crd.yaml'
    path.write_text(yaml.safe_dump(namespaced_crd))
    return path
