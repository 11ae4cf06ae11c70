import json

import pytest

from kubeswagger import SpecRetrievalError
from kubeswagger.cli import main


def test_help(runner):
    result = runner.invoke(main, ['--help'])
    assert result.exit_code == 0
    assert 'routes' in result.output
    assert 'fetch' in result.output


def test_routes(runner, spec_file):
    result = runner.invoke(main, ['routes', str(spec_file)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert '/api/v1/namespaces  get,post  [bytes]' in lines
    assert '/api/v1/watch/namespaces  get  [bytes,objects]' in lines
    assert len(lines) == 16


def test_routes_with_grep(runner, spec_file):
    result = runner.invoke(main, ['routes', str(spec_file), '--grep', 'deployments'])
    assert result.exit_code == 0, result.output
    assert all('deployments' in line for line in result.output.splitlines())
    assert len(result.output.splitlines()) == 3


def test_routes_with_crds(runner, spec_file, crd_file):
    result = runner.invoke(main, ['routes', str(spec_file), '--crd', str(crd_file), '-g', 'kopfexamples'])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert '/apis/kopf.dev/v1/kopfexamples  get,post  [bytes]' in lines
    assert '/apis/kopf.dev/v1/watch/kopfexamples  -  [bytes,objects]' in lines
    assert len(lines) == 16


def test_routes_of_invalid_specs(runner, tmp_path):
    path = tmp_path / 'swagger.json'
    path.write_text('{"paths": {"/api/{x": {}}}')
    result = runner.invoke(main, ['routes', str(path)])
    assert result.exit_code == 1
    assert 'Unbalanced' in result.output


def test_routes_of_absent_files(runner, tmp_path):
    result = runner.invoke(main, ['routes', str(tmp_path / 'absent.json')])
    assert result.exit_code == 2


def test_fetch(runner, mocker, spec):
    fetch_spec = mocker.patch('kubeswagger._cogs.clients.fetching.fetch_spec', return_value=spec)
    result = runner.invoke(main, ['fetch', '--server', 'http://fake-host', '--token', 'xyz'])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == spec
    assert fetch_spec.call_count == 1
    backend = fetch_spec.call_args.args[0]
    assert backend.info.server == 'http://fake-host'
    assert backend.info.token == 'xyz'
    assert backend.info.scheme == 'Bearer'


def test_fetch_to_a_file(runner, mocker, spec, tmp_path):
    mocker.patch('kubeswagger._cogs.clients.fetching.fetch_spec', return_value=spec)
    path = tmp_path / 'out.json'
    result = runner.invoke(main, ['fetch', '--server', 'http://fake-host', '-o', str(path)])
    assert result.exit_code == 0, result.output
    assert json.loads(path.read_text()) == spec


def test_fetch_failure(runner, mocker):
    mocker.patch('kubeswagger._cogs.clients.fetching.fetch_spec',
                 side_effect=SpecRetrievalError("Failed to retrieve", status=500))
    result = runner.invoke(main, ['fetch', '--server', 'http://fake-host'])
    assert result.exit_code == 1
    assert 'Failed to retrieve' in result.output


@pytest.mark.parametrize('options', [[], ['-v'], ['-d'], ['-q'], ['--log-format=json']])
def test_logging_options(runner, spec_file, options):
    result = runner.invoke(main, ['routes', str(spec_file)] + options)
    assert result.exit_code == 0, result.output
