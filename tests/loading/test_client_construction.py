import pytest

from kubeswagger import Client, ClientSettings, MalformedPathError


def test_empty_client():
    client = Client()
    assert client.backend is None
    assert client.spec is None
    assert client.info == {}
    assert isinstance(client.settings, ClientSettings)
    assert list(client.routes()) == []


def test_client_with_a_spec(backend, spec):
    client = Client(backend, spec=spec)
    assert client.backend is backend
    assert client.spec is spec
    assert client.info == {'title': 'Kubernetes', 'version': 'v1.30.0'}


def test_client_with_settings(spec):
    settings = ClientSettings()
    client = Client(spec=spec, settings=settings)
    assert client.settings is settings


def test_malformed_spec_fails_the_construction():
    with pytest.raises(MalformedPathError):
        Client(spec={'paths': {
            '/api/v1/namespaces': {'get': {}},
            '/api/v1/namespaces/{name': {'get': {}},
        }})


def test_top_level_navigation(client):
    assert client.api.url == '/api'
    assert client['apis'].url == '/apis'
    assert client.version.url == '/version'
    assert client.logs('kube-apiserver.log').url == '/logs/kube-apiserver.log'


def test_client_attributes_are_not_shadowed(client):
    assert callable(client.routes)
    assert client.root.url == '/'


def test_unknown_top_level_names(client):
    with pytest.raises(AttributeError):
        client.nonexistent
    with pytest.raises(KeyError):
        client['nonexistent']


def test_repr(client):
    assert repr(client) == '<Client of Kubernetes v1.30.0>'
