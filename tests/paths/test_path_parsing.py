import pytest

from kubeswagger._cogs.structs.paths import Literal, MalformedPathError, Parameter, \
                                            WatchMarker, parse_path, render_path


def test_empty_path_has_no_segments():
    assert parse_path('') == ()
    assert parse_path('/') == ()


@pytest.mark.parametrize('template', ['/api/v1', 'api/v1', '/api/v1/', '//api//v1//'])
def test_empty_components_are_ignored(template):
    assert parse_path(template) == (Literal('api'), Literal('v1'))


def test_parameters_are_recognised():
    segments = parse_path('/api/v1/namespaces/{namespace}/pods/{name}')
    assert segments == (
        Literal('api'), Literal('v1'),
        Literal('namespaces'), Parameter('namespace'),
        Literal('pods'), Parameter('name'),
    )


def test_parameters_keep_their_names():
    segments = parse_path('/namespaces/{namespace}')
    assert isinstance(segments[1], Parameter)
    assert segments[1].name == 'namespace'


def test_parameters_are_equal_regardless_of_names():
    assert Parameter('name') == Parameter('namespace')
    assert hash(Parameter('name')) == hash(Parameter('namespace'))
    assert parse_path('/namespaces/{name}') == parse_path('/namespaces/{namespace}')


def test_parameters_differ_from_literals():
    assert Parameter('name') != Literal('name')
    assert Literal('watch') != WatchMarker()


@pytest.mark.parametrize('template', [
    '/api/v1/watch/namespaces',
    '/apis/apps/v1beta2/watch/deployments',
    '/apis/kopf.dev/v2alpha1/watch/kopfexamples',
])
def test_watch_after_version_is_a_marker(template):
    segments = parse_path(template)
    assert WatchMarker() in segments
    assert Literal('watch') not in segments


def test_watch_as_first_segment_is_a_marker():
    assert parse_path('/watch/pods') == (WatchMarker(), Literal('pods'))


@pytest.mark.parametrize('template', [
    '/apis/kopf.dev/watch/kopfexamples',  # not a version
    '/api/v1/namespaces/{namespace}/watch',  # after a parameter
    '/apis/kopf.dev/v1/kopfexamples/watch',  # deep in the path
    '/apis/kopf.dev/version1/watch',  # not a conventional version
])
def test_watch_elsewhere_is_a_literal(template):
    segments = parse_path(template)
    assert Literal('watch') in segments
    assert WatchMarker() not in segments


@pytest.mark.parametrize('template', [
    '/api/v1/namespaces/{namespace',
    '/api/v1/namespaces/namespace}',
    '/api/v1/namespaces/{{namespace}}',
    '/api/v1/namespaces/x{namespace}',
    '/api/v1/namespaces/{namespace}x',
    '/api/v1/namespaces/{}',
    '/api/v1/namespaces/{ }',
])
def test_malformed_templates(template):
    with pytest.raises(MalformedPathError):
        parse_path(template)


def test_malformed_path_error_is_a_value_error():
    assert issubclass(MalformedPathError, ValueError)


def test_rendering():
    segments = parse_path('/api/v1/watch/namespaces/{namespace}/pods')
    assert render_path(segments) == '/api/v1/watch/namespaces/{namespace}/pods'
    assert render_path(()) == '/'
