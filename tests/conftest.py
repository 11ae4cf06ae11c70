import asyncio
import dataclasses
import inspect
from collections.abc import AsyncIterator, Mapping
from typing import Any

import pytest

from kubeswagger import Client


def pytest_configure(config):
    # Unexpected warnings should fail the tests. Use `-Wignore` to explicitly disable it.
    config.addinivalue_line('filterwarnings', 'error')

    # Warnings from the testing tools out of our control should not fail the tests.
    config.addinivalue_line('filterwarnings', 'ignore::DeprecationWarning:aresponses')
    config.addinivalue_line('filterwarnings', 'ignore::DeprecationWarning:pytest_asyncio')
    config.addinivalue_line('filterwarnings', 'ignore::pytest.PytestDeprecationWarning')
    config.addinivalue_line('filterwarnings', 'ignore::ResourceWarning')


# Make all tests in this directory and below asyncio-compatible by default.
# Due to how pytest-async checks for these markers, they should be added as early as possible.
@pytest.hookimpl(hookwrapper=True)
def pytest_pycollect_makeitem(collector, name, obj):
    if collector.funcnamefilter(name) and inspect.iscoroutinefunction(obj):
        pytest.mark.asyncio(obj)
    yield


@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@dataclasses.dataclass(frozen=True)
class BackendCall:
    method: str
    path: str
    params: Mapping[str, Any] | None
    body: object | None
    headers: Mapping[str, str] | None
    streaming: bool


class FakeRawStream:
    """
    A raw stream with pre-defined chunks, optionally failing at the end.

    A hanging stream does not end after the chunks, but waits until closed,
    the same as the long-lived watch-streams do when there are no changes.
    """

    def __init__(
            self,
            chunks: list[bytes],
            *,
            error: BaseException | None = None,
            hang: bool = False,
    ) -> None:
        super().__init__()
        self.chunks = chunks
        self.error = error
        self.hang = hang
        self.closed = False
        self.close_count = 0
        self._closed_event = asyncio.Event()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            if self.closed:
                raise ConnectionResetError("closed")
            yield chunk
        if self.error is not None:
            raise self.error
        if self.hang:
            await self._closed_event.wait()

    def close(self) -> None:
        self.closed = True
        self.close_count += 1
        self._closed_event.set()


class FakeBackend:
    """
    A backend that records all the requests and responds with pre-set results.

    The regular requests return the ``result``; the streaming requests
    return the ``streams`` one by one (or fail if there are none left).
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[BackendCall] = []
        self.result: object = {'kind': 'Status', 'status': 'Success'}
        self.streams: list[FakeRawStream] = []
        self.error: BaseException | None = None

    async def request(
            self,
            *,
            method: str,
            path: str,
            params: Mapping[str, Any] | None = None,
            body: object | None = None,
            headers: Mapping[str, str] | None = None,
            streaming: bool = False,
    ) -> Any:
        self.calls.append(BackendCall(method, path, params, body, headers, streaming))
        if self.error is not None:
            raise self.error
        if streaming:
            return self.streams.pop(0)
        return self.result


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def raw_stream_factory(backend):
    """ Feed the fake backend with the raw streams of the given chunks. """
    def feed(*chunks: bytes, error: BaseException | None = None, hang: bool = False) -> FakeRawStream:
        stream = FakeRawStream(list(chunks), error=error, hang=hang)
        backend.streams.append(stream)
        return stream
    return feed


@pytest.fixture()
def spec():
    """ A tiny subset of the real K8s API spec, enough for most of the tests. """
    return {
        'swagger': '2.0',
        'info': {'title': 'Kubernetes', 'version': 'v1.30.0'},
        'paths': {
            '/api/': {'get': {'operationId': 'getCoreAPIVersions'}},
            '/api/v1/': {'get': {'operationId': 'getCoreV1APIResources'}},
            '/api/v1/namespaces': {
                'get': {'operationId': 'listCoreV1Namespace'},
                'post': {'operationId': 'createCoreV1Namespace'},
                'parameters': [{'name': 'pretty', 'in': 'query'}],
            },
            '/api/v1/namespaces/{name}': {
                'get': {'operationId': 'readCoreV1Namespace'},
                'put': {'operationId': 'replaceCoreV1Namespace'},
                'patch': {'operationId': 'patchCoreV1Namespace'},
                'delete': {'operationId': 'deleteCoreV1Namespace'},
            },
            '/api/v1/namespaces/{namespace}/pods': {
                'get': {'operationId': 'listCoreV1NamespacedPod'},
                'post': {'operationId': 'createCoreV1NamespacedPod'},
                'delete': {'operationId': 'deleteCoreV1CollectionNamespacedPod'},
            },
            '/api/v1/namespaces/{namespace}/pods/{name}': {
                'get': {'operationId': 'readCoreV1NamespacedPod'},
                'patch': {'operationId': 'patchCoreV1NamespacedPod'},
                'delete': {'operationId': 'deleteCoreV1NamespacedPod'},
            },
            '/api/v1/namespaces/{namespace}/pods/{name}/log': {
                'get': {'operationId': 'readCoreV1NamespacedPodLog'},
            },
            '/api/v1/namespaces/{namespace}/pods/{name}/status': {
                'get': {'operationId': 'readCoreV1NamespacedPodStatus'},
                'patch': {'operationId': 'patchCoreV1NamespacedPodStatus'},
            },
            '/api/v1/watch/namespaces': {
                'get': {'operationId': 'watchCoreV1NamespaceList'},
            },
            '/api/v1/watch/namespaces/{namespace}/pods': {
                'get': {'operationId': 'watchCoreV1NamespacedPodList'},
            },
            '/apis/': {'get': {'operationId': 'getAPIVersions'}},
            '/apis/apps/v1/deployments': {
                'get': {'operationId': 'listAppsV1DeploymentForAllNamespaces'},
            },
            '/apis/apps/v1/namespaces/{namespace}/deployments': {
                'get': {'operationId': 'listAppsV1NamespacedDeployment'},
                'post': {'operationId': 'createAppsV1NamespacedDeployment'},
            },
            '/apis/apps/v1/namespaces/{namespace}/deployments/{name}/scale': {
                'get': {'operationId': 'readAppsV1NamespacedDeploymentScale'},
                'put': {'operationId': 'replaceAppsV1NamespacedDeploymentScale'},
            },
            '/version/': {'get': {'operationId': 'getCodeVersion'}},
            '/logs/{logpath}': {'get': {'operationId': 'logFileHandler'}},
        },
    }


@pytest.fixture()
def client(backend, spec):
    return Client(backend, spec=spec)


@pytest.fixture()
def namespaced_crd():
    return {
        'apiVersion': 'apiextensions.k8s.io/v1',
        'kind': 'CustomResourceDefinition',
        'metadata': {'name': 'kopfexamples.kopf.dev'},
        'spec': {
            'scope': 'Namespaced',
            'group': 'kopf.dev',
            'names': {'kind': 'KopfExample', 'plural': 'kopfexamples', 'singular': 'kopfexample'},
            'versions': [
                {'name': 'v1', 'served': True, 'storage': True},
                {'name': 'v1beta1', 'served': True, 'storage': False},
            ],
        },
    }


@pytest.fixture()
def cluster_crd():
    return {
        'spec': {
            'scope': 'Cluster',
            'group': 'kopf.dev',
            'names': {'kind': 'KopfPeering', 'plural': 'clusterkopfpeerings'},
            'versions': [{'name': 'v1'}],
        },
    }
