"""
The aiohttp sessions for the default backend.

Only what is in :class:`credentials.ConnectionInfo` is used: there is no
re-authentication and no token refreshing. A caller who needs them can build
its own session and give it to the backend (``AiohttpBackend(info, session=...)``).

The certificates and keys can be given either as paths or as PEM/base64 data.
Python's SSL contexts load the client certificates from files only, so the
in-memory ones are written into one short-lived temporary file, which is
deleted as soon as the context has loaded it.
"""
import base64
import os
import ssl
import tempfile

import aiohttp

from kubeswagger._cogs.helpers import versions
from kubeswagger._cogs.structs import credentials


def make_session(info: credentials.ConnectionInfo) -> aiohttp.ClientSession:
    headers = {'User-Agent': f'kubeswagger/{versions.version or "unknown"}'}
    authorization = authorization_header(info)
    if authorization is not None:
        headers['Authorization'] = authorization

    basic_auth = aiohttp.BasicAuth(info.username, info.password) \
        if info.username and info.password else None

    connector = aiohttp.TCPConnector(limit=0, ssl=make_ssl_context(info))
    return aiohttp.ClientSession(connector=connector, headers=headers, auth=basic_auth)


def authorization_header(info: credentials.ConnectionInfo) -> str | None:
    if not info.token:
        return info.scheme or None
    return f"{info.scheme or 'Bearer'} {info.token}"


def make_ssl_context(info: credentials.ConnectionInfo) -> ssl.SSLContext:
    context = ssl.create_default_context(
        purpose=ssl.Purpose.SERVER_AUTH,
        cafile=info.ca_path,
        cadata=decode_to_pem(info.ca_data) if info.ca_data else None,
    )
    if info.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    _load_client_certificate(context, info)
    return context


def _load_client_certificate(context: ssl.SSLContext, info: credentials.ConnectionInfo) -> None:
    has_cert = bool(info.certificate_path or info.certificate_data)
    has_pkey = bool(info.private_key_path or info.private_key_data)
    if not (has_cert and has_pkey):
        return

    # Both on disk: nothing to write, which matters on read-only filesystems.
    if info.certificate_path and info.private_key_path:
        context.load_cert_chain(certfile=info.certificate_path, keyfile=info.private_key_path)
        return

    cert_pem = _read_pem(info.certificate_path, info.certificate_data)
    pkey_pem = _read_pem(info.private_key_path, info.private_key_data)
    with tempfile.NamedTemporaryFile('w+t', encoding='ascii', suffix='.pem') as f:
        f.write(cert_pem.rstrip('\n') + '\n' + pkey_pem)
        f.flush()
        context.load_cert_chain(certfile=f.name)


def _read_pem(path: str | os.PathLike[str] | None, data: str | bytes | None) -> str:
    if path:
        with open(path, encoding='ascii') as f:
            return f.read()
    if data is None:
        raise ValueError("Neither a path nor the data are given for a PEM file.")
    return decode_to_pem(data)


def decode_to_pem(data: str | bytes) -> str:
    match data:
        case str() if data.startswith('-----BEGIN '):
            return data
        case bytes() if data.startswith(b'-----BEGIN '):
            return data.decode('ascii')
        case _:
            return base64.b64decode(data).decode('ascii')
