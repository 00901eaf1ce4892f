"""
Gemini client library for Python.
"""

import logging
import socket
import ssl
from typing import Optional, Tuple
from urllib.parse import urlparse

from . import constants, tofu
from ..exceptions import CertError, InvalidURLError, UnknownProtocolError
from .response import Response, parse_response

logger = logging.getLogger(constants.LOGGER_NAME)

MAX_URL_LENGTH = 1024


def tls_context(verify: bool = True) -> ssl.SSLContext:
    """
    Create an SSL/TLS context that matches Gemini requirements: TLS 1.2 or better.

    :param verify: verify the certificate of the server. Disabling verification accepts any
        certificate and makes the connection vulnerable to interception.
    """
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    if not verify:
        logger.warning("certificate verification is disabled")
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return context


def _send(secure_socket: ssl.SSLSocket, data: bytes):
    sent = 0
    while sent < len(data):
        completed = secure_socket.send(data[sent:])
        sent += completed


def _open_secure_socket(
    host: str, port: int, context: ssl.SSLContext, timeout: Optional[float]
) -> ssl.SSLSocket:
    sock = socket.create_connection((host, port), timeout=timeout)
    try:
        return context.wrap_socket(sock, server_hostname=host)
    except Exception:
        sock.close()
        raise


def _connect(
    host: str,
    port: int,
    cert_store: Optional[tofu.SelfSignedCertStore],
    verify: bool,
    timeout: Optional[float],
) -> ssl.SSLSocket:
    """
    Connect to the host, trusting a self-signed certificate on first use if a store is given.

    :raises CertError: the host presented a self-signed certificate that differs from the one
        in the store.
    """
    logger.debug("making request to %s:%d", host, port)
    context = tls_context(verify)
    if cert_store is None or not verify:
        return _open_secure_socket(host, port, context, timeout)

    had_cert = cert_store.load_cert(context, host)
    try:
        return _open_secure_socket(host, port, context, timeout)
    except ssl.SSLCertVerificationError as cert_error:
        if cert_error.verify_code != constants.SSL_SELF_SIGNED_CERT_ERROR_CODE:
            raise
        if had_cert:
            raise CertError(
                f"self-signed certificate of {host} does not match the stored certificate"
            ) from cert_error

        logger.debug(
            "request to %s:%d failed due to self-signed certificate", host, port
        )

    certificate = ssl.get_server_certificate((host, port))
    cert_store.store_cert(host, certificate)

    logger.debug("retrying request to %s:%d with self-signed certificate", host, port)
    context = tls_context(verify)
    cert_store.load_cert(context, host)
    return _open_secure_socket(host, port, context, timeout)


def _parse_url(url: str) -> Tuple[str, int]:
    """
    Parse a Gemini URL for lower-level network communication.

    >>> _parse_url("gemini://foo.dev/users/matt/index.gmi")
    ('foo.dev', 1965)

    >>> _parse_url("gemini://foo.dev:4242/foo/bar")
    ('foo.dev', 4242)

    >>> _parse_url("https://foo.dev/")
    Traceback (most recent call last):
        ...
    gemline.exceptions.UnknownProtocolError: Unknown protocol: https

    :param url: an absolute Gemini URL.
    :return: a tuple of the host and port of the URL. The port defaults to the default Gemini port.
    """

    if len(url.encode("utf-8")) > MAX_URL_LENGTH:
        raise InvalidURLError(f"URL is longer than {MAX_URL_LENGTH} bytes")

    parsed_url = urlparse(url)

    if parsed_url.scheme.lower() != "gemini":
        raise UnknownProtocolError(f"Unknown protocol: {parsed_url.scheme}")
    if not parsed_url.hostname:
        raise InvalidURLError(f"Invalid URL: {url}")

    try:
        port = parsed_url.port or constants.GEMINI_DEFAULT_PORT
    except ValueError as err:
        raise InvalidURLError(f"Invalid URL: {url}") from err

    return parsed_url.hostname, port


def sync_request(
    url: str,
    cert_store: Optional[tofu.SelfSignedCertStore] = None,
    verify: bool = True,
    timeout: Optional[float] = None,
) -> Response:
    """
    Make a synchronous Gemini request.

    The connection stays open until the response is closed:

        with sync_request("gemini://foo.dev/") as response:
            for line in response.body.lines():
                ...

    :param url: an absolute Gemini URL.
    :param cert_store: store of self-signed certificates to trust on first use. Without a store
        only certificates signed by a trusted authority are accepted.
    :param verify: verify the certificate of the server.
    :param timeout: timeout in seconds for connecting and for every read.
    :return: the response, with the header parsed and the body ready to be read.
    """

    host, port = _parse_url(url)

    secure_sock = _connect(host, port, cert_store, verify, timeout)
    try:
        _send(secure_sock, url.encode("utf-8") + b"\r\n")
        reader = secure_sock.makefile("rb")
    finally:
        # The reader keeps the connection open until the reader is closed.
        secure_sock.close()

    try:
        return parse_response(reader)
    except Exception:
        reader.close()
        raise
