"""Chainable HTTP request builder.

A Request accumulates headers, body and client settings through chained calls
and performs exactly one dispatch through httpx. Configuration failures are
recorded on the chain (see httpreq.chain) and raised by the verb call, so a
chain never needs per-call error checks::

    resp = (
        new("https://example.org/upload")
        .set_headers({"X-SecurityToken": token})
        .set_timeout(10)
        .set_form([{"file": "report.pdf"}], [{"taskId": "123456"}])
        .post()
    )

A Request is single-owner and not safe for concurrent configuration.
"""

import io
import logging
import os
import shutil
import ssl
from typing import Mapping, Optional, Sequence

import httpx

from httpreq.chain import ErrorChain, chained
from httpreq.config import Config
from httpreq.errors import BodyReplayError, ConfigurationError, FormError, InvalidProxyError
from httpreq.http.body import Opener, RequestBody
from httpreq.http.client import ClientSettings, TimeoutTypes, VerifyTypes, create_client
from httpreq.http.multipart import MultipartWriter
from httpreq.response import Response

logger = logging.getLogger(__name__)

METHODS = ("GET", "POST", "PUT", "DELETE")


class Request(ErrorChain):
    """HTTP request builder.

    Attributes:
        address: Raw target address; parsed only at dispatch
        method: HTTP method, GET until a verb call sets it
        settings: Client settings applied at dispatch
    """

    def __init__(self, address: str, config: Optional[Config] = None):
        """Initialize request.

        Args:
            address: Target URL. Not validated until dispatch.
            config: Configuration object (creates default if None)
        """
        if config is None:
            config = Config()

        self.address = address
        self.method = "GET"
        self.settings = ClientSettings.from_config(config)
        self._headers = httpx.Headers()
        self._body: Optional[RequestBody] = None
        self._tls_configured = False

        if config.proxy:
            self.set_proxy(config.proxy)

    def __repr__(self) -> str:
        return f"<Request [{self.method}] {self.address!r}>"

    @property
    def headers(self) -> httpx.Headers:
        """Copy of the headers set on this request."""
        return self._headers.copy()

    @property
    def body(self) -> Optional[RequestBody]:
        """Installed body, or None."""
        return self._body

    # Configuration

    @chained
    def set_headers(self, headers: Mapping[str, str]) -> "Request":
        """Set request headers, replacing any existing value of the same name."""
        for name, value in headers.items():
            self._headers[name] = value

    @chained
    def set_content_type(self, content_type: str) -> "Request":
        """Set the Content-Type header."""
        self._headers["Content-Type"] = content_type

    @chained
    def set_timeout(self, timeout: TimeoutTypes) -> "Request":
        """Set the client timeout in seconds (or an httpx.Timeout)."""
        self.settings.timeout = timeout

    @chained
    def set_tls_config(self, tls_config: VerifyTypes) -> "Request":
        """Set TLS verification: an ssl.SSLContext, a CA bundle path, or a bool.

        A caller-owned transport carries its own TLS setup, so calling this
        while one is installed records a ConfigurationError, as does an
        unsupported value.
        """
        if not isinstance(tls_config, (ssl.SSLContext, str, bool)):
            logger.error(f"Unsupported TLS config: {type(tls_config).__name__}")
            self._fail(ConfigurationError(f"unsupported TLS config: {type(tls_config).__name__}"))
            return

        if self.settings.transport is not None:
            logger.error("TLS config set while a caller-owned transport is installed")
            self._fail(ConfigurationError(
                "TLS config cannot be applied to a caller-owned transport; configure TLS on the transport"
            ))
            return

        self.settings.verify = tls_config
        self._tls_configured = True

    @chained
    def set_transport(self, transport: httpx.BaseTransport) -> "Request":
        """Use a caller-owned transport. Replaces any proxy set earlier.

        The transport is not closed by httpreq. It must carry its own TLS
        setup: installing it after set_tls_config records a
        ConfigurationError.
        """
        if self._tls_configured:
            logger.error("Caller-owned transport installed after set_tls_config")
            self._fail(ConfigurationError(
                "caller-owned transport would ignore the TLS config set earlier; configure TLS on the transport"
            ))
            return

        self.settings.transport = transport
        self.settings.proxy = None

    @chained
    def set_proxy(self, proxy_url: str) -> "Request":
        """Route the request through a proxy. Replaces any transport set earlier.

        The URL is parsed immediately; a malformed URL or unsupported scheme is
        recorded on the chain as InvalidProxyError.
        """
        try:
            proxy = httpx.Proxy(proxy_url)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            logger.error(f"Invalid proxy URL {proxy_url!r}: {e}")
            error = InvalidProxyError(f"invalid proxy URL {proxy_url!r}: {e}")
            error.__cause__ = e
            self._fail(error)
            return

        self.settings.proxy = proxy
        self.settings.transport = None

    @chained
    def set_body(self, data: bytes) -> "Request":
        """Set a fixed request body. It is replayed as-is on redirects."""
        self._body = RequestBody.from_bytes(data)

    @chained
    def set_body_reader(self, opener: Optional[Opener], length: int) -> "Request":
        """Set a body produced by a reader factory.

        Args:
            opener: Callable returning a fresh binary reader over the body
                each time it is called, e.g. ``lambda: open(path, "rb")``
            length: Body length in bytes, sent as Content-Length
        """
        self._body = RequestBody(length=length, opener=opener)

    @chained
    def set_body_xml(self) -> "Request":
        """Mark the body as XML."""
        self._headers["Content-Type"] = "application/xml; charset=UTF-8"

    @chained
    def set_form(
        self,
        files: Sequence[Mapping[str, str]],
        fields: Sequence[Mapping[str, str]],
    ) -> "Request":
        """Build a multipart/form-data body from files and fields.

        Args:
            files: Ordered {field name: file path} mappings
            fields: Ordered {field name: value} mappings

        A file that cannot be opened or read records a FormError and the
        partially built form is discarded. Empty sequences produce an empty
        multipart body.
        """
        buffer = io.BytesIO()
        writer = MultipartWriter(buffer)

        try:
            for file in files:
                for name, path in file.items():
                    _write_form_file(writer, name, path)

            for field in fields:
                for name, value in field.items():
                    writer.write_field(name, value)

            writer.close()
        except OSError as e:
            logger.error(f"Failed to build multipart form: {e}")
            error = FormError(f"failed to build multipart form: {e}")
            error.__cause__ = e
            self._fail(error)
            return

        data = buffer.getvalue()
        self._body = RequestBody.from_bytes(data)
        self._headers["Content-Type"] = writer.content_type
        logger.debug(f"Built multipart form: {len(data)} bytes, boundary={writer.boundary}")

    # Dispatch

    def get(self) -> Response:
        """Send a GET request."""
        return self.send("GET")

    def post(self) -> Response:
        """Send a POST request."""
        return self.send("POST")

    def post_json(self) -> Response:
        """Send a POST request with Content-Type application/json."""
        self.set_content_type("application/json")
        return self.send("POST")

    def put(self) -> Response:
        """Send a PUT request."""
        return self.send("PUT")

    def delete(self) -> Response:
        """Send a DELETE request."""
        return self.send("DELETE")

    def send(self, method: str) -> Response:
        """Finalize method and URL and execute the request.

        Args:
            method: One of GET, POST, PUT, DELETE

        Returns:
            Response wrapping the unread response stream

        Raises:
            ConfigurationError: The first error recorded on the chain
            BodyReplayError: Non-empty body without a reader factory
            httpx.InvalidURL: The address cannot be parsed
            httpx.HTTPError: Transport failure (connect, TLS, timeout, ...)
        """
        if self._error is not None:
            raise self._error

        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        if self._body is not None and self._body.length > 0 and not self._body.replayable:
            raise BodyReplayError(
                "request body reader factory cannot be None when content length > 0, "
                "it is required to resend the body on redirects"
            )

        self.method = method
        url = generate_url(self.address)

        content = None
        headers = self._headers.copy()
        if self._body is not None and self._body.length > 0:
            content = self._body
            headers["Content-Length"] = str(self._body.length)

        client = create_client(self.settings)
        try:
            request = client.build_request(method, url, headers=headers, content=content)
            logger.debug(f"Sending {method} {url}")
            raw = client.send(request, stream=True)
        except Exception as e:
            logger.error(f"Error sending HTTP request: {url}, {e}")
            if self.settings.owns_transport:
                client.close()
            raise

        return Response(raw, client=client if self.settings.owns_transport else None)


def generate_url(address: str) -> httpx.URL:
    """Lower-case and parse an address into a URL.

    Raises:
        httpx.InvalidURL: If the address cannot be parsed
    """
    address = address.lower()

    try:
        return httpx.URL(address)
    except httpx.InvalidURL as e:
        logger.error(f"URL parsing error: {address}, {e}")
        raise


def new(address: str, config: Optional[Config] = None) -> Request:
    """Create a new request for address."""
    return Request(address, config)


def _write_form_file(writer: MultipartWriter, name: str, path: str) -> None:
    """Stream the file at path into a new file part named name."""
    with open(path, 'rb') as f:
        part = writer.create_form_file(name, os.path.basename(path))
        shutil.copyfileobj(f, part)
