"""Exception types raised by httpreq.

URL parse errors (``httpx.InvalidURL``), transport errors (the ``httpx.HTTPError``
family) and filesystem errors (``OSError``) are raised unwrapped; the classes
below cover failures that originate in this package.
"""

from typing import Optional


class HttpReqError(Exception):
    """Base class for all httpreq errors."""


class ConfigurationError(HttpReqError):
    """A builder configuration call failed.

    Recorded as the builder's first error and raised by the next verb call.
    """


class InvalidProxyError(ConfigurationError):
    """Proxy URL could not be parsed or uses an unsupported scheme."""


class FormError(ConfigurationError):
    """Multipart form assembly failed (file open/read or part write)."""


class BodyReplayError(HttpReqError):
    """A non-empty request body has no reader factory.

    Without one the body cannot be sent again when a redirect is followed.
    """


class ResponseError(HttpReqError):
    """The response or its body stream is not available."""


class DownloadError(ResponseError):
    """A response body could not be extracted to a file.

    Attributes:
        content_type: Content-Type header of the response, empty if absent
    """

    def __init__(self, message: str, content_type: Optional[str] = None):
        super().__init__(message)
        self.content_type = content_type or ""
