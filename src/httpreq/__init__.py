"""
httpreq - A chainable HTTP request builder on top of httpx.

Requests are assembled with chained configuration calls, dispatched with a
verb call, and the response is consumed through a small facade that reads the
body once and can save it to disk or download it under the server-suggested
filename.

Example:
    >>> import httpreq
    >>> resp = httpreq.new("https://example.org/report").set_timeout(10).get()
    >>> content_type, path = resp.download_file("./downloads")
"""

__version__ = "1.0.0"
__license__ = "MIT"

from httpreq.config import Config
from httpreq.errors import (
    BodyReplayError,
    ConfigurationError,
    DownloadError,
    FormError,
    HttpReqError,
    InvalidProxyError,
    ResponseError,
)
from httpreq.request import Request, new
from httpreq.response import Response

__all__ = [
    "BodyReplayError",
    "Config",
    "ConfigurationError",
    "DownloadError",
    "FormError",
    "HttpReqError",
    "InvalidProxyError",
    "Request",
    "Response",
    "ResponseError",
    "new",
    "__version__",
]
