"""HTTP plumbing for httpreq.

Uses httpx directly as the transport; this package only adds client
construction, replayable bodies, multipart encoding and header parsing.
"""

from httpreq.http.body import RequestBody
from httpreq.http.client import ClientSettings, create_client
from httpreq.http.headers import load_headers_from_file, parse_media_params
from httpreq.http.multipart import MultipartWriter

__all__ = [
    "ClientSettings",
    "MultipartWriter",
    "RequestBody",
    "create_client",
    "load_headers_from_file",
    "parse_media_params",
]
