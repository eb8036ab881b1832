"""Response facade over a streamed httpx response.

The body is read from the network at most once: the first call to ``body()``
(directly or through ``save_file``/``download_file``) consumes and closes the
stream, and every later call returns the cached bytes.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import httpx

from httpreq.errors import DownloadError, ResponseError
from httpreq.http.headers import parse_media_params
from httpreq.utils.file import is_safe_filename, write_file_synced

logger = logging.getLogger(__name__)


class Response:
    """A completed HTTP exchange.

    A Response built without an underlying response (``Response()``) is a
    valid empty view: ``status_code`` is 0, ``headers`` is empty, ``close()``
    does nothing and ``body()`` raises ResponseError.

    Attributes:
        raw: The underlying httpx.Response, or None
    """

    def __init__(
        self,
        raw: Optional[httpx.Response] = None,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize response.

        Args:
            raw: Underlying response, usually with an unread stream
            client: Client to close together with the stream, if owned
        """
        self.raw = raw
        self._client = client
        self._data: Optional[bytes] = None
        self._closed = raw is None

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def status_code(self) -> int:
        """HTTP status code, or 0 without an underlying response."""
        if self.raw is None:
            return 0
        return self.raw.status_code

    @property
    def headers(self) -> httpx.Headers:
        """Response headers, empty without an underlying response."""
        if self.raw is None:
            return httpx.Headers()
        return self.raw.headers

    def body(self) -> bytes:
        """Return the response body, reading it from the stream on first use.

        Raises:
            ResponseError: If there is no underlying response or stream
            httpx.StreamError: If the stream was closed before being read
            httpx.HTTPError: If reading the stream fails
        """
        if self._data is not None:
            return self._data

        if self.raw is None:
            logger.error("http response is missing")
            raise ResponseError("http response is missing")

        if getattr(self.raw, "stream", None) is None:
            logger.error("http response body stream is missing")
            raise ResponseError("http response body stream is missing")

        try:
            data = b"".join(self.raw.iter_bytes())
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error(f"Can't read http response body: {e}")
            self.close()
            raise

        self._data = data
        self.close()
        return data

    def text(self, encoding: Optional[str] = None) -> str:
        """Decode the body using encoding or the charset of the response."""
        data = self.body()
        encoding = encoding or (self.raw.encoding if self.raw is not None else None) or 'utf-8'
        return data.decode(encoding, errors='replace')

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body())

    def save_file(self, file_path: Union[str, os.PathLike]) -> Path:
        """Write the body to file_path, creating or truncating it.

        The data is flushed to stable storage before returning.

        Returns:
            Path of the written file

        Raises:
            DownloadError: If the body is empty
            OSError: If the file cannot be created or written
        """
        data = self.body()

        if len(data) == 0:
            logger.error(f"Can not save empty response to file {file_path}")
            raise DownloadError(
                f"Downloaded file is empty. Can not save empty response to file {file_path}"
            )

        try:
            return write_file_synced(file_path, data)
        except OSError as e:
            logger.error(f"Can not write file {file_path}: {e}")
            raise

    def download_file(self, download_dir: Union[str, os.PathLike]) -> Tuple[str, Path]:
        """Save the body under the filename given by Content-Disposition.

        Trusts the server-suggested filename only as a single path component;
        names with separators, drives or '..' are rejected.

        Args:
            download_dir: Existing directory to save into

        Returns:
            Tuple of (Content-Type header value or "", saved file path)

        Raises:
            DownloadError: Missing or malformed Content-Disposition, missing or
                unsafe filename, or empty body
            OSError: If the file cannot be written
        """
        headers = self.headers
        content_type = headers.get("Content-Type", "")

        disposition = headers.get("Content-Disposition")
        if not disposition:
            logger.error("content-disposition header missing")
            raise DownloadError("content-disposition header missing", content_type)

        try:
            _, params = parse_media_params(disposition)
        except ValueError as e:
            logger.error(f"Malformed content-disposition {disposition!r}: {e}")
            raise DownloadError(f"malformed content-disposition: {e}", content_type) from e

        filename = params.get("filename")
        if not filename:
            logger.error(f"filename missing in content-disposition {disposition!r}")
            raise DownloadError("filename missing in content-disposition", content_type)

        if not is_safe_filename(filename):
            logger.error(f"Refusing unsafe filename in content-disposition: {filename!r}")
            raise DownloadError(f"unsafe filename in content-disposition: {filename!r}", content_type)

        file_path = Path(download_dir) / filename

        try:
            self.save_file(file_path)
        except DownloadError as e:
            e.content_type = content_type
            raise

        logger.info(f"Downloaded {file_path} ({content_type or 'unknown type'})")
        return content_type, file_path

    def close(self) -> None:
        """Close the response stream and any client owned by this response.

        Safe to call more than once and after ``body()``.
        """
        if self._closed:
            return
        self._closed = True

        try:
            if self.raw is not None:
                self.raw.close()
        finally:
            if self._client is not None:
                self._client.close()
                self._client = None
