"""multipart/form-data encoding.

Parts are appended to a byte buffer in order. Bytes of a part are never
rewritten once a later part has started, and the closing boundary is written
exactly once.
"""

import uuid
from typing import BinaryIO, Optional

CRLF = b"\r\n"


def _escape_quotes(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class MultipartWriter:
    """Writes multipart/form-data parts into a binary buffer.

    Example:
        >>> buf = io.BytesIO()
        >>> w = MultipartWriter(buf)
        >>> w.write_field("taskId", "123456")
        >>> w.close()
        >>> w.content_type
        'multipart/form-data; boundary=...'
    """

    def __init__(self, buffer: BinaryIO, boundary: Optional[str] = None):
        self.buffer = buffer
        self.boundary = boundary or uuid.uuid4().hex + uuid.uuid4().hex[:8]
        self._parts = 0
        self._closed = False

    @property
    def content_type(self) -> str:
        """Content-Type header value carrying the boundary."""
        return f"multipart/form-data; boundary={self.boundary}"

    def create_part(self, headers: dict) -> BinaryIO:
        """Start a new part and return the buffer to write its content into."""
        if self._closed:
            raise ValueError("multipart writer is already closed")

        delimiter = f"--{self.boundary}".encode("ascii") + CRLF
        if self._parts > 0:
            delimiter = CRLF + delimiter
        self.buffer.write(delimiter)

        for name, value in headers.items():
            self.buffer.write(f"{name}: {value}".encode("utf-8") + CRLF)
        self.buffer.write(CRLF)

        self._parts += 1
        return self.buffer

    def create_form_file(self, field_name: str, filename: str) -> BinaryIO:
        """Start a file part with an octet-stream content type."""
        return self.create_part({
            "Content-Disposition": (
                f'form-data; name="{_escape_quotes(field_name)}"; '
                f'filename="{_escape_quotes(filename)}"'
            ),
            "Content-Type": "application/octet-stream",
        })

    def write_field(self, name: str, value: str) -> None:
        """Write a plain form field part."""
        part = self.create_part({
            "Content-Disposition": f'form-data; name="{_escape_quotes(name)}"',
        })
        part.write(str(value).encode("utf-8"))

    def close(self) -> None:
        """Write the closing boundary. May only be called once."""
        if self._closed:
            raise ValueError("multipart writer is already closed")

        trailer = f"--{self.boundary}--".encode("ascii") + CRLF
        if self._parts > 0:
            trailer = CRLF + trailer
        self.buffer.write(trailer)
        self._closed = True
