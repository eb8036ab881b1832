"""Replayable request bodies.

httpx sends a request body by iterating its stream. When a 307/308 redirect is
followed the same stream is iterated again, so a body must be able to produce
a fresh reader over the same bytes every time it is iterated.
"""

import io
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator, Optional

from httpreq.errors import BodyReplayError

CHUNK_SIZE = 64 * 1024

Opener = Callable[[], BinaryIO]


@dataclass(frozen=True)
class RequestBody:
    """A request body of known length with an optional reader factory.

    Attributes:
        length: Body size in bytes, sent as Content-Length
        opener: Callable returning a new binary reader positioned at the
            start of the body, or None when the body cannot be replayed
    """

    length: int
    opener: Optional[Opener] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "RequestBody":
        """Create a body over a fixed byte buffer.

        The buffer is stored once; each reader is a new cursor over it.
        """
        data = bytes(data)
        return cls(length=len(data), opener=lambda: io.BytesIO(data))

    @property
    def replayable(self) -> bool:
        """True if a fresh reader can be produced on demand."""
        return self.opener is not None

    def open(self) -> BinaryIO:
        """Return a new reader over the body bytes.

        Raises:
            BodyReplayError: If the body has no reader factory
        """
        if self.opener is None:
            raise BodyReplayError("request body has no reader factory and cannot be re-read")
        return self.opener()

    def to_bytes(self) -> bytes:
        """Read the whole body through a fresh reader."""
        with self.open() as reader:
            return reader.read()

    def __iter__(self) -> Iterator[bytes]:
        # httpx re-iterates non-generator iterables, one pass per send.
        # No read() attribute on this class, or httpx would treat it as a file.
        with self.open() as reader:
            while True:
                chunk = reader.read(CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
