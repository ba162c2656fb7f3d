"""The body of a response."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, replace
from typing import BinaryIO


@dataclass(frozen=True)
class ResponseBody:
    """The data sent back to the client, with its length if known in advance."""

    reader: BinaryIO
    length: int | None = None
    chunked_threshold: int | None = None

    @classmethod
    def empty(cls) -> ResponseBody:
        """A body with no data."""
        return cls(io.BytesIO(b""), 0)

    @classmethod
    def from_reader(cls, data: BinaryIO) -> ResponseBody:
        """A body read from a binary reader whose length is unknown."""
        return cls(data, None)

    @classmethod
    def from_reader_and_size(cls, data: BinaryIO, size: int) -> ResponseBody:
        """A body read from a binary reader that yields ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        return cls(data, size)

    @classmethod
    def from_data(cls, data: bytes | bytearray | memoryview | str) -> ResponseBody:
        """A body holding the given bytes; text is encoded as UTF-8."""
        if isinstance(data, str):
            payload = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray, memoryview)):
            payload = bytes(data)
        else:
            raise TypeError(
                f"expected bytes or str, got {type(data).__name__}"
            )
        return cls(io.BytesIO(payload), len(payload))

    @classmethod
    def from_file(cls, file: BinaryIO) -> ResponseBody:
        """A body holding the content of an open binary file."""
        try:
            length: int | None = os.fstat(file.fileno()).st_size
        except (AttributeError, OSError, io.UnsupportedOperation):
            length = None
        return cls(file, length)

    @classmethod
    def from_string(cls, data: str) -> ResponseBody:
        """A body holding a UTF-8 encoded string."""
        if not isinstance(data, str):
            raise TypeError(f"expected str, got {type(data).__name__}")
        return cls.from_data(data.encode("utf-8"))

    def into_reader_and_size(self) -> tuple[BinaryIO, int | None]:
        """The reader and the length of the body; the length is None if unknown."""
        return self.reader, self.length

    def with_chunked_threshold(self, length: int) -> ResponseBody:
        """A copy of this body with the given chunked threshold."""
        if length < 0:
            raise ValueError("chunked threshold must not be negative")
        return replace(self, chunked_threshold=length)