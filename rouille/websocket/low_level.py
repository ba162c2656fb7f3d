"""Incremental parsing of client-to-server websocket frames.

Feed received bytes to a ``StateMachine``; it yields ``FrameStart`` when a
frame begins, ``Data`` for each piece of its payload, and ``FrameError`` if
the stream is invalid, after which the connection must be dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

_LENGTH_MSB = 0x8000000000000000


@dataclass(frozen=True)
class FrameStart:
    """A new frame has started."""

    fin: bool
    length: int
    opcode: int


@dataclass(frozen=True)
class Data:
    """A piece of the current frame's payload, still masked."""

    payload: bytes
    mask: int
    offset: int
    last_in_frame: bool

    def __len__(self) -> int:
        return len(self.payload)

    def __iter__(self) -> Iterator[int]:
        offset = self.offset
        for byte in self.payload:
            yield byte ^ ((self.mask >> ((3 - offset) * 8)) & 0xFF)
            offset = (offset + 1) % 4

    def decode(self) -> bytes:
        """The unmasked bytes."""
        return bytes(self)


@dataclass(frozen=True)
class FrameError:
    """The stream is invalid; the connection must be dropped."""

    desc: str


Element = Union[FrameStart, Data, FrameError]


class StateMachine:
    """Parser state for one websocket stream; expects a frame header first."""

    def __init__(self) -> None:
        self._buffer = b""
        self._in_data = False
        self._mask = 0
        self._offset = 0
        self._remaining = 0

    def feed(self, data: bytes) -> Iterator[Element]:
        """Yield the elements found in ``data``, keeping partial headers for later.

        Nothing more is yielded after a ``FrameError``.
        """
        view = bytes(data)
        pos = 0
        while pos < len(view):
            if not self._in_data:
                element = self._parse_header(view, pos)
                if element is None:
                    self._buffer += view[pos:]
                    return
                header, consumed = element
                yield header
                if isinstance(header, FrameError):
                    return
                pos += consumed
                continue

            available = len(view) - pos
            if self._remaining > available:
                yield Data(view[pos:], self._mask, self._offset, False)
                self._offset = (self._offset + available) % 4
                self._remaining -= available
                return

            end = pos + self._remaining
            yield Data(view[pos:end], self._mask, self._offset, True)
            pos = end
            self._in_data = False

    def _parse_header(
        self, view: bytes, pos: int
    ) -> tuple[FrameStart | FrameError, int] | None:
        buffered = len(self._buffer)
        total = buffered + len(view) - pos
        if total < 6:
            return None
        head = (self._buffer + view[pos : pos + 14])[:14]
        first, second = head[0], head[1]

        if first & 0x70:
            return FrameError("Reserved bits must be zero"), 0
        if not second & 0x80:
            return FrameError("Client-to-server messages must be masked"), 0

        code = second & 0x7F
        if code == 126:
            if total < 8:
                return None
            length = int.from_bytes(head[2:4], "big")
            mask = int.from_bytes(head[4:8], "big")
            start = 8
        elif code == 127:
            if total < 14:
                return None
            length = int.from_bytes(head[2:10], "big")
            if length & _LENGTH_MSB:
                return FrameError("Most-significant bit of the length must be zero"), 0
            mask = int.from_bytes(head[10:14], "big")
            start = 14
        else:
            length = code
            mask = int.from_bytes(head[2:6], "big")
            start = 6

        self._buffer = b""
        self._in_data = True
        self._mask = mask
        self._offset = 0
        self._remaining = length
        return FrameStart(bool(first & 0x80), length, first & 0x0F), start - buffered