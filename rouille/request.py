"""The request object that handlers receive."""

from __future__ import annotations

import io
import threading
from typing import BinaryIO, Iterable
from urllib.parse import unquote_to_bytes

_DEFAULT_REMOTE_ADDR = ("127.0.0.1", 12345)

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _percent_decode_lossy(text: str) -> str:
    return unquote_to_bytes(text).decode("utf-8", errors="replace")


class _BodySlot:
    """Holds the request body until it is taken, shared between derived requests."""

    def __init__(self, reader: BinaryIO | None) -> None:
        self._reader = reader
        self._lock = threading.Lock()

    def take(self) -> BinaryIO | None:
        with self._lock:
            reader, self._reader = self._reader, None
            return reader


class Request:
    """A request that a handler must answer.

    It is either received by the server or built with one of the ``fake_*``
    constructors for tests.
    """

    def __init__(
        self,
        method: str,
        url: str,
        headers: Iterable[tuple[str, str]] | None = None,
        data: bytes | BinaryIO | None = b"",
        https: bool = False,
        remote_addr: tuple[str, int] | None = None,
    ) -> None:
        self.method = method
        self.raw_url = url
        self.headers: tuple[tuple[str, str], ...] = tuple(
            (str(k), str(v)) for k, v in (headers or ())
        )
        self._https = https
        self.remote_addr = remote_addr
        if isinstance(data, _BodySlot):
            self._body = data
        elif isinstance(data, (bytes, bytearray, memoryview)):
            self._body = _BodySlot(io.BytesIO(bytes(data)))
        else:
            self._body = _BodySlot(data)

    @classmethod
    def fake_http(cls, method, url, headers=None, data=b""):
        """Build a fake HTTP request from ``127.0.0.1:12345``."""
        return cls(method, url, headers, data, False, _DEFAULT_REMOTE_ADDR)

    @classmethod
    def fake_http_from(cls, from_addr, method, url, headers=None, data=b""):
        """Build a fake HTTP request from the given client address."""
        return cls(method, url, headers, data, False, tuple(from_addr))

    @classmethod
    def fake_https(cls, method, url, headers=None, data=b""):
        """Build a fake HTTPS request from ``127.0.0.1:12345``."""
        return cls(method, url, headers, data, True, _DEFAULT_REMOTE_ADDR)

    @classmethod
    def fake_https_from(cls, from_addr, method, url, headers=None, data=b""):
        """Build a fake HTTPS request from the given client address."""
        return cls(method, url, headers, data, True, tuple(from_addr))

    def __repr__(self) -> str:
        return (
            f"Request(method={self.method!r}, url={self.raw_url!r}, "
            f"headers={list(self.headers)!r}, https={self._https!r}, "
            f"remote_addr={self.remote_addr!r})"
        )

    def remove_prefix(self, prefix: str) -> Request | None:
        """Return a copy without ``prefix`` if the decoded URL starts with it, else None.

        The body is shared with the original request.
        """
        if not self.url().startswith(prefix):
            return None
        if not self.raw_url.startswith(prefix):
            raise ValueError(
                "url-encoded characters in the prefix are not supported"
            )
        return Request(
            self.method,
            self.raw_url[len(prefix):],
            self.headers,
            self._body,
            self._https,
            self.remote_addr,
        )

    def is_secure(self) -> bool:
        """True if the request came over HTTPS."""
        return self._https

    def raw_query_string(self) -> str:
        """Everything after the first ``?`` of the raw URL, or an empty string."""
        _, sep, query = self.raw_url.partition("?")
        return query if sep else ""

    def url(self) -> str:
        """The percent-decoded path, without the query string."""
        path = self.raw_url.partition("?")[0]
        return _percent_decode_lossy(path)

    def get_param(self, param_name: str) -> str | None:
        """The decoded value of a query parameter, or None if it is absent."""
        name_pattern = f"{param_name}="
        for pair in self.raw_query_string().split("&"):
            if pair.startswith(name_pattern) or pair == param_name:
                parts = pair.split("=")
                value = parts[1] if len(parts) > 1 else ""
                return _percent_decode_lossy(value.replace("+", " "))
        return None

    def header(self, key: str) -> str | None:
        """The value of the first header named ``key``, ignoring ASCII case."""
        wanted = _ascii_lower(key)
        return next(
            (v for k, v in self.headers if _ascii_lower(k) == wanted), None
        )

    def do_not_track(self) -> bool | None:
        """State of the ``DNT`` header: True for 1, False for 0, None otherwise."""
        return {"1": True, "0": False}.get(self.header("DNT"))

    def data(self) -> BinaryIO | None:
        """The body as a binary reader; None if it was already taken."""
        return self._body.take()