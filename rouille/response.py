"""The response that a handler returns."""

from __future__ import annotations

import json as _json
from dataclasses import dataclass, field, replace
from typing import Any, BinaryIO

from rouille.body import ResponseBody
from rouille.request import Request

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

# Bytes that are percent-encoded on top of controls and non-ASCII bytes.
_EXTRA_ENCODED = frozenset(b' "#<>`?{}')


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def percent_encode(text: str) -> str:
    """Percent-encode the UTF-8 bytes of ``text`` that may not appear as-is in a URL."""
    return "".join(
        chr(byte)
        if 0x20 <= byte < 0x7F and byte not in _EXTRA_ENCODED
        else f"%{byte:02X}"
        for byte in text.encode("utf-8")
    )


def _check_max_age(max_age_seconds: int) -> int:
    if max_age_seconds < 0:
        raise ValueError("max age must not be negative")
    return max_age_seconds


@dataclass
class Response:
    """A response to send back to the client.

    Headers such as ``Content-Length`` are managed by the server and ignored here.
    ``upgrade``, when set, takes ownership of the client socket once the
    response has been sent.
    """

    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    data: ResponseBody = field(default_factory=ResponseBody.empty, compare=False)
    upgrade: Any = field(default=None, compare=False)

    def is_success(self) -> bool:
        """True if the status code lies in 200..399."""
        return 200 <= self.status_code < 400

    def is_error(self) -> bool:
        """True if the status code does not indicate success."""
        return not self.is_success()

    @classmethod
    def _redirect(cls, code: int, target: str) -> Response:
        return cls(code, [("Location", target)])

    @classmethod
    def redirect_301(cls, target: str) -> Response:
        """A permanent redirect."""
        return cls._redirect(301, target)

    @classmethod
    def redirect_302(cls, target: str) -> Response:
        """A temporary redirect."""
        return cls._redirect(302, target)

    @classmethod
    def redirect_303(cls, target: str) -> Response:
        """A "See Other" redirect; the safest choice when unsure."""
        return cls._redirect(303, target)

    @classmethod
    def redirect_307(cls, target: str) -> Response:
        """A redirect that keeps the request method."""
        return cls._redirect(307, target)

    @classmethod
    def redirect_308(cls, target: str) -> Response:
        """A permanent redirect that keeps the request method."""
        return cls._redirect(308, target)

    @classmethod
    def from_data(cls, content_type: str, data: bytes | str) -> Response:
        """A 200 response holding the given data."""
        return cls(200, [("Content-Type", content_type)], ResponseBody.from_data(data))

    @classmethod
    def from_file(cls, content_type: str, file: BinaryIO) -> Response:
        """A 200 response holding the content of an open binary file."""
        return cls(200, [("Content-Type", content_type)], ResponseBody.from_file(file))

    @classmethod
    def html(cls, content: str) -> Response:
        """A 200 response holding HTML."""
        return cls(
            200,
            [("Content-Type", "text/html; charset=utf-8")],
            ResponseBody.from_string(content),
        )

    @classmethod
    def svg(cls, content: str) -> Response:
        """A 200 response holding SVG."""
        return cls(
            200,
            [("Content-Type", "image/svg+xml; charset=utf-8")],
            ResponseBody.from_string(content),
        )

    @classmethod
    def text(cls, text: str) -> Response:
        """A 200 response holding plain text."""
        return cls(
            200,
            [("Content-Type", "text/plain; charset=utf-8")],
            ResponseBody.from_string(text),
        )

    @classmethod
    def json(cls, content: Any) -> Response:
        """A 200 response holding ``content`` serialized as compact JSON."""
        payload = _json.dumps(content, separators=(",", ":"), ensure_ascii=False)
        return cls(
            200,
            [("Content-Type", "application/json; charset=utf-8")],
            ResponseBody.from_data(payload),
        )

    @classmethod
    def basic_http_auth_login_required(cls, realm: str) -> Response:
        """A 401 response asking for basic HTTP authentication."""
        return cls(401, [("WWW-Authenticate", f'Basic realm="{realm}"')])

    @classmethod
    def empty_204(cls) -> Response:
        """An empty 204 response."""
        return cls(204)

    @classmethod
    def empty_400(cls) -> Response:
        """An empty 400 response."""
        return cls(400)

    @classmethod
    def empty_404(cls) -> Response:
        """An empty 404 response."""
        return cls(404)

    @classmethod
    def empty_406(cls) -> Response:
        """An empty 406 response."""
        return cls(406)

    def with_status_code(self, code: int) -> Response:
        """A copy with another status code."""
        return replace(self, status_code=code)

    def without_header(self, header: str) -> Response:
        """A copy without any header named ``header``, ignoring ASCII case."""
        wanted = _ascii_lower(header)
        return replace(
            self,
            headers=[(k, v) for k, v in self.headers if _ascii_lower(k) != wanted],
        )

    def with_additional_header(self, header: str, value: str) -> Response:
        """A copy with one more header."""
        return replace(self, headers=[*self.headers, (header, value)])

    def with_unique_header(self, header: str, value: str) -> Response:
        """A copy where ``header`` appears once, with ``value``.

        The first existing header of that name keeps its place and spelling;
        the others are removed. If there was none, the header is appended.
        """
        wanted = _ascii_lower(header)
        headers: list[tuple[str, str]] = []
        found = False
        for name, old_value in self.headers:
            if _ascii_lower(name) != wanted:
                headers.append((name, old_value))
            elif not found:
                found = True
                headers.append((name, value))
        if not found:
            headers.append((header, value))
        return replace(self, headers=headers)

    def with_etag(self, request: Request, etag: str) -> Response:
        """Set the ETag, then turn into an empty 304 if the request's ``If-None-Match`` matches."""
        return self.with_etag_keep(etag).simplify_if_etag_match(request)

    def simplify_if_etag_match(self, request: Request) -> Response:
        """Turn a 2xx response into an empty 304 if its ETag matches ``If-None-Match``."""
        if not 200 <= self.status_code < 300:
            return self
        if_none_match = request.header("If-None-Match")
        not_modified = False
        for key, etag in self.headers:
            if _ascii_lower(key) == "etag":
                not_modified = if_none_match is not None and if_none_match == etag
        if not_modified:
            return replace(self, status_code=304, data=ResponseBody.empty())
        return self

    def with_etag_keep(self, etag: str) -> Response:
        """A copy with the ETag header added or replaced."""
        return self.with_unique_header("ETag", etag)

    def with_content_disposition_attachment(self, filename: str) -> Response:
        """A copy that makes the browser download the body as ``filename``."""
        value = f"attachment; filename*=UTF8''{percent_encode(filename)}"
        headers = list(self.headers)
        for position, (key, _) in enumerate(headers):
            if _ascii_lower(key) == "content-disposition":
                headers[position] = (key, value)
                return replace(self, headers=headers)
        headers.append(("Content-Disposition", value))
        return replace(self, headers=headers)

    def with_public_cache(self, max_age_seconds: int) -> Response:
        """A copy that allows anyone to cache it for the given number of seconds."""
        max_age = _check_max_age(max_age_seconds)
        return (
            self.with_unique_header("Cache-Control", f"public, max-age={max_age}")
            .without_header("Expires")
            .without_header("Pragma")
        )

    def with_private_cache(self, max_age_seconds: int) -> Response:
        """A copy that allows only the final client to cache it for the given seconds."""
        max_age = _check_max_age(max_age_seconds)
        return (
            self.with_unique_header("Cache-Control", f"private, max-age={max_age}")
            .without_header("Expires")
            .without_header("Pragma")
        )

    def with_no_cache(self) -> Response:
        """A copy that forbids clients from caching it."""
        return (
            self.with_unique_header("Cache-Control", "no-cache, no-store, must-revalidate")
            .with_unique_header("Expires", "0")
            .with_unique_header("Pragma", "no-cache")
        )