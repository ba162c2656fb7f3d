"""Dispatching a request to another HTTP server, as a reverse proxy does."""

from __future__ import annotations

import re
import socket
from dataclasses import dataclass
from typing import Any, BinaryIO, Union

from rouille.body import ResponseBody
from rouille.request import Request
from rouille.response import Response

Address = Union[str, "tuple[str, int]"]

_TIMEOUT = 60.0
_COPY_SIZE = 65536
_STATUS = re.compile(r"\+?[0-9]+")


class ProxyError(Exception):
    """The request could not be dispatched to the other server."""


class BodyAlreadyExtractedError(ProxyError):
    """The body of the request was taken before the call, so it cannot be passed on."""

    def __init__(self) -> None:
        super().__init__("the body of the request was already extracted")


class ProxyIoError(ProxyError):
    """Reading the body, connecting, or talking to the other server failed."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(
            "could not read the body from the request, or could not connect to the "
            "remote server, or the connection to the remote server closed unexpectedly"
        )
        self.error = error


class HttpParseError(ProxyError):
    """The other server did not answer with valid HTTP."""

    def __init__(self) -> None:
        super().__init__("the destination server didn't produce compliant HTTP")


@dataclass(frozen=True)
class ProxyConfig:
    """Where to send the request.

    ``addr`` is ``"host:port"`` or a ``(host, port)`` pair; when ``replace_host``
    is set it replaces the value of the ``Host`` header.
    """

    addr: Address
    replace_host: str | None = None


def _parse_addr(addr: Address) -> tuple[str, int]:
    if isinstance(addr, str):
        host, sep, port_text = addr.rpartition(":")
        if not sep:
            raise OSError(f"invalid socket address {addr!r}")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        port: Any = port_text
    else:
        try:
            host, port = addr
        except (TypeError, ValueError):
            raise OSError(f"invalid socket address {addr!r}") from None
    try:
        port_number = int(port)
    except (TypeError, ValueError):
        raise OSError(f"invalid port in socket address {addr!r}") from None
    if not 0 <= port_number <= 65535:
        raise OSError(f"invalid port in socket address {addr!r}")
    return str(host), port_number


def _read_line(rfile: BinaryIO) -> str | None:
    raw = rfile.readline()
    if not raw:
        return None
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise OSError("stream did not contain valid UTF-8") from exc


def _read_head(rfile: BinaryIO) -> tuple[int, list[tuple[str, str]]]:
    status_line = _read_line(rfile)
    if status_line is None:
        raise HttpParseError()
    parts = status_line.split(" ", 2)
    if len(parts) < 2 or not _STATUS.fullmatch(parts[1]):
        raise HttpParseError()
    status_code = int(parts[1])
    if status_code > 0xFFFF:
        raise HttpParseError()

    headers: list[tuple[str, str]] = []
    while (line := _read_line(rfile)) is not None and line:
        name, sep, value = line.partition(":")
        if not sep:
            raise HttpParseError()
        headers.append((name, value[1:]))
    return status_code, headers


def _send_request(sock: socket.socket, request: Request, config: ProxyConfig) -> None:
    body = request.data()
    if body is None:
        raise BodyAlreadyExtractedError()

    head = [f"{request.method} {request.raw_url} HTTP/1.1\r\n"]
    for name, value in request.headers:
        if name == "Host" and config.replace_host is not None:
            value = config.replace_host
        if name == "Connection":
            continue
        head.append(f"{name}: {value}\r\n")
    head.append("Connection: close\r\n\r\n")
    sock.sendall("".join(head).encode("utf-8"))

    while chunk := body.read(_COPY_SIZE):
        sock.sendall(chunk)


def proxy(request: Request, config: ProxyConfig) -> Response:
    """Send ``request`` to the server of ``config`` and return its response.

    Returns once the other server has sent its headers; the body of the
    returned response reads from the connection. SSL is not supported.

    Raises BodyAlreadyExtractedError, ProxyIoError or HttpParseError.
    """
    try:
        sock = socket.create_connection(_parse_addr(config.addr), timeout=_TIMEOUT)
    except OSError as exc:
        raise ProxyIoError(exc) from exc

    rfile: BinaryIO | None = None
    try:
        _send_request(sock, request, config)
        rfile = sock.makefile("rb")
        status_code, headers = _read_head(rfile)
    except BaseException as exc:
        if rfile is not None:
            rfile.close()
        sock.close()
        if isinstance(exc, OSError):
            raise ProxyIoError(exc) from exc
        raise
    # The file object keeps the connection open until it is closed itself.
    sock.close()
    return Response(status_code, headers, ResponseBody.from_reader(rfile), None)


def full_proxy(request: Request, config: ProxyConfig) -> Response:
    """Like ``proxy``, but failures of the other server become 504 or 502 responses.

    Only BodyAlreadyExtractedError is still raised.
    """
    try:
        return proxy(request, config)
    except ProxyIoError:
        return Response.text("Gateway Time-out").with_status_code(504)
    except HttpParseError:
        return Response.text("Bad Gateway").with_status_code(502)