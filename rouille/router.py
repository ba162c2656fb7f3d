"""Dispatching requests to handlers by method and URL pattern."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping
from urllib.parse import unquote_to_bytes

from rouille.request import Request

Converter = Callable[[str], Any]
Handler = Callable[..., Any]


class RouteDefinitionError(Exception):
    """A route's pattern and its declared parameters do not agree."""


def _decode_segment(segment: str) -> str:
    return unquote_to_bytes(segment).decode("utf-8", errors="replace")


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _placeholder(segment: str) -> str | None:
    if len(segment) >= 2 and segment.startswith("{") and segment.endswith("}"):
        return segment[1:-1]
    return None


def match_pattern(
    url: str, pattern: str, params: Mapping[str, Converter]
) -> dict[str, Any] | None:
    """Match a raw URL path against ``pattern``; return the parsed parameters or None.

    Without declared parameters the raw path must equal the pattern exactly.
    With parameters, the path is split on ``/``, each segment is percent-decoded,
    and each ``{name}`` segment of the pattern is parsed with ``params[name]``.
    A segment that fails to parse makes the route not match.

    Raises RouteDefinitionError when the pattern names a parameter that is not
    declared, or a declared parameter has no segment in the pattern.
    """
    if not params:
        return {} if url == pattern else None

    actual_segments = [_decode_segment(part) for part in url.split("/")]
    desired_segments = pattern.split("/")
    if len(actual_segments) != len(desired_segments):
        return None

    values: dict[str, Any] = {}
    for actual, desired in zip(actual_segments, desired_segments):
        key = _placeholder(desired)
        if key is None:
            if actual != desired:
                return None
            continue
        converter = params.get(key)
        if converter is None:
            raise RouteDefinitionError(
                f"Unable to match url parameter name, `{key}`, to an "
                f"`identity: type` pair in url: {_quoted(url)}"
            )
        try:
            values[key] = converter(actual)
        except (ValueError, TypeError):
            return None

    for name in params:
        if name not in values:
            raise RouteDefinitionError(
                f"Url parameter identity, `{name}`, does not have a matching "
                f"`{{{name}}}` segment in url: {_quoted(url)}"
            )
    return values


@dataclass(frozen=True)
class _Route:
    method: str
    pattern: str
    handler: Handler
    params: dict[str, Converter]


class Router:
    """An ordered list of routes; the first one that matches handles the request."""

    def __init__(self) -> None:
        self._routes: list[_Route] = []

    def __len__(self) -> int:
        return len(self._routes)

    def add(self, method: str, pattern: str, handler: Handler, **kwargs: Converter) -> None:
        """Add a route.

        ``kwargs`` maps each ``{name}`` of the pattern to a function that parses
        the segment, such as ``int`` or ``str``. The handler is called with the
        request and the parsed parameters as keyword arguments.
        """
        if not callable(handler):
            raise TypeError("handler must be callable")
        for name, converter in kwargs.items():
            if not callable(converter):
                raise TypeError(f"converter for parameter {name!r} must be callable")
        self._routes.append(_Route(method, pattern, handler, dict(kwargs)))

    def route(self, method: str, pattern: str, **kwargs: Converter) -> Callable[[Handler], Handler]:
        """Decorator form of ``add``; returns the handler unchanged."""

        def decorator(handler: Handler) -> Handler:
            self.add(method, pattern, handler, **kwargs)
            return handler

        return decorator

    def dispatch(self, request: Request, default: Callable[[Request], Any]) -> Any:
        """Run the first matching route's handler, or ``default(request)`` if none matches.

        The query string of the request is ignored.
        """
        path = request.raw_url.partition("?")[0]
        for route in self._routes:
            if request.method != route.method:
                continue
            values = match_pattern(path, route.pattern, route.params)
            if values is not None:
                return route.handler(request, **values)
        return default(request)