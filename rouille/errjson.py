"""JSON descriptions of errors for 400 responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rouille.response import Response


def _source_of(err: BaseException) -> BaseException | None:
    if err.__cause__ is not None:
        return err.__cause__
    if err.__context__ is not None and not err.__suppress_context__:
        return err.__context__
    return None


@dataclass(frozen=True)
class ErrJson:
    """An error's description and, recursively, that of its cause."""

    description: str
    cause: ErrJson | None = None

    @classmethod
    def from_err(cls, err: BaseException) -> ErrJson:
        """Describe ``err`` and the chain of exceptions that caused it."""
        source = _source_of(err)
        return cls(str(err), cls.from_err(source) if source is not None else None)

    def to_dict(self) -> dict[str, Any]:
        """A JSON-ready dictionary of this description."""
        return {
            "description": self.description,
            "cause": self.cause.to_dict() if self.cause is not None else None,
        }


def error_400(err: BaseException) -> Response:
    """A 400 response whose JSON body describes ``err``."""
    return Response.json(ErrJson.from_err(err).to_dict()).with_status_code(400)


def error_404() -> Response:
    """An empty 404 response."""
    return Response.empty_404()