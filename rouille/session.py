"""Session identifiers."""

from __future__ import annotations

import secrets
import string

_SESSION_ID_ALPHABET = string.ascii_letters + string.digits
_SESSION_ID_LENGTH = 64


class Session:
    """The identifier of a client's session."""

    def __init__(self, key: str, key_was_given: bool) -> None:
        self._key = key
        self._key_was_given = key_was_given
        self._key_was_retrieved = False

    def __repr__(self) -> str:
        return f"Session(client_has_sid={self._key_was_given!r})"

    def client_has_sid(self) -> bool:
        """True if the client sent a session identifier."""
        return self._key_was_given

    def id(self) -> str:
        """The identifier of the session; asking for it marks it as retrieved."""
        self._key_was_retrieved = True
        return self._key

    def was_retrieved(self) -> bool:
        """True once ``id()`` has been called."""
        return self._key_was_retrieved


def generate_session_id() -> str:
    """A random string of ASCII letters and digits, safe to use unescaped."""
    return "".join(
        secrets.choice(_SESSION_ID_ALPHABET) for _ in range(_SESSION_ID_LENGTH)
    )