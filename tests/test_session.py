import string

from rouille.session import Session, generate_session_id


def test_generate_session_id():
    assert len(generate_session_id()) >= 32


def test_generate_session_id_is_alphanumeric_ascii():
    allowed = set(string.ascii_letters + string.digits)
    session_id = generate_session_id()
    assert set(session_id) <= allowed


def test_generate_session_id_is_random():
    ids = {generate_session_id() for _ in range(20)}
    assert len(ids) == 20


def test_client_has_sid_when_given():
    assert Session("abc", True).client_has_sid() is True


def test_client_has_no_sid_when_generated():
    assert Session("abc", False).client_has_sid() is False


def test_id_returns_key():
    assert Session("abc123", True).id() == "abc123"


def test_id_marks_retrieved():
    session = Session("abc123", False)
    assert session.was_retrieved() is False
    session.id()
    assert session.was_retrieved() is True


def test_client_has_sid_does_not_mark_retrieved():
    session = Session("abc123", True)
    session.client_has_sid()
    assert session.was_retrieved() is False