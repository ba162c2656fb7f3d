import io

import pytest

from rouille.request import Request


def test_header():
    request = Request.fake_http("GET", "/", [("Host", "localhost")], b"")
    assert request.header("Host") == "localhost"
    assert request.header("host") == "localhost"


def test_header_missing():
    request = Request.fake_http("GET", "/", [("Host", "localhost")], b"")
    assert request.header("Accept") is None


def test_get_param():
    request = Request.fake_http("GET", "/?p=hello", [], b"")
    assert request.get_param("p") == "hello"


def test_get_param_multiple_param():
    request = Request.fake_http("GET", "/?foo=bar&message=hello", [], b"")
    assert request.get_param("message") == "hello"


def test_get_param_no_match():
    request = Request.fake_http("GET", "/?hello=world", [], b"")
    assert request.get_param("foo") is None


def test_get_param_partial_suffix_match():
    request = Request.fake_http("GET", "/?hello=world", [], b"")
    assert request.get_param("lo") is None


def test_get_param_partial_prefix_match():
    request = Request.fake_http("GET", "/?hello=world", [], b"")
    assert request.get_param("he") is None


def test_get_param_superstring_match():
    request = Request.fake_http("GET", "/?jan=01", [], b"")
    assert request.get_param("january") is None


def test_get_param_flag_with_equals():
    request = Request.fake_http("GET", "/?flag=", [], b"")
    assert request.get_param("flag") == ""


def test_get_param_flag_without_equals():
    request = Request.fake_http("GET", "/?flag", [], b"")
    assert request.get_param("flag") == ""


def test_get_param_flag_with_multiple_params():
    request = Request.fake_http("GET", "/?flag&foo=bar", [], b"")
    assert request.get_param("flag") == ""


def test_body_twice():
    request = Request.fake_http("GET", "/", [], bytes([62, 62, 62]))
    body = request.data()
    assert body.read() == b">>>"
    assert request.data() is None


def test_body_from_reader():
    request = Request("POST", "/", [], io.BytesIO(b"abc"), False, None)
    assert request.data().read() == b"abc"


def test_url_strips_get_query():
    request = Request.fake_http("GET", "/?p=hello", [], b"")
    assert request.url() == "/"


def test_urlencode_query_string():
    request = Request.fake_http("GET", "/?p=hello%20world", [], b"")
    assert request.get_param("p") == "hello world"


def test_plus_in_query_string():
    request = Request.fake_http("GET", "/?p=hello+world", [], b"")
    assert request.get_param("p") == "hello world"


def test_encoded_plus_in_query_string():
    request = Request.fake_http("GET", "/?p=hello%2Bworld", [], b"")
    assert request.get_param("p") == "hello+world"


def test_url_encode():
    request = Request.fake_http("GET", "/hello%20world", [], b"")
    assert request.url() == "/hello world"


def test_plus_in_url():
    request = Request.fake_http("GET", "/hello+world", [], b"")
    assert request.url() == "/hello+world"


def test_url_invalid_utf8_is_replaced():
    request = Request.fake_http("GET", "/a%FFb", [], b"")
    assert request.url() == "/a\ufffdb"


@pytest.mark.parametrize(
    "headers, expected",
    [
        ([("DNT", "1")], True),
        ([("DNT", "0")], False),
        ([], None),
        ([("DNT", "malformed")], None),
    ],
)
def test_dnt(headers, expected):
    request = Request.fake_http("GET", "/", headers, b"")
    assert request.do_not_track() is expected


def test_raw_url_and_query_string():
    request = Request.fake_http("GET", "/hello%20world?foo=bar", [], b"")
    assert request.raw_url == "/hello%20world?foo=bar"
    assert request.raw_query_string() == "foo=bar"


def test_raw_query_string_empty_without_question_mark():
    request = Request.fake_http("GET", "/hello", [], b"")
    assert request.raw_query_string() == ""


def test_fake_http_defaults():
    request = Request.fake_http("GET", "/", [], b"")
    assert request.is_secure() is False
    assert request.remote_addr == ("127.0.0.1", 12345)
    assert request.method == "GET"


def test_fake_https():
    request = Request.fake_https("POST", "/", [], b"")
    assert request.is_secure() is True
    assert request.method == "POST"


def test_fake_from_addresses():
    http = Request.fake_http_from(("10.0.0.1", 8080), "GET", "/", [], b"")
    https = Request.fake_https_from(("10.0.0.2", 443), "GET", "/", [], b"")
    assert http.remote_addr == ("10.0.0.1", 8080)
    assert not http.is_secure()
    assert https.remote_addr == ("10.0.0.2", 443)
    assert https.is_secure()


def test_remove_prefix():
    request = Request.fake_http("GET", "/static/file.css?v=1", [("Host", "x")], b"")
    stripped = request.remove_prefix("/static")
    assert stripped.raw_url == "/file.css?v=1"
    assert stripped.url() == "/file.css"
    assert stripped.header("Host") == "x"
    assert stripped.method == "GET"


def test_remove_prefix_no_match():
    request = Request.fake_http("GET", "/other", [], b"")
    assert request.remove_prefix("/static") is None


def test_remove_prefix_shares_body():
    request = Request.fake_http("GET", "/static/a", [], b"body")
    stripped = request.remove_prefix("/static")
    assert stripped.data().read() == b"body"
    assert request.data() is None


def test_remove_prefix_with_encoded_chars_raises():
    request = Request.fake_http("GET", "/a%20b/c", [], b"")
    with pytest.raises(ValueError):
        request.remove_prefix("/a b")


def test_headers_listing():
    request = Request.fake_http("GET", "/", [("A", "1"), ("B", "2")], b"")
    assert list(request.headers) == [("A", "1"), ("B", "2")]


def test_repr_mentions_method_and_url():
    request = Request.fake_http("GET", "/x", [], b"")
    text = repr(request)
    assert "'GET'" in text
    assert "'/x'" in text