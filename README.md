# rouille

Building blocks for HTTP handlers: a handler is a function that takes a
`Request` and returns a `Response`. The package provides those two objects,
a router, session identifiers, JSON error bodies, a client that forwards a
request to another HTTP server, and an incremental parser for websocket
frames sent by clients.

It has no dependencies outside the standard library.

## Install

```
pip install .
```

Tests run with:

```
pip install ".[test]"
pytest
```

## Requests (`rouille.request`)

`Request(method, url, headers, data, https, remote_addr)` holds one request.
For tests, build one with `Request.fake_http(method, url, headers, data)` or
`Request.fake_https(...)`; both set the client address to
`("127.0.0.1", 12345)`. `fake_http_from(from_addr, ...)` and
`fake_https_from(from_addr, ...)` take the address explicitly.

```python
from rouille.request import Request

request = Request.fake_http("GET", "/hello%20world?p=a+b", [("DNT", "1")], b"body")
request.raw_url               # "/hello%20world?p=a+b"
request.url()                 # "/hello world"
request.raw_query_string()    # "p=a+b"
request.get_param("p")        # "a b"
request.header("dnt")         # "1" (names compare ignoring ASCII case)
request.do_not_track()        # True
request.data().read()         # b"body"
request.data()                # None: the body can be taken only once
```

Other members: `method`, `headers` (a tuple of name/value pairs),
`remote_addr`, `is_secure()`, and `remove_prefix(prefix)`, which returns a
copy of the request with the prefix cut from its URL (sharing the same body),
or `None` if the decoded URL does not start with it.

## Responses (`rouille.response`, `rouille.body`)

`Response` is a dataclass with `status_code`, `headers` (a list of pairs),
`data` (a `ResponseBody`) and `upgrade`. Constructors:

- `text`, `html`, `svg`, `json` (compact JSON), `from_data(content_type, data)`,
  `from_file(content_type, file)`
- `redirect_301`, `redirect_302`, `redirect_303`, `redirect_307`, `redirect_308`
- `empty_204`, `empty_400`, `empty_404`, `empty_406`
- `basic_http_auth_login_required(realm)`

Each `with_*` method returns a new response: `with_status_code`,
`without_header`, `with_additional_header`, `with_unique_header`,
`with_etag(request, etag)` (becomes an empty 304 when `If-None-Match`
matches), `with_etag_keep`, `simplify_if_etag_match`,
`with_content_disposition_attachment(filename)`, `with_public_cache(seconds)`,
`with_private_cache(seconds)` and `with_no_cache()`. `is_success()` is true
for 200–399, `is_error()` otherwise. `percent_encode(text)` is the encoding
used for attachment file names.

```python
from rouille.response import Response

response = Response.text("hello").with_public_cache(3600)
reader, length = response.data.into_reader_and_size()
reader.read()   # b"hello"
length          # 5
```

`ResponseBody` can be built with `empty()`, `from_data`, `from_string`,
`from_file`, `from_reader` (unknown length) or `from_reader_and_size`;
`with_chunked_threshold(n)` returns a copy carrying a chunked threshold.

## Routing (`rouille.router`)

```python
from rouille.request import Request
from rouille.response import Response
from rouille.router import Router

router = Router()

@router.route("GET", "/add/{a}/plus/{b}", a=int, b=int)
def add(request, a, b):
    return Response.text(str(a + b))

def handle(request):
    return router.dispatch(request, lambda request: Response.empty_404())

handle(Request.fake_http("GET", "/add/2/plus/3")).status_code   # 200
```

Routes are tried in the order they were added; the query string is ignored.
A route without parameters must equal the raw path exactly. With parameters,
each path segment is percent-decoded and each `{name}` segment is parsed by
the function given for it; if that raises `ValueError` or `TypeError` the
route is skipped. A pattern and parameter list that disagree raise
`RouteDefinitionError`. `match_pattern(url, pattern, params)` exposes the
matching on its own.

## Sessions (`rouille.session`)

`generate_session_id()` returns 64 random ASCII letters and digits.
`Session(key, key_was_given)` wraps an identifier: `id()` returns it and
marks it as retrieved, `was_retrieved()` tells whether that happened, and
`client_has_sid()` whether the client sent it. Reading the identifier from a
cookie and writing the `Set-Cookie` header is left to the caller.

## Error bodies (`rouille.errjson`)

`error_400(err)` returns a 400 response whose JSON body is
`{"description": ..., "cause": ...}`, following the exception's
`__cause__`/`__context__` chain. `ErrJson.from_err(err)` and `to_dict()` give
the same structure directly; `error_404()` returns an empty 404.

## Forwarding (`rouille.proxy`)

`proxy(request, ProxyConfig(addr, replace_host=None))` sends the request to
`addr` (`"host:port"` or a `(host, port)` pair) over plain TCP with
`Connection: close`, and returns once the headers are received; the
response body reads from the connection. It raises `ProxyIoError`,
`HttpParseError` or `BodyAlreadyExtractedError`, all subclasses of
`ProxyError`. `full_proxy` turns the first two into 504 and 502 responses.

## Websocket frames (`rouille.websocket.low_level`)

```python
from rouille.websocket.low_level import StateMachine

machine = StateMachine()
start, data = machine.feed(bytes([0x81, 0x85, 0x37, 0xFA, 0x21, 0x3D,
                                  0x7F, 0x9F, 0x4D, 0x51, 0x58]))
start        # FrameStart(fin=True, length=5, opcode=1)
data.decode()  # b"Hello"
```

`feed` may be called with data split at any point; it yields `FrameStart`,
`Data` (masked payload pieces, with `last_in_frame`) and `FrameError`.

## What the package does not do

It does not listen on a socket or serve requests: there is no server, no
thread pool and no command to run. Connecting handlers to incoming HTTP
traffic is up to the program that uses it. There is no request-logging
helper, no handling of cookie-backed sessions beyond the `Session` object,
and no websocket connection object — only the frame parser.