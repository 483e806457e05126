import pytest

from bras_collector.http_session import (
    HttpMethod,
    HttpReqState,
    HttpRequest,
    HttpRspState,
    HttpSession,
    parse_method,
)

REQUEST = (
    b"POST /report/onu HTTP/1.1\r\n"
    b"Host: probe.example.com\r\n"
    b"User-Agent: TestAgent/1.0\r\n"
    b"Content-Type: application/json; charset=utf-8\r\n"
    b"Content-Length: 13\r\n"
    b"\r\n"
    b'{"a": "body"}'
)

RESPONSE = (
    b"HTTP/1.1 404 Not Found\r\n"
    b"Content-Type: text/html ; charset=utf-8\r\n"
    b"\r\n"
    b"<html></html>"
)


@pytest.mark.parametrize(
    "token,expected",
    [
        (b"GET", HttpMethod.GET),
        (b"POST", HttpMethod.POST),
        (b"HEAD", HttpMethod.HEAD),
        (b"PUT", HttpMethod.PUT),
        (b"DELETE", HttpMethod.DELETE),
        (b"OPTIONS", HttpMethod.OPTIONS),
        (b"CONNECT", HttpMethod.CONNECT),
        ("GET", HttpMethod.GET),
        (b"get", HttpMethod.UNKNOWN),
        (b"TRACE", HttpMethod.UNKNOWN),
    ],
)
def test_parse_method(token, expected):
    assert parse_method(token) is expected


def test_full_request_in_one_packet():
    s = HttpSession()
    s.on_upstream_data(REQUEST, 1000)
    r = s.req
    assert r.method is HttpMethod.POST
    assert r.url == "/report/onu"
    assert r.host == "probe.example.com"
    assert r.user_agent == "TestAgent/1.0"
    assert r.content_type == "application/json"
    assert r.content_length == 13
    assert r.header_done
    assert r.state is HttpReqState.BODY
    assert bytes(r.body) == b'{"a": "body"}'
    assert r.body_len == 13
    assert s.req_ts_us == 1000


@pytest.mark.parametrize("chunk", [1, 3, 7, 20])
def test_request_split_across_packets(chunk):
    whole = HttpSession()
    whole.on_upstream_data(REQUEST, 5)
    head = REQUEST[: REQUEST.index(b"\r\n\r\n") + 4]
    split = HttpSession()
    for i in range(0, len(head), chunk):
        split.on_upstream_data(head[i : i + chunk], 5)
    assert split.req.host == whole.req.host
    assert split.req.url == whole.req.url
    assert split.req.content_type == whole.req.content_type
    assert split.req.header_done


def test_body_in_later_packets_is_appended():
    s = HttpSession()
    s.on_upstream_data(b"POST /x HTTP/1.1\r\nHost: h\r\n\r\npart1", 1)
    s.on_upstream_data(b"-part2", 2)
    assert bytes(s.req.body) == b"part1-part2"
    assert s.req_ts_us == 1


def test_body_is_capped():
    s = HttpSession()
    s.on_upstream_data(b"POST / HTTP/1.1\r\n\r\n", 1)
    s.on_upstream_data(b"x" * (HttpRequest.MAX_BODY + 100), 2)
    s.on_upstream_data(b"yyy", 3)
    assert s.req.body_len == HttpRequest.MAX_BODY
    assert set(bytes(s.req.body)) == {ord("x")}


def test_headers_are_case_insensitive():
    s = HttpSession()
    s.on_upstream_data(b"GET /a HTTP/1.1\r\nHOST:\t  example.com\r\n\r\n", 1)
    assert s.req.host == "example.com"
    assert s.req.method is HttpMethod.GET


def test_url_truncated():
    s = HttpSession()
    long_url = b"/" + b"u" * 2000
    s.on_upstream_data(b"GET " + long_url + b" HTTP/1.1\r\n", 1)
    assert len(s.req.url) == 767
    assert long_url.decode().startswith(s.req.url)


def test_request_line_without_space_leaves_method_unknown():
    s = HttpSession()
    s.on_upstream_data(b"GARBAGE\r\nHost: h\r\n", 1)
    assert s.req.method is HttpMethod.UNKNOWN
    assert s.req.host == "h"
    assert s.req.state is HttpReqState.HEADERS


def test_leading_empty_lines_skipped():
    s = HttpSession()
    s.on_upstream_data(b"\r\n\r\nGET /p HTTP/1.1\r\n", 1)
    assert s.req.url == "/p"


def test_response_parsing_and_interval():
    s = HttpSession()
    s.on_upstream_data(b"GET / HTTP/1.1\r\n", 1_000_000)
    s.on_downstream_data(RESPONSE, 1_250_000)
    assert s.rsp.status_code == 404
    assert s.rsp.content_type == "text/html"
    assert s.rsp.header_done
    assert s.rsp.state is HttpRspState.BODY
    assert s.response_interval_ms == 250


def test_response_interval_zero_without_request():
    s = HttpSession()
    s.on_downstream_data(RESPONSE, 500_000)
    assert s.response_interval_ms == 0
    assert s.rsp_ts_us == 500_000


def test_response_after_headers_ignored():
    s = HttpSession()
    s.on_downstream_data(b"HTTP/1.1 200 OK\r\n\r\n", 1)
    s.on_downstream_data(b"HTTP/1.1 500 Err\r\n", 2)
    assert s.rsp.status_code == 200
    assert s.rsp_ts_us == 1


def test_short_status_line_ignored():
    s = HttpSession()
    s.on_downstream_data(b"HTTP/1.1 20\r\n", 1)
    assert s.rsp.status_code == 0
    assert s.rsp.state is HttpRspState.HEADERS


def test_empty_data_is_ignored():
    s = HttpSession()
    s.on_upstream_data(b"", 7)
    s.on_downstream_data(b"", 8)
    assert s.req_ts_us == 0
    assert s.rsp_ts_us == 0


def test_long_line_truncated_in_buffer():
    s = HttpSession()
    s.on_upstream_data(b"GET /" + b"a" * 5000, 1)
    assert len(s.req.line_buf) == HttpRequest.LINE_BUF_SIZE - 1


def test_reset_clears_everything():
    s = HttpSession()
    s.on_upstream_data(REQUEST, 10)
    s.on_downstream_data(RESPONSE, 20)
    s.reset()
    assert s.req == HttpRequest()
    assert s.rsp.status_code == 0
    assert s.rsp.header_done is False
    assert (s.req_ts_us, s.rsp_ts_us, s.response_interval_ms) == (0, 0, 0)
    s.on_upstream_data(b"PUT /z HTTP/1.1\r\n", 3)
    assert s.req.method is HttpMethod.PUT