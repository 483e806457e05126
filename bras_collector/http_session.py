"""Incremental HTTP/1.x request and response header parsing for one flow."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Callable


class HttpMethod(IntEnum):
    UNKNOWN = 0
    GET = 1
    POST = 2
    HEAD = 3
    PUT = 4
    DELETE = 5
    OPTIONS = 6
    CONNECT = 7


class HttpReqState(IntEnum):
    IDLE = 0
    REQUEST_LINE = 1
    HEADERS = 2
    BODY = 3
    DONE = 4


class HttpRspState(IntEnum):
    IDLE = 0
    STATUS_LINE = 1
    HEADERS = 2
    BODY = 3
    DONE = 4


_METHODS = {
    b"GET": HttpMethod.GET,
    b"PUT": HttpMethod.PUT,
    b"POST": HttpMethod.POST,
    b"HEAD": HttpMethod.HEAD,
    b"DELETE": HttpMethod.DELETE,
    b"OPTIONS": HttpMethod.OPTIONS,
    b"CONNECT": HttpMethod.CONNECT,
}

URL_MAX = 767
FIELD_MAX = 255

_STRTOUL = re.compile(rb"[ \t\n\v\f\r]*([+-]?)(\d*)")
_ULONG_MAX = (1 << 64) - 1


def parse_method(token: bytes | str) -> HttpMethod:
    """Map a request-method token (case-sensitive) to an HttpMethod."""
    if isinstance(token, str):
        word = token.encode("latin-1", "replace")
    else:
        word = bytes(token)
    return _METHODS.get(word, HttpMethod.UNKNOWN)


def _strtoul(raw: bytes, bits: int) -> int:
    """Leading unsigned integer of ``raw``, truncated to ``bits`` bits."""
    m = _STRTOUL.match(raw)
    if not m or not m.group(2):
        return 0
    n = min(int(m.group(2)), _ULONG_MAX)
    if m.group(1) == b"-":
        n = (-n) & _ULONG_MAX
    return n & ((1 << bits) - 1)


def _text(raw: bytes, limit: int) -> str:
    return raw[:limit].decode("utf-8", "replace")


def _split_header(line: bytes) -> tuple[bytes, bytes] | None:
    colon = line.find(b":")
    if colon < 0:
        return None
    return line[:colon].lower(), line[colon + 1 :].lstrip(b" \t")


def _content_type(value: bytes) -> str:
    semi = value.find(b";")
    if semi >= 0:
        value = value[:semi]
    return _text(value.rstrip(b" "), FIELD_MAX)


def _feed_lines(
    pending: bytearray,
    capacity: int,
    data: bytes,
    on_line: Callable[[bytes], None],
) -> None:
    """Split ``data`` on LF, joining with the partial line held in ``pending``.

    ``pending`` keeps at most ``capacity - 1`` bytes; longer lines are cut.
    """
    room = capacity - 1
    pos = 0
    while pos < len(data):
        lf = data.find(b"\n", pos)
        if lf < 0:
            pending += data[pos : pos + room - len(pending)]
            return
        pending += data[pos : min(lf, pos + room - len(pending))]
        if pending.endswith(b"\r"):
            del pending[-1]
        on_line(bytes(pending))
        pending.clear()
        pos = lf + 1


def _reset_fields(obj) -> None:
    fresh = type(obj)()
    for f in fields(obj):
        setattr(obj, f.name, getattr(fresh, f.name))


@dataclass
class HttpRequest:
    """Parsed request head and buffered body."""

    MAX_BODY = 65536
    LINE_BUF_SIZE = 1024

    method: HttpMethod = HttpMethod.UNKNOWN
    host: str = ""
    url: str = ""
    user_agent: str = ""
    content_type: str = ""
    body: bytearray = field(default_factory=bytearray)
    content_length: int = 0
    state: HttpReqState = HttpReqState.IDLE
    header_done: bool = False
    line_buf: bytearray = field(default_factory=bytearray)

    @property
    def body_len(self) -> int:
        return len(self.body)

    def append_body(self, chunk: bytes) -> None:
        """Append to the body, keeping it within MAX_BODY bytes."""
        self.body += chunk[: self.MAX_BODY - len(self.body)]

    def reset(self) -> None:
        _reset_fields(self)


@dataclass
class HttpResponse:
    """Parsed response status and content type."""

    LINE_BUF_SIZE = 512

    status_code: int = 0
    content_type: str = ""
    state: HttpRspState = HttpRspState.IDLE
    header_done: bool = False
    line_buf: bytearray = field(default_factory=bytearray)

    def reset(self) -> None:
        _reset_fields(self)


@dataclass
class HttpSession:
    """HTTP state of one flow: the first request/response pair.

    Upstream data feeds the request parser, downstream data the response
    parser. Packets may split lines anywhere.
    """

    req: HttpRequest = field(default_factory=HttpRequest)
    rsp: HttpResponse = field(default_factory=HttpResponse)
    req_ts_us: int = 0
    rsp_ts_us: int = 0
    response_interval_ms: int = 0

    def on_upstream_data(self, data: bytes, ts_us: int) -> None:
        """Feed client-to-server bytes."""
        if not data:
            return
        data = bytes(data)
        req = self.req
        if self.req_ts_us == 0:
            self.req_ts_us = ts_us

        if req.header_done:
            req.append_body(data)
            return

        def on_line(line: bytes) -> None:
            if req.header_done:
                return
            if req.state in (HttpReqState.IDLE, HttpReqState.REQUEST_LINE):
                if line:
                    self._parse_request_line(line)
                    req.state = HttpReqState.HEADERS
                return
            if req.state == HttpReqState.HEADERS:
                if not line:
                    req.header_done = True
                    req.state = HttpReqState.BODY
                    return
                self._parse_request_header(line)

        _feed_lines(req.line_buf, req.LINE_BUF_SIZE, data, on_line)

        if req.header_done:
            end = data.find(b"\r\n\r\n")
            if end >= 0:
                req.append_body(data[end + 4 :])

    def on_downstream_data(self, data: bytes, ts_us: int) -> None:
        """Feed server-to-client bytes."""
        if not data:
            return
        data = bytes(data)
        rsp = self.rsp
        if self.rsp_ts_us == 0:
            self.rsp_ts_us = ts_us
            if 0 < self.req_ts_us < self.rsp_ts_us:
                self.response_interval_ms = (
                    (self.rsp_ts_us - self.req_ts_us) // 1000
                ) & 0xFFFFFFFF

        if rsp.header_done:
            return

        def on_line(line: bytes) -> None:
            if rsp.header_done:
                return
            if rsp.state in (HttpRspState.IDLE, HttpRspState.STATUS_LINE):
                if line:
                    self._parse_status_line(line)
                    rsp.state = HttpRspState.HEADERS
                return
            if rsp.state == HttpRspState.HEADERS:
                if not line:
                    rsp.header_done = True
                    rsp.state = HttpRspState.BODY
                    return
                self._parse_response_header(line)

        _feed_lines(rsp.line_buf, rsp.LINE_BUF_SIZE, data, on_line)

    def reset(self) -> None:
        self.req.reset()
        self.rsp.reset()
        self.req_ts_us = 0
        self.rsp_ts_us = 0
        self.response_interval_ms = 0

    def _parse_request_line(self, line: bytes) -> None:
        sp1 = line.find(b" ")
        if sp1 < 0:
            return
        self.req.method = parse_method(line[:sp1])
        rest = line[sp1 + 1 :]
        if not rest:
            return
        sp2 = rest.find(b" ")
        url = rest if sp2 < 0 else rest[:sp2]
        self.req.url = _text(url, URL_MAX)

    def _parse_request_header(self, line: bytes) -> None:
        parts = _split_header(line)
        if parts is None:
            return
        name, value = parts
        if name == b"host":
            self.req.host = _text(value, FIELD_MAX)
        elif name == b"user-agent":
            self.req.user_agent = _text(value, FIELD_MAX)
        elif name == b"content-type":
            self.req.content_type = _content_type(value)
        elif name == b"content-length":
            self.req.content_length = _strtoul(value, 32)

    def _parse_status_line(self, line: bytes) -> None:
        sp = line.find(b" ")
        if sp < 0:
            return
        code = line[sp + 1 :]
        if len(code) < 3:
            return
        self.rsp.status_code = _strtoul(code, 16)

    def _parse_response_header(self, line: bytes) -> None:
        parts = _split_header(line)
        if parts is None:
            return
        name, value = parts
        if name == b"content-type":
            self.rsp.content_type = _content_type(value)