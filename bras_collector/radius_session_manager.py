"""Pairs RADIUS requests with their responses into single records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from .records import RadiusRecord

log = logging.getLogger(__name__)

CompleteFn = Callable[[RadiusRecord], None]

_U32 = 0xFFFFFFFF
_U64 = (1 << 64) - 1
_MAX_PROBE = 32
_REQUEST_CODES = frozenset({1, 4, 10, 40, 43})
_REPLY_MESSAGE_MAX = 255


@dataclass
class _Entry:
    rec: RadiusRecord = field(default_factory=RadiusRecord)
    in_use: bool = False
    is_tombstone: bool = False


class RadiusSessionManager:
    """Open-addressing table of pending requests keyed by (client IP, RADIUS id).

    Requests wait for a response; a response is merged with its request and
    handed to ``on_complete``. Requests that wait longer than ``timeout_us``
    are emitted unanswered by :meth:`purge_expired`.
    """

    def __init__(self, timeout_us: int = 5 * 1_000_000, capacity: int = 1 << 16) -> None:
        cap = 1
        while cap < capacity:
            cap <<= 1
        self._cap = cap
        self._mask = cap - 1
        self._table = [_Entry() for _ in range(cap)]
        self._used = 0
        self._tombstones = 0
        self._timeout_us = timeout_us

    def _hash(self, ip: int, rid: int) -> int:
        h = (ip ^ ((rid & 0xFF) << 24)) & _U32
        h ^= h >> 16
        h = (h * 0x45D9F3B) & _U32
        h ^= h >> 16
        return h & self._mask

    def _probe(self, ip: int, rid: int) -> tuple[int | None, bool]:
        """Return (slot, found); slot is None when no usable slot was reached."""
        start = self._hash(ip, rid)
        first_tomb: int | None = None
        for i in range(_MAX_PROBE):
            idx = (start + i) & self._mask
            entry = self._table[idx]
            if entry.is_tombstone:
                if first_tomb is None:
                    first_tomb = idx
                continue
            if not entry.in_use:
                return (first_tomb if first_tomb is not None else idx), False
            if entry.rec.client_ip == ip and entry.rec.radius_id == rid:
                return idx, True
        return first_tomb, False

    def on_packet(self, pkt: RadiusRecord, on_complete: CompleteFn) -> None:
        """Store a request, or merge a response with its request and emit it."""
        is_request = pkt.request_code in _REQUEST_CODES
        is_response = pkt.reply_code != 0

        if is_request and not is_response:
            idx, _found = self._probe(pkt.client_ip, pkt.radius_id)
            if idx is None:
                log.warning("[RadiusMgr] table full, dropping request id=%d", pkt.radius_id)
                return
            entry = self._table[idx]
            if entry.is_tombstone:
                self._tombstones -= 1
            elif not entry.in_use:
                self._used += 1
            # a retransmitted request with the same id replaces the old one
            entry.rec = replace(pkt)
            entry.in_use = True
            entry.is_tombstone = False
            return

        if not is_response:
            return

        idx, found = self._probe(pkt.bras_ip, pkt.radius_id)
        if not found or idx is None:
            on_complete(pkt)
            return

        entry = self._table[idx]
        merged = replace(entry.rec, end_time=pkt.end_time, reply_code=pkt.reply_code)
        if merged.framed_ip == 0 and pkt.framed_ip != 0:
            merged.framed_ip = pkt.framed_ip
        if not merged.reply_message and pkt.reply_message:
            merged.reply_message = pkt.reply_message[:_REPLY_MESSAGE_MAX]
        if merged.session_timeout == 0 and pkt.session_timeout != 0:
            merged.session_timeout = pkt.session_timeout
        if merged.idle_timeout == 0 and pkt.idle_timeout != 0:
            merged.idle_timeout = pkt.idle_timeout

        on_complete(merged)

        entry.in_use = False
        entry.is_tombstone = True
        self._tombstones += 1
        self._used -= 1

    def purge_expired(self, now_us: int, on_complete: CompleteFn) -> None:
        """Emit, unanswered, every request older than the timeout."""
        purged = 0
        for entry in self._table:
            if not entry.in_use or entry.is_tombstone:
                continue
            start_us = int(entry.rec.start_time * 1e6)
            if ((now_us - start_us) & _U64) >= self._timeout_us:
                on_complete(entry.rec)
                entry.in_use = False
                entry.is_tombstone = True
                self._tombstones += 1
                self._used -= 1
                purged += 1
        if purged:
            log.debug("[RadiusMgr] purged %d timed-out requests", purged)

    def purge_all(self, on_complete: CompleteFn) -> None:
        """Emit every pending request and empty the table."""
        for entry in self._table:
            if not entry.in_use or entry.is_tombstone:
                continue
            on_complete(entry.rec)
            entry.in_use = False
        self._used = 0
        self._tombstones = 0

    def pending_count(self) -> int:
        """Number of requests waiting for a response."""
        return self._used