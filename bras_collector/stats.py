"""Per-thread packet counters and a periodic aggregate report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

DEFAULT_DROP_ALERT_PCT = 1.0


@dataclass
class _Snapshot:
    """Counter values at the previous report, used to compute rates."""

    rx_pkts: int = 0
    rx_bytes: int = 0
    drop_pkts: int = 0
    output_records: int = 0
    rx_pps: float = 0.0
    rx_bps: float = 0.0
    drop_rate: float = 0.0


@dataclass
class ThreadStats:
    """Running counters of one processing thread."""

    rx_pkts: int = 0
    rx_bytes: int = 0
    drop_pkts: int = 0
    radius_pkts: int = 0
    pppoe_pkts: int = 0
    user_pkts: int = 0
    tcp_sessions: int = 0
    udp_sessions: int = 0
    http_records: int = 0
    dns_records: int = 0
    onu_records: int = 0
    ping_records: int = 0
    stb_records: int = 0
    output_records: int = 0
    output_bytes: int = 0

    snap_prev: _Snapshot = field(default_factory=_Snapshot)

    def reset(self) -> None:
        """Zero the traffic and output counters; the snapshot is kept."""
        self.rx_pkts = 0
        self.rx_bytes = 0
        self.drop_pkts = 0
        self.output_records = 0
        self.onu_records = 0
        self.ping_records = 0


@dataclass
class _Entry:
    name: str
    stats: ThreadStats


class GlobalStats:
    """Aggregates registered ThreadStats into periodic rate reports."""

    def __init__(self) -> None:
        self._entries: list[_Entry] = []
        self._cached_drop_rate = 0.0

    def register_thread(self, name: str, stats: ThreadStats) -> None:
        """Include ``stats`` in future reports under ``name``."""
        self._entries.append(_Entry(name, stats))

    def print_report(self, interval_sec: float) -> None:
        """Log per-thread and total rates since the previous report."""
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")

        total_rx = total_drop = total_bytes = total_out = 0

        for entry in self._entries:
            s = entry.stats
            rx, drop, nbytes, out = s.rx_pkts, s.drop_pkts, s.rx_bytes, s.output_records
            prev = s.snap_prev

            drx = rx - prev.rx_pkts
            ddrop = drop - prev.drop_pkts
            dbytes = nbytes - prev.rx_bytes

            pps = drx / interval_sec
            bps = dbytes * 8.0 / interval_sec
            drop_rate = ddrop * 100.0 / (drx + ddrop) if drx > 0 else 0.0

            log.info(
                "[%s] pps=%.0f bps=%.2fM drop=%.3f%% out=%d",
                entry.name, pps, bps / 1e6, drop_rate, out,
            )

            prev.rx_pkts = rx
            prev.drop_pkts = drop
            prev.rx_bytes = nbytes
            prev.output_records = out
            prev.rx_pps = pps
            prev.rx_bps = bps
            prev.drop_rate = drop_rate

            total_rx += drx
            total_drop += ddrop
            total_bytes += dbytes
            total_out += out

        total_rate = total_drop * 100.0 / (total_rx + total_drop) if total_rx > 0 else 0.0
        self._cached_drop_rate = total_rate

        log.info(
            "[TOTAL] pps=%.0f throughput=%.2fGbps drop=%.3f%% records=%d",
            total_rx / interval_sec,
            total_bytes * 8.0 / interval_sec / 1e9,
            total_rate,
            total_out,
        )
        if total_rate > DEFAULT_DROP_ALERT_PCT:
            log.error("!!! DROP RATE %.3f%% > 1%% threshold !!!", total_rate)

    def total_drop_rate(self) -> float:
        """Overall drop percentage computed by the last report."""
        return self._cached_drop_rate

    def is_drop_rate_alert(self, threshold_pct: float = DEFAULT_DROP_ALERT_PCT) -> bool:
        """True when the last report's drop rate exceeds ``threshold_pct``."""
        return self.total_drop_rate() > threshold_pct