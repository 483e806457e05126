"""Per-flow TCP session state: handshake, RTT, loss and reordering tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

_U32 = 0xFFFFFFFF


def _s32(value: int) -> int:
    """Interpret the low 32 bits of ``value`` as a signed integer."""
    value &= _U32
    return value - (1 << 32) if value & 0x80000000 else value


class HsState(IntEnum):
    """Handshake state; the value is the output ``handshake_status`` code."""

    INIT = 6
    SYN_SENT = 1
    ESTABLISHED = 0
    SRV_NO_RSP = 1
    USR_NO_RSP = 2
    USR_RST = 3
    SRV_RST = 4
    EXCEPTION = 5


class SockState(IntEnum):
    """Socket state; the value is the output ``socket_status`` code."""

    INIT = 6
    ACTIVE = 0
    SUCCESS = 0
    SRV_NO_RSP = 1
    USR_NO_RSP = 2
    USR_RST = 3
    SRV_RST = 4
    EXCEPTION = 5


@dataclass
class _RttEntry:
    seq_end: int = 0
    send_us: int = 0
    valid: bool = False


def _rtt_slots() -> list[_RttEntry]:
    return [_RttEntry() for _ in range(RttTracker.CAP)]


@dataclass
class RttTracker:
    """Matches sent sequence ends with later ACKs to measure round-trip time.

    The most recent ``CAP`` unacknowledged sends are kept in a ring.
    Times are accumulated in milliseconds.
    """

    CAP = 16

    entries: list[_RttEntry] = field(default_factory=_rtt_slots)
    write_idx: int = 0
    sum_ms: int = 0
    jitter_sum_ms: int = 0
    count: int = 0
    last_rtt_ms: int = 0

    def on_send(self, seq_end: int, ts_us: int) -> None:
        """Remember that data ending at ``seq_end`` was sent at ``ts_us``."""
        slot = self.entries[self.write_idx % self.CAP]
        slot.seq_end = seq_end & _U32
        slot.send_us = ts_us
        slot.valid = True
        self.write_idx = (self.write_idx + 1) & 0xFF

    def on_ack(self, ack: int, ts_us: int) -> None:
        """Account for an ACK: the first pending send it covers yields one sample."""
        for slot in self.entries:
            if not slot.valid:
                continue
            if _s32(ack - slot.seq_end) >= 0:
                rtt_us = ts_us - slot.send_us if ts_us > slot.send_us else 0
                rtt_ms = rtt_us // 1000
                if self.count > 0:
                    self.jitter_sum_ms += abs(rtt_ms - self.last_rtt_ms)
                self.sum_ms += rtt_ms
                self.last_rtt_ms = rtt_ms
                self.count += 1
                slot.valid = False
                return

    def avg_ms(self) -> int:
        """Mean RTT in milliseconds, 0 when nothing was measured."""
        return (self.sum_ms // self.count) & _U32 if self.count else 0

    def reset(self) -> None:
        self.entries = _rtt_slots()
        self.write_idx = 0
        self.sum_ms = 0
        self.jitter_sum_ms = 0
        self.count = 0
        self.last_rtt_ms = 0


@dataclass
class LossDetector:
    """Detects gaps, duplicates and reordering from sequence numbers."""

    AVG_SEGMENT = 1400

    expected_seq: int = 0
    initialized: bool = False
    loss_count: int = 0
    disorder_count: int = 0
    repeat_count: int = 0

    def on_packet(self, seq: int, payload_len: int, ts_us: int = 0) -> None:
        """Process one payload-carrying segment."""
        self.repeat_count = 0
        seq_end = (seq + payload_len) & _U32

        if not self.initialized:
            self.expected_seq = seq_end
            self.initialized = True
            return

        diff = _s32(seq - self.expected_seq)
        if diff == 0:
            self.expected_seq = seq_end
        elif diff > 0:
            self.loss_count += max(1, diff // self.AVG_SEGMENT)
            self.expected_seq = seq_end
        elif _s32(seq_end - self.expected_seq) <= 0:
            self.repeat_count += 1
        else:
            self.disorder_count += 1
            self.expected_seq = seq_end

    def reset(self) -> None:
        self.expected_seq = 0
        self.initialized = False
        self.loss_count = 0
        self.disorder_count = 0
        self.repeat_count = 0


@dataclass
class TcpSession:
    """Complete state of one TCP flow."""

    # timestamps (microseconds)
    create_us: int = 0
    last_pkt_us: int = 0
    first_data_us: int = 0
    last_data_us: int = 0
    syn_ts_us: int = 0
    synack_ts_us: int = 0

    # handshake RTT (milliseconds)
    hs_user_rtt_ms: int = 0
    hs_server_rtt_ms: int = 0

    # state machine
    hs_state: HsState = HsState.INIT
    sock_state: SockState = SockState.INIT
    is_closed: bool = False
    user_fin: bool = False
    server_fin: bool = False
    user_launch: bool = True

    # traffic
    ul_bytes: int = 0
    dl_bytes: int = 0
    ul_pkts: int = 0
    dl_pkts: int = 0
    ul_payload: int = 0
    dl_payload: int = 0

    # payload-carrying packets only
    eff_ul_bytes: int = 0
    eff_dl_bytes: int = 0
    eff_ul_pkts: int = 0
    eff_dl_pkts: int = 0

    dl_repeat_pkts: int = 0

    # user_rtt: downstream data -> upstream ACK; server_rtt: the reverse
    user_rtt: RttTracker = field(default_factory=RttTracker)
    server_rtt: RttTracker = field(default_factory=RttTracker)

    ul_loss: LossDetector = field(default_factory=LossDetector)
    dl_loss: LossDetector = field(default_factory=LossDetector)

    def hs_status_dcs(self) -> int:
        """Output ``handshake_status`` code (0..6)."""
        return int(self.hs_state)

    def sock_status_dcs(self) -> int:
        """Output ``socket_status`` code (0..6)."""
        return int(self.sock_state)

    def duration_ms(self) -> int:
        """Time from flow start (or SYN) to the last packet, in ms."""
        start = self.create_us if self.create_us > 0 else self.syn_ts_us
        if start == 0 or self.last_pkt_us <= start:
            return 0
        return ((self.last_pkt_us - start) // 1000) & _U32

    def eff_duration_ms(self) -> int:
        """Time between the first and last payload-carrying packets, in ms."""
        if self.first_data_us == 0 or self.last_data_us <= self.first_data_us:
            return 0
        return ((self.last_data_us - self.first_data_us) // 1000) & _U32

    def reset(self) -> None:
        """Clear every field; states go back to INIT and all flags to False."""
        fresh = TcpSession()
        for name in vars(fresh):
            setattr(self, name, getattr(fresh, name))
        self.user_launch = False