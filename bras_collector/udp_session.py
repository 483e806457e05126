"""UDP flow state with RTP-sequence based loss estimation."""

from __future__ import annotations

from dataclasses import dataclass

from .records import UdpStreamRecord

_U32 = 0xFFFFFFFF
_RTP_HEADER_LEN = 12
_MAX_SEQ_JUMP = 1000


def parse_rtp_seq(payload: bytes) -> int | None:
    """RTP sequence number of ``payload``, or None if it is not RTP version 2."""
    if len(payload) < _RTP_HEADER_LEN:
        return None
    if payload[0] & 0xC0 != 0x80:
        return None
    return (payload[2] << 8) | payload[3]


@dataclass
class UdpSession:
    """State of one UDP flow."""

    create_us: int = 0
    last_us: int = 0
    ul_bytes: int = 0
    dl_bytes: int = 0
    ul_pkts: int = 0
    dl_pkts: int = 0
    expected_pkts: int = 0
    received_pkts: int = 0
    last_rtp_seq: int = 0
    rtp_initialized: bool = False
    loss_count: int = 0

    def duration_ms(self) -> int:
        if self.last_us <= self.create_us:
            return 0
        return ((self.last_us - self.create_us) // 1000) & _U32

    def loss_rate(self) -> float:
        if self.expected_pkts == 0:
            return 0.0
        return self.loss_count / self.expected_pkts


class UdpSessionHandler:
    """Updates UdpSession state from packets and builds output records."""

    def on_packet(
        self,
        sess: UdpSession,
        payload: bytes,
        ip_total: int,
        ts_us: int,
        is_upstream: bool,
        src_port: int,
        dst_port: int,
        traffic_type: int,
    ) -> None:
        """Account one packet; downstream video/live traffic is checked for RTP gaps."""
        if sess.create_us == 0:
            sess.create_us = ts_us
        sess.last_us = ts_us

        if is_upstream:
            sess.ul_bytes += ip_total
            sess.ul_pkts += 1
            return

        sess.dl_bytes += ip_total
        sess.dl_pkts += 1
        sess.received_pkts += 1

        if traffic_type < 2:
            return
        seq = parse_rtp_seq(payload)
        if seq is None:
            return
        if not sess.rtp_initialized:
            sess.last_rtp_seq = seq
            sess.rtp_initialized = True
            sess.expected_pkts = 1
            return

        expected = (sess.last_rtp_seq + 1) & 0xFFFF
        diff = (seq - expected) & 0xFFFF
        if 0 < diff < _MAX_SEQ_JUMP:
            sess.loss_count += diff
            sess.expected_pkts += diff + 1
        else:
            sess.expected_pkts += 1
        sess.last_rtp_seq = seq

    def build_record(
        self,
        sess: UdpSession,
        key,
        traffic_type: int,
        ndpi_proto: int,
    ) -> UdpStreamRecord:
        """Summarise ``sess``; ``key`` supplies the user/server addresses and ports."""
        return UdpStreamRecord(
            start_time=sess.create_us,
            user_ip=key.user_ip,
            server_ip=key.server_ip,
            user_port=key.user_port,
            server_port=key.server_port,
            ndpi_app_proto=ndpi_proto,
            traffic_type=traffic_type,
            expected_pkts=sess.expected_pkts,
            received_pkts=sess.received_pkts,
            loss_rate=sess.loss_rate(),
            duration_ms=sess.duration_ms(),
        )