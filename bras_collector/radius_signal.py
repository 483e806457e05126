"""Signalling-plane helpers: Ethernet/PPPoE decoding and online-user tracking."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .radius_session_table import RadiusSessionTable, UserSession
from .records import PPPoERecord, RadiusRecord

log = logging.getLogger(__name__)

ETH_HEADER_LEN = 14
IPV4_MIN_HEADER_LEN = 20
PPPOE_HEADER_LEN = 6

ETHERTYPE_IPV4 = 0x0800
ETHERTYPE_VLAN = 0x8100
ETHERTYPE_QINQ = 0x88A8
ETHERTYPE_PPPOE_DISCOVERY = 0x8863

TAG_AC_NAME = 0x0101
TAG_SERVICE_NAME = 0x0102
_TAG_TEXT_MAX = 63
_USER_ACCOUNT_MAX = 255

ACCT_REQUEST = 4
ACCT_START = 1
ACCT_STOP = 2
ACCT_INTERIM = 3


@dataclass(frozen=True)
class EthInfo:
    """Ethernet addresses of a frame and the offset of its IPv4 header."""

    src_mac: int
    dst_mac: int
    ip_offset: int


def mac_to_int(mac: bytes) -> int:
    """Six MAC bytes as a big-endian integer."""
    if len(mac) < 6:
        raise ValueError(f"MAC address needs 6 bytes, got {len(mac)}")
    return int.from_bytes(mac[:6], "big")


def _strip_vlans(data: bytes) -> tuple[int, int]:
    """EtherType after any VLAN/QinQ tags, and the offset of the payload."""
    etype = int.from_bytes(data[12:14], "big")
    offset = ETH_HEADER_LEN
    while etype in (ETHERTYPE_VLAN, ETHERTYPE_QINQ) and offset + 4 <= len(data):
        etype = int.from_bytes(data[offset + 2 : offset + 4], "big")
        offset += 4
    return etype, offset


def parse_eth_header(data: bytes) -> EthInfo:
    """Decode the Ethernet header of an IPv4 frame, skipping VLAN tags.

    Raises ValueError for short frames and for anything that is not IPv4.
    """
    data = bytes(data)
    if len(data) < ETH_HEADER_LEN:
        raise ValueError("frame shorter than an Ethernet header")
    dst_mac = mac_to_int(data[0:6])
    src_mac = mac_to_int(data[6:12])
    etype, offset = _strip_vlans(data)
    if etype != ETHERTYPE_IPV4:
        raise ValueError(f"not an IPv4 frame (ethertype 0x{etype:04x})")
    if offset + IPV4_MIN_HEADER_LEN > len(data):
        raise ValueError("frame too short for an IPv4 header")
    return EthInfo(src_mac=src_mac, dst_mac=dst_mac, ip_offset=offset)


def _tag_text(raw: bytes) -> str:
    raw = raw[:_TAG_TEXT_MAX].split(b"\0", 1)[0]
    return raw.decode("utf-8", "replace")


def parse_pppoe_discovery(data: bytes, ts_us: int) -> PPPoERecord | None:
    """Decode a PPPoE Discovery frame (PADI/PADO/PADR/PADS/PADT).

    Returns None for frames of any other EtherType; raises ValueError when
    the frame is too short to hold the headers.
    """
    data = bytes(data)
    if len(data) < ETH_HEADER_LEN + PPPOE_HEADER_LEN:
        raise ValueError("frame too short for PPPoE")

    etype, offset = _strip_vlans(data)
    if etype != ETHERTYPE_PPPOE_DISCOVERY:
        return None
    if offset + PPPOE_HEADER_LEN > len(data):
        raise ValueError("frame too short for a PPPoE header")

    rec = PPPoERecord(
        event_time=ts_us,
        event_type=data[offset + 1],
        client_mac=mac_to_int(data[6:12]),
        server_mac=mac_to_int(data[0:6]),
        session_id=int.from_bytes(data[offset + 2 : offset + 4], "big"),
    )

    payload_len = int.from_bytes(data[offset + 4 : offset + 6], "big")
    tag_end = min(offset + PPPOE_HEADER_LEN + payload_len, len(data))
    pos = offset + PPPOE_HEADER_LEN
    while pos + 4 <= tag_end:
        tag_type = int.from_bytes(data[pos : pos + 2], "big")
        tag_len = int.from_bytes(data[pos + 2 : pos + 4], "big")
        if pos + 4 + tag_len > tag_end:
            break
        value = data[pos + 4 : pos + 4 + tag_len]
        if tag_type == TAG_AC_NAME:
            rec.ac_name = _tag_text(value)
        elif tag_type == TAG_SERVICE_NAME:
            rec.service_name = _tag_text(value)
        pos += 4 + tag_len
    return rec


class OnlineUserTracker:
    """Keeps a RadiusSessionTable current from completed accounting records."""

    def __init__(self, table: RadiusSessionTable | None = None) -> None:
        self.table = table if table is not None else RadiusSessionTable()
        self.online_users = 0

    def handle_radius_session(self, rec: RadiusRecord) -> None:
        """Apply an Accounting-Request: Start logs in, Stop logs out, Interim refreshes."""
        if rec.request_code != ACCT_REQUEST or rec.framed_ip == 0:
            return

        if rec.acct_status_type == ACCT_START:
            self.table.user_online(
                rec.framed_ip,
                UserSession(
                    user_account=rec.user_name[:_USER_ACCOUNT_MAX],
                    user_mac=rec.calling_station_id_int,
                    bras_mac=rec.bras_mac,
                    framed_ip=rec.framed_ip,
                    online_time=int(rec.start_time * 1e6),
                    online=True,
                ),
            )
            self.online_users += 1
            log.debug("[RadiusThread] user online: %s ip=%d", rec.user_name, rec.framed_ip)
        elif rec.acct_status_type == ACCT_STOP:
            self.table.user_offline(rec.framed_ip)
            if self.online_users > 0:
                self.online_users -= 1
            log.debug("[RadiusThread] user offline: %s ip=%d", rec.user_name, rec.framed_ip)
        elif rec.acct_status_type == ACCT_INTERIM:
            session = self.table.lookup(rec.framed_ip)
            if session is not None:
                session.online_time = int(rec.start_time * 1e6)
                self.table.user_online(rec.framed_ip, session)