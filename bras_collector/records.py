"""Record types produced by the collector, one per DCS output format."""

from __future__ import annotations

from dataclasses import dataclass, field

ONU_MAX_WIFI = 4
ONU_MAX_WAN = 4
ONU_MAX_SUBDEV = 16

NONE_TEXT = "NONE"


@dataclass
class HttpRecord:
    """One HTTP session; field order matches the 59-field output line."""

    # time
    hour_round_time: int = 0
    min_round_time: int = 0
    start_time: float = 0.0

    # user identity
    user_account: str = NONE_TEXT
    user_mac_addr: int = 0
    bras_mac_addr: int = 0
    user_ip: int = 0
    server_ip: int = 0
    user_port: int = 0
    server_port: int = 0

    # HTTP semantics; request_type: 1=GET 2=POST 3=CONNECT 4=OPTIONS
    # 5=HEAD 6=PUT 7=DELETE 8=TRACE
    request_type: int = 0
    status_code: int = 0
    host_hash: int = 0
    host_name: str = NONE_TEXT
    cpe_model: str = NONE_TEXT
    cpe_version: str = NONE_TEXT
    user_agent: str = NONE_TEXT
    client_content_type: str = NONE_TEXT
    server_content_type: str = NONE_TEXT
    url: str = NONE_TEXT
    response_interval: int = 0

    # handshake / socket state: 0=ok 1=server silent 2=user silent
    # 3=user reset 4=server reset 5=decode error 6=initial
    handshake_status: int = 0
    socket_status: int = 0
    traffic_type: int = 0
    duration: int = 0

    # traffic
    ul_traffic: int = 0
    dl_traffic: int = 0
    http_ul_payload: int = 0
    http_dl_payload: int = 0

    # RTT / jitter
    server_rtt_count: int = 0
    server_rtt_sum: int = 0
    user_rtt_count: int = 0
    user_rtt_sum: int = 0
    user_jitter_sum: int = 0
    server_jitter_sum: int = 0

    # loss
    server_loss: int = 0
    user_loss: int = 0

    # packet counts
    ul_packets: int = 0
    dl_packets: int = 0
    user_launch: int = 0
    dl_repeat_packets: int = 0

    # handshake RTT
    hs_user_rtt: int = 0
    hs_server_rtt: int = 0

    # effective (payload-carrying) session
    eff_duration: int = 0
    eff_ul_traffic: int = 0
    eff_dl_traffic: int = 0
    eff_ul_packets: int = 0
    eff_dl_packets: int = 0

    # mobile-network extensions, zero on fixed networks
    isdn1: int = 0
    isdn2: int = 0
    imsi1: int = 0
    imsi2: int = 0
    imei1: int = 0
    imei2: int = 0
    cpe_mac_addr1: int = 0
    cpe_mac_addr2: int = 0

    # reordering
    uplink_disorder_cnt: int = 0
    downlink_disorder_cnt: int = 0

    second_user_agent: str = NONE_TEXT


@dataclass
class OnuWifiInfo:
    """One WiFi interface of an ONU."""

    ssid_mac: int = 0
    channel: int = 0
    ssid_id: int = 0
    ssid_enabled: int = 0
    ssid_standard: str = ""
    ssid_name: str = ""
    ssid_advertisement: int = 0
    ssid_encryption_mode: str = ""
    noise_level: int = 0
    interf_percent: int = 0
    transmit_power: int = 0


@dataclass
class OnuWanTraffic:
    """Traffic counters of one ONU WAN port."""

    index: int = 0
    name: str = ""
    avg_rx_rate: float = 0.0
    avg_tx_rate: float = 0.0
    down_stats: int = 0
    max_rx_rate: float = 0.0
    max_tx_rate: float = 0.0
    up_stats: int = 0


@dataclass
class OnuSubDevice:
    """A device attached to an ONU; invalid entries are output as placeholders."""

    valid: bool = False
    name: str = ""
    type: str = ""
    mac: int = 0
    wlan_radio_type: str = ""
    wlan_radio_power: int = 0
    ip: int = 0
    lan_port: str = ""
    avg_rx_rate: float = 0.0
    avg_tx_rate: float = 0.0
    down_stats: int = 0
    max_rx_rate: float = 0.0
    max_tx_rate: float = 0.0
    up_stats: int = 0
    speed: int = 0
    duplex: str = ""


def _wifi_slots() -> list[OnuWifiInfo]:
    return [OnuWifiInfo() for _ in range(ONU_MAX_WIFI)]


def _wan_slots() -> list[OnuWanTraffic]:
    return [OnuWanTraffic() for _ in range(ONU_MAX_WAN)]


def _subdev_slots() -> list[OnuSubDevice]:
    return [OnuSubDevice() for _ in range(ONU_MAX_SUBDEV)]


@dataclass
class OnuRecord:
    """A full ONU soft-probe report."""

    # time
    hour_round_time: int = 0
    min_round_time: int = 0
    start_time: int = 0

    # identity
    user_account: str = ""
    user_mac_addr: int = 0
    device_id: str = ""

    # event: 1=boot 2=periodic 3=alarm
    event_code: int = 0
    sub_event: int = 0
    warning_reason: str = ""
    warning_cpu_rate: int = 0

    # hardware
    cpu_type: str = ""
    firmware_version: str = ""
    flash_size: int = 0
    hardware_version: str = ""
    onu_mac: int = 0
    manufacturer: str = ""
    model: str = ""
    nfc_support: str = ""
    ram_size: int = 0

    wifi: list[OnuWifiInfo] = field(default_factory=_wifi_slots)

    # running state
    boot_time: str = ""
    cpu: int = 0
    lan1_connect_status: str = ""
    lan2_connect_status: str = ""
    lan3_connect_status: str = ""
    lan4_connect_status: str = ""
    lan_ip: int = 0
    pppoe_error: str = ""
    pppoe_status: str = ""
    pppoe_up_time: int = 0
    ram: int = 0
    running_time: int = 0
    sample_time: str = ""
    user_name: str = ""
    wan_connect_status: str = ""
    wan_ip: int = 0
    wan_ipv6: str = ""
    wifi_status: str = ""
    pon_rx_power: float = 0.0
    pon_tx_power: float = 0.0

    wan: list[OnuWanTraffic] = field(default_factory=_wan_slots)

    sub_device_number: int = 0
    sub_devices: list[OnuSubDevice] = field(default_factory=_subdev_slots)


@dataclass
class TcpSessionRecord:
    """One TCP session; field order matches the 39-field output line."""

    hour_round_time: int = 0
    min_round_time: int = 0
    start_time: float = 0.0

    user_account: str = ""
    user_mac_addr: int = 0
    bras_mac_addr: int = 0
    user_ip: int = 0
    server_ip: int = 0

    host_hash: int = 0
    host_name: str = ""

    user_port: int = 0
    server_port: int = 0

    handshake_status: int = 6
    socket_status: int = 6
    traffic_type: int = 0
    duration: int = 0

    ul_traffic: int = 0
    dl_traffic: int = 0

    user_rtt_count: int = 0
    user_rtt_sum: int = 0
    server_rtt_count: int = 0
    server_rtt_sum: int = 0
    user_jitter_sum: int = 0
    server_jitter_sum: int = 0

    server_loss: int = 0
    user_loss: int = 0
    ul_packets: int = 0
    dl_packets: int = 0

    user_launch: int = 0
    dl_repeat_packets: int = 0
    hs_user_rtt: int = 0
    hs_server_rtt: int = 0

    eff_duration: int = 0
    eff_ul_traffic: int = 0
    eff_dl_traffic: int = 0
    eff_ul_packets: int = 0
    eff_dl_packets: int = 0

    uplink_disorder_cnt: int = 0
    downlink_disorder_cnt: int = 0


@dataclass
class RadiusRecord:
    """A RADIUS exchange: 55 output fields plus two matching keys."""

    # time
    hour_round_time: int = 0
    min_round_time: int = 0
    start_time: float = 0.0
    end_time: float = 0.0

    # addresses and codes
    bras_ip: int = 0
    radius_server_ip: int = 0
    bras_mac: int = 0
    request_code: int = 0
    reply_code: int = 0

    # user / NAS
    user_name: str = ""
    nas_ip: int = 0
    nas_port: int = 0
    service_type: int = 0
    framed_protocol: int = 0
    framed_ip: int = 0
    reply_message: str = ""

    # timeouts and station ids
    session_timeout: int = 0
    idle_timeout: int = 0
    calling_station_id: str = ""
    calling_station_id_int: int = 0
    called_station_id: str = ""
    nas_identifier: str = ""

    # accounting; acct_status_type: 1=Start 2=Stop 3=Interim
    acct_status_type: int = 0
    acct_delay_time: int = 0
    acct_input_octets: int = 0
    acct_output_octets: int = 0
    acct_session_id: str = ""
    acct_authen: int = 0
    acct_session_time: int = 0
    acct_input_packets: int = 0
    acct_output_packets: int = 0
    acct_terminate_cause: int = 0
    acct_input_gigawords: int = 0
    acct_output_gigawords: int = 0

    # NAS port and OLT
    nas_port_type: int = 0
    connect_info: str = ""
    nas_port_id: str = ""
    olt_ip: int = 0
    pon_board: int = 0
    pon_port: int = 0
    onu_no: str = ""

    # NAT and bandwidth
    nat_public_ip: int = 0
    nat_start_port: int = 0
    nat_end_port: int = 0
    ul_band_limits: int = 0
    dl_band_limits: int = 0

    # IPv6
    framed_ipv6_prefix: int = 0
    ipv6_prefix_length: int = 0
    framed_interface_id: int = 0
    delegated_ipv6_prefix: int = 0
    delegated_ipv6_prefix_length: int = 0
    acct_ipv6_input_octets: int = 0
    acct_ipv6_input_gigawords: int = 0
    acct_ipv6_output_octets: int = 0
    acct_ipv6_output_gigawords: int = 0

    # internal, not written out: request/response matching key
    radius_id: int = 0
    client_ip: int = 0


@dataclass
class DnsRecord:
    """One DNS query and its answer."""

    query_time: int = 0
    user_ip: int = 0
    dns_server_ip: int = 0
    query_name: str = ""
    query_type: int = 0
    result_code: int = 0
    response_duration_us: int = 0
    answers: str = ""


@dataclass
class UdpStreamRecord:
    """Summary of one UDP stream."""

    start_time: int = 0
    user_ip: int = 0
    server_ip: int = 0
    user_port: int = 0
    server_port: int = 0
    ndpi_app_proto: int = 0
    traffic_type: int = 0
    expected_pkts: int = 0
    received_pkts: int = 0
    loss_rate: float = 0.0
    duration_ms: int = 0


@dataclass
class PPPoERecord:
    """One PPPoE discovery event."""

    event_time: int = 0
    event_type: int = 0
    client_mac: int = 0
    server_mac: int = 0
    session_id: int = 0
    ac_name: str = ""
    service_name: str = ""
    user_account: str = ""


@dataclass
class StbRecord:
    """A set-top-box soft-probe message (5 output fields)."""

    msg_time: int = 0
    user_account: str = ""
    user_mac_address: int = 0
    server_ip: int = 0
    msg_content: str = ""