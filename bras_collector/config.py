"""Collector configuration loaded from a JSON file."""

from __future__ import annotations

import ipaddress
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .common import MAX_WORKERS, MBUF_POOL_SIZE

log = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """The configuration cannot be read or is not valid."""


def parse_ip(text: str) -> int:
    """Dotted-quad IPv4 address as a host-order integer."""
    try:
        return int(ipaddress.IPv4Address(text))
    except (ipaddress.AddressValueError, ValueError, TypeError) as exc:
        raise ConfigError(f"Invalid IP: {text}") from exc


@dataclass
class PortConfig:
    """Capture settings of one NIC port."""

    port_id: int = 0
    nb_rx_queues: int = 4
    nb_tx_queues: int = 0
    rx_desc: int = 4096
    promiscuous: bool = True
    mbuf_pool_size: int = MBUF_POOL_SIZE


def _value(obj: dict, key: str, default: Any, kind: type | tuple[type, ...]) -> Any:
    """``obj[key]`` if present (checked against ``kind``), else ``default``."""
    if key not in obj:
        return default
    value = obj[key]
    if isinstance(value, bool) and kind is not bool:
        raise ConfigError(f"config key {key!r} has the wrong type")
    if not isinstance(value, kind):
        raise ConfigError(f"config key {key!r} has the wrong type")
    return value


def _string(obj: dict, key: str) -> str:
    value = obj[key]
    if not isinstance(value, str):
        raise ConfigError(f"config key {key!r} must be a string")
    return value


def _unsigned(obj: dict, key: str) -> int:
    value = obj[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"config key {key!r} must be a non-negative integer")
    return value


@dataclass
class CollectorConfig:
    """All runtime settings of the collector."""

    port_configs: list[PortConfig] = field(default_factory=list)
    nb_rx_queues: int = 4
    nb_workers: int = 4

    bras_network: int = 0
    bras_netmask: int = 0
    radius_ips: list[int] = field(default_factory=list)
    radius_port: int = 1812

    hw_flow_steering: bool = False
    radius_queue: int = 0
    pppoe_queue: int = 1
    worker_queue_start: int = 2

    raw_dir: str = "./raw"
    log_dir: str = "./logs"
    collector_id: str = ""

    flow_timeout_sec: int = 120
    purge_interval_sec: int = 5
    file_rotate_sec: int = 60
    rotate_interval: int = 60

    onu_url_prefix: str = "/report"

    def load(self, path) -> None:
        """Read settings from the JSON file at ``path``."""
        try:
            with open(path, encoding="utf-8") as fh:
                j = json.load(fh)
        except OSError as exc:
            raise ConfigError(f"Cannot open config: {path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Malformed config {path}: {exc}") from exc
        if not isinstance(j, dict):
            raise ConfigError(f"Config {path} must hold a JSON object")

        self.nb_workers = _value(j, "nb_workers", 4, int)
        self.nb_rx_queues = _value(j, "nb_rx_queues", 4, int)
        self.collector_id = _value(j, "collector_id", "", str)
        self.log_dir = _value(j, "log_dir", "./logs", str)

        if "raw_dir" in j:
            self.raw_dir = _string(j, "raw_dir")
        elif "output_dir" in j:
            self.raw_dir = _string(j, "output_dir")
        else:
            self.raw_dir = "./raw"

        self.flow_timeout_sec = _value(j, "flow_timeout_sec", 120, int)
        self.purge_interval_sec = _value(j, "purge_interval_sec", 5, int)

        if "file_rotate_sec" in j:
            self.file_rotate_sec = _unsigned(j, "file_rotate_sec")
        elif "file_rotate_seconds" in j:
            self.file_rotate_sec = _unsigned(j, "file_rotate_seconds")
        else:
            self.file_rotate_sec = 60
        self.rotate_interval = self.file_rotate_sec

        self.onu_url_prefix = _value(j, "onu_url_prefix", "/report", str)

        if "bras_network" in j:
            self.bras_network = parse_ip(_string(j, "bras_network"))
        if "bras_netmask" in j:
            self.bras_netmask = parse_ip(_string(j, "bras_netmask"))

        for ip in _value(j, "radius_server_ips", [], list):
            if not isinstance(ip, str):
                raise ConfigError("radius_server_ips must hold strings")
            self.radius_ips.append(parse_ip(ip))
        self.radius_port = _value(j, "radius_port", 1812, int)

        self.hw_flow_steering = _value(j, "hw_flow_steering", False, bool)
        self.radius_queue = _value(j, "radius_queue", 0, int)
        self.pppoe_queue = _value(j, "pppoe_queue", 1, int)
        self.worker_queue_start = _value(j, "worker_queue_start", 2, int)

        for p in _value(j, "ports", [], list):
            if not isinstance(p, dict):
                raise ConfigError("each entry of ports must be an object")
            self.port_configs.append(
                PortConfig(
                    port_id=_value(p, "port_id", 0, int),
                    nb_rx_queues=_value(p, "nb_rx_queues", self.nb_rx_queues, int),
                    nb_tx_queues=0,
                    rx_desc=_value(p, "rx_desc", 4096, int),
                    promiscuous=_value(p, "promiscuous", True, bool),
                    mbuf_pool_size=_value(p, "mbuf_pool_size", MBUF_POOL_SIZE, int),
                )
            )

        if not self.port_configs:
            self.port_configs.append(PortConfig(port_id=0, nb_rx_queues=self.nb_rx_queues))

        log.info(
            "Config loaded: workers=%d rx_queues=%d raw_dir=%s rotate=%ds onu_prefix=%s",
            self.nb_workers, self.nb_rx_queues, self.raw_dir,
            self.rotate_interval, self.onu_url_prefix,
        )

    def validate(self) -> None:
        """Raise ConfigError if the settings cannot be used."""
        if self.nb_workers == 0 or self.nb_workers > MAX_WORKERS:
            raise ConfigError("nb_workers out of range")
        if not self.port_configs:
            raise ConfigError("No port configured")
        if not self.raw_dir:
            raise ConfigError("raw_dir not set")
        if self.rotate_interval == 0:
            raise ConfigError("rotate_interval must be > 0")