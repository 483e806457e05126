# bras_collector

The session, signalling and record layer of a broadband remote access
server (BRAS) traffic collector. Given packet payloads and header fields,
it keeps per-flow state and produces per-session records: HTTP
transactions, TCP sessions, UDP/RTP streams, RADIUS request/response pairs
and PPPoE discovery events. It also tracks which subscriber is online at
which framed IP address.

The package uses only the standard library.

## What is inside

| Module | Purpose |
| --- | --- |
| `bras_collector.records` | Dataclasses for output records: `HttpRecord`, `TcpSessionRecord`, `RadiusRecord`, `OnuRecord` (with `OnuWifiInfo`, `OnuWanTraffic`, `OnuSubDevice`), `DnsRecord`, `UdpStreamRecord`, `PPPoERecord`, `StbRecord` |
| `bras_collector.common` | Constants, the enums `PktType`, `Direction`, `ThreadState`, and `SpscQueue`, a bounded ring queue |
| `bras_collector.time_utils` | `hour_round_time`, `min_round_time`, `ns_to_sec`, `format_file_timestamp` |
| `bras_collector.http_session` | `HttpSession`: incremental HTTP/1.x request and response header parsing across packets; `parse_method` |
| `bras_collector.tcp_session` | `TcpSession` with `HsState`/`SockState`, `RttTracker` (RTT and jitter) and `LossDetector` (gaps, duplicates, reordering) |
| `bras_collector.udp_session` | `UdpSession`, `UdpSessionHandler` and `parse_rtp_seq` for RTP sequence-based loss estimation |
| `bras_collector.radius_session_manager` | `RadiusSessionManager`: pairs RADIUS requests with responses, emits unanswered requests after a timeout |
| `bras_collector.radius_session_table` | `RadiusSessionTable`: thread-safe framed IP → `UserSession` map |
| `bras_collector.radius_signal` | `parse_eth_header` (VLAN/QinQ aware), `parse_pppoe_discovery`, `mac_to_int`, and `OnlineUserTracker`, which updates a `RadiusSessionTable` from accounting records |
| `bras_collector.stats` | `ThreadStats` counters and `GlobalStats`, which logs per-thread and total rates and drop percentages |
| `bras_collector.config` | `CollectorConfig` loaded from JSON, `PortConfig`, `parse_ip`, `ConfigError` |
| `bras_collector.logger` | `init_logging`, `set_level`, `get_logger`: console plus size-rotated file logging |

## Examples

Time rounding for the `hour_round_time` and `min_round_time` fields:

```python
from bras_collector.time_utils import hour_round_time, min_round_time

hour_round_time(1700000000.5)   # 1699999200
min_round_time(1700000000.5)    # 1699999980
```

Following an HTTP exchange as packets arrive (lines may be split anywhere):

```python
from bras_collector.http_session import HttpMethod, HttpSession

session = HttpSession()
session.on_upstream_data(b"GET /index.html HTTP/1.1\r\nHost: example.com\r\n", 1_000_000)
session.on_upstream_data(b"User-Agent: demo\r\n\r\n", 1_000_500)
session.on_downstream_data(b"HTTP/1.1 200 OK\r\n\r\n", 1_020_000)

session.req.method is HttpMethod.GET   # True
session.req.host                       # "example.com"
session.req.url                        # "/index.html"
session.rsp.status_code                # 200
session.response_interval_ms           # 20
```

Pairing a RADIUS request with its response:

```python
from bras_collector.radius_session_manager import RadiusSessionManager
from bras_collector.records import RadiusRecord

completed = []
manager = RadiusSessionManager(timeout_us=5_000_000, capacity=1 << 16)

request = RadiusRecord(request_code=4, radius_id=7, client_ip=0x0A000001,
                       start_time=1700000000.0, user_name="alice")
manager.on_packet(request, completed.append)
manager.pending_count()   # 1

response = RadiusRecord(reply_code=5, radius_id=7, bras_ip=0x0A000001,
                        end_time=1700000000.2)
manager.on_packet(response, completed.append)
completed[0].reply_code   # 5, merged into the request's record

manager.purge_expired(1700000010 * 1_000_000, completed.append)  # unanswered requests past the timeout
manager.purge_all(completed.append)                              # flush everything on shutdown
```

A response with no matching request is passed to the callback as it is.

Loading a configuration file:

```python
from bras_collector.config import CollectorConfig, ConfigError

config = CollectorConfig()
config.load("collector.json")   # raises ConfigError on unreadable or malformed input
config.validate()               # raises ConfigError when a value is out of range
```

Older key names are still accepted: `output_dir` for `raw_dir` and
`file_rotate_seconds` for `file_rotate_sec`. When no `ports` are given,
one port (id 0) is configured.

Logging: `init_logging(log_dir, max_mb, max_files)` writes the
`bras_collector` logger's records to stdout (INFO and up) and to
`<log_dir>/collector.log` (DEBUG and up), rotated by size.

## What it does not do

This package is a library of state machines, parsers and record types.
It does not capture packets from a network interface, dispatch packets
to worker threads, run processing threads, serialise records or write DCS
output files, and it provides no command-line program. Callers supply
packet data and consume the records it produces.

## Running the tests

Install the `test` extra and run `pytest` from the project root.