"""Shared constants, packet/thread enums and a bounded single-producer queue."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Generic, TypeVar

MAX_PORTS = 4
MAX_QUEUES = 32
MAX_WORKERS = 64
BURST_SIZE = 64
MBUF_CACHE_SIZE = 512
MBUF_POOL_SIZE = 524288
RING_SIZE = 16384
FLOW_TABLE_CAP = 1 << 20
FLOW_TIMEOUT_US = 120 * 1_000_000
PURGE_INTERVAL_US = 5 * 1_000_000
FILE_ROTATE_SEC = 60

PROTO_ICMP = 1
PROTO_TCP = 6
PROTO_UDP = 17


class PktType(IntEnum):
    """Packet class assigned by the dispatcher."""

    USER = 0
    RADIUS = 1
    PPPOE = 2
    DNS = 3
    INVALID = 0xFF


class Direction(IntEnum):
    """Traffic direction relative to the subscriber."""

    UPSTREAM = 0
    DOWNSTREAM = 1
    UNKNOWN = 0xFF


class ThreadState(Enum):
    """Lifecycle state of a processing thread."""

    IDLE = 0
    RUNNING = 1
    STOPPED = 2
    ERROR = 3


T = TypeVar("T")


class SpscQueue(Generic[T]):
    """Fixed-size ring queue for one producer and one consumer.

    The capacity must be a power of two; one slot is kept free, so at most
    ``capacity - 1`` items are held at a time.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 2 or capacity & (capacity - 1):
            raise ValueError(f"capacity must be a power of 2, got {capacity}")
        self._mask = capacity - 1
        self._buf: list[T | None] = [None] * capacity
        self._head = 0
        self._tail = 0

    def push(self, value: T) -> bool:
        """Append ``value``; return False (and drop it) if the queue is full."""
        nxt = (self._head + 1) & self._mask
        if nxt == self._tail:
            return False
        self._buf[self._head] = value
        self._head = nxt
        return True

    def pop(self) -> T:
        """Remove and return the oldest item; raise IndexError when empty."""
        if self._tail == self._head:
            raise IndexError("pop from empty queue")
        value = self._buf[self._tail]
        self._buf[self._tail] = None
        self._tail = (self._tail + 1) & self._mask
        return value  # type: ignore[return-value]

    def __len__(self) -> int:
        return (self._head - self._tail) & self._mask

    def empty(self) -> bool:
        """True when no item is queued."""
        return len(self) == 0