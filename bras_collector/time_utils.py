"""Timestamp rounding and file-name timestamp helpers."""

from __future__ import annotations

import time

_U32 = 0xFFFFFFFF


def hour_round_time(start_time_sec: float) -> int:
    """Start of the hour containing ``start_time_sec``, in whole seconds."""
    sec = int(start_time_sec)
    return (sec - sec % 3600) & _U32


def min_round_time(start_time_sec: float) -> int:
    """Start of the minute containing ``start_time_sec``, in whole seconds."""
    sec = int(start_time_sec)
    return (sec - sec % 60) & _U32


def ns_to_sec(ns: int) -> float:
    """Convert nanoseconds to seconds."""
    return ns / 1e9


def format_file_timestamp(min_round_sec: int) -> str:
    """Local-time ``YYYYMMDDTHHMMSS`` stamp used in output file names."""
    return time.strftime("%Y%m%dT%H%M%S", time.localtime(min_round_sec))