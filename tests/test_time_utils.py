import re
import time

import pytest

from bras_collector.time_utils import (
    format_file_timestamp,
    hour_round_time,
    min_round_time,
    ns_to_sec,
)


@pytest.mark.parametrize("t", [0.0, 59.999, 3600.5, 1700000123.456789, 1700003599.9])
def test_hour_round_invariants(t):
    r = hour_round_time(t)
    assert r % 3600 == 0
    assert 0 <= t - r < 3600


@pytest.mark.parametrize("t", [0.0, 59.999, 3600.5, 1700000123.456789])
def test_min_round_invariants(t):
    r = min_round_time(t)
    assert r % 60 == 0
    assert 0 <= t - r < 60


def test_rounding_is_idempotent():
    t = 1700000123.5
    assert hour_round_time(hour_round_time(t)) == hour_round_time(t)
    assert min_round_time(min_round_time(t)) == min_round_time(t)
    assert hour_round_time(t) <= min_round_time(t)


def test_ns_to_sec():
    assert ns_to_sec(1_500_000_000) == pytest.approx(1.5)
    assert ns_to_sec(0) == 0.0


def test_file_timestamp_shape_and_round_trip():
    stamp_sec = 1700000040
    text = format_file_timestamp(stamp_sec)
    assert re.fullmatch(r"\d{8}T\d{6}", text)
    parsed = time.strptime(text, "%Y%m%dT%H%M%S")
    assert int(time.mktime(parsed)) == stamp_sec