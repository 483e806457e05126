from bras_collector.radius_session_manager import RadiusSessionManager
from bras_collector.records import RadiusRecord

NAS_IP = 0x0A000001


def request(rid=7, ip=NAS_IP, start=100.0, **kw):
    return RadiusRecord(request_code=4, radius_id=rid, client_ip=ip, start_time=start, **kw)


def response(rid=7, ip=NAS_IP, end=100.5, code=5, **kw):
    return RadiusRecord(reply_code=code, radius_id=rid, bras_ip=ip, end_time=end, **kw)


def test_request_then_response_is_merged():
    out = []
    mgr = RadiusSessionManager()
    mgr.on_packet(request(user_name="alice"), out.append)
    assert out == []
    assert mgr.pending_count() == 1
    mgr.on_packet(response(), out.append)
    assert mgr.pending_count() == 0
    assert len(out) == 1
    merged = out[0]
    assert merged.user_name == "alice"
    assert merged.start_time == 100.0
    assert merged.end_time == 100.5
    assert merged.reply_code == 5
    assert merged.request_code == 4


def test_response_without_request_is_emitted_as_is():
    out = []
    mgr = RadiusSessionManager()
    pkt = response(rid=9)
    mgr.on_packet(pkt, out.append)
    assert out == [pkt]
    assert mgr.pending_count() == 0


def test_retransmitted_request_replaces_pending():
    out = []
    mgr = RadiusSessionManager()
    mgr.on_packet(request(user_name="first"), out.append)
    mgr.on_packet(request(user_name="second"), out.append)
    assert mgr.pending_count() == 1
    mgr.on_packet(response(), out.append)
    assert out[0].user_name == "second"


def test_response_fills_only_empty_fields():
    out = []
    mgr = RadiusSessionManager()
    mgr.on_packet(request(session_timeout=3600), out.append)
    mgr.on_packet(
        response(framed_ip=0xC0A80001, reply_message="ok", session_timeout=60, idle_timeout=300),
        out.append,
    )
    merged = out[0]
    assert merged.framed_ip == 0xC0A80001
    assert merged.reply_message == "ok"
    assert merged.session_timeout == 3600
    assert merged.idle_timeout == 300


def test_different_ids_are_kept_apart():
    out = []
    mgr = RadiusSessionManager()
    mgr.on_packet(request(rid=1, user_name="a"), out.append)
    mgr.on_packet(request(rid=2, user_name="b"), out.append)
    assert mgr.pending_count() == 2
    mgr.on_packet(response(rid=2), out.append)
    assert [r.user_name for r in out] == ["b"]
    assert mgr.pending_count() == 1


def test_packet_that_is_neither_request_nor_response_is_ignored():
    out = []
    mgr = RadiusSessionManager()
    mgr.on_packet(RadiusRecord(request_code=2, radius_id=1, client_ip=NAS_IP), out.append)
    assert out == []
    assert mgr.pending_count() == 0


def test_purge_expired_emits_old_requests_only():
    out = []
    mgr = RadiusSessionManager(timeout_us=5_000_000)
    mgr.on_packet(request(start=1.0), out.append)
    mgr.purge_expired(3_000_000, out.append)
    assert out == []
    assert mgr.pending_count() == 1
    mgr.purge_expired(6_000_000, out.append)
    assert len(out) == 1
    assert out[0].reply_code == 0
    assert out[0].end_time == 0.0
    assert mgr.pending_count() == 0


def test_purge_all_flushes_everything():
    out = []
    mgr = RadiusSessionManager()
    for rid in range(5):
        mgr.on_packet(request(rid=rid), out.append)
    mgr.purge_all(out.append)
    assert sorted(r.radius_id for r in out) == list(range(5))
    assert mgr.pending_count() == 0


def test_capacity_rounds_up_and_full_table_drops():
    out = []
    mgr = RadiusSessionManager(capacity=3)
    for rid in range(10):
        mgr.on_packet(request(rid=rid), out.append)
    assert mgr.pending_count() == 4
    assert out == []