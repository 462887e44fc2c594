from datetime import datetime, timezone
from types import SimpleNamespace

from callcenter.db import SupabaseDB


class FakeQuery:
    def __init__(self, table, ops):
        self.table = table
        self.ops = ops
        self.ops.append(("table", table))

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        self.ops.append(("execute",))
        return SimpleNamespace(data=self.table.next_result())


class FakeTable:
    def __init__(self, results):
        self.results = list(results)

    def next_result(self):
        return self.results.pop(0) if self.results else []


class FakeSupabase:
    def __init__(self, *results):
        self.ops = []
        self.calls_table = FakeTable(results)

    def table(self, name):
        assert name == "calls"
        return FakeQuery(self.calls_table, self.ops)


def _calls(ops, name):
    return [op for op in ops if op[0] == name]


def test_list_calls_builds_filtered_query():
    client = FakeSupabase([{"call_sid": "CA1"}])
    db = SupabaseDB(client)
    start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    end = datetime(2024, 5, 2, tzinfo=timezone.utc)

    rows = db.list_calls(status="voicemail", priority="high", category="emergency", start_date=start, end_date=end)

    assert rows == [{"call_sid": "CA1"}]
    assert _calls(client.ops, "eq") == [
        ("eq", ("status", "voicemail"), {}),
        ("eq", ("priority", "high"), {}),
        ("eq", ("category", "emergency"), {}),
    ]
    assert _calls(client.ops, "gte") == [("gte", ("timestamp", start.isoformat()), {})]
    assert _calls(client.ops, "lte") == [("lte", ("timestamp", end.isoformat()), {})]
    assert _calls(client.ops, "order") == [("order", ("timestamp",), {"desc": True})]


def test_list_calls_without_filters_only_orders():
    client = FakeSupabase([])
    rows = SupabaseDB(client).list_calls()

    assert rows == []
    assert not _calls(client.ops, "eq")
    assert len(_calls(client.ops, "order")) == 1


def test_upsert_unknown_call_inserts_then_updates():
    stored = {"call_sid": "CA2", "status": "voicemail", "recording_url": "https://x/RE"}
    # lookup (upsert), lookup (create), insert, update
    client = FakeSupabase([], [], [{"call_sid": "CA2", "status": "voicemail"}], [stored])
    db = SupabaseDB(client)

    row = db.upsert_call("CA2", {"status": "voicemail", "recording_url": "https://x/RE", "duration": None})

    assert row == stored
    inserted = _calls(client.ops, "insert")[0][1][0]
    assert inserted["call_sid"] == "CA2"
    assert inserted["status"] == "voicemail"
    assert inserted["follow_up_required"] is False
    updated = _calls(client.ops, "update")[0][1][0]
    assert updated["recording_url"] == "https://x/RE"
    assert "duration" not in updated
    assert "status" not in updated
    assert "updated_at" in updated
    assert ("eq", ("call_sid", "CA2"), {}) in client.ops


def test_upsert_known_call_only_updates():
    existing = {"call_sid": "CA3", "status": "missed"}
    client = FakeSupabase([existing], [{**existing, "notes": "x"}])

    row = SupabaseDB(client).upsert_call("CA3", {"notes": "x"})

    assert row["notes"] == "x"
    assert not _calls(client.ops, "insert")


def test_create_call_is_idempotent():
    existing = {"call_sid": "CA4", "status": "answered"}
    client = FakeSupabase([existing])

    assert SupabaseDB(client).create_call("CA4", phone_number="+401") == existing
    assert not _calls(client.ops, "insert")


def test_get_call_missing_returns_none():
    assert SupabaseDB(FakeSupabase([])).get_call("CA5") is None


def test_call_stats_counts_rows():
    client = FakeSupabase(
        [
            {"status": "voicemail", "priority": "high", "follow_up_required": True},
            {"status": "missed", "priority": None, "follow_up_required": False},
        ]
    )

    stats = SupabaseDB(client).call_stats()

    assert stats == {
        "total": 2,
        "by_status": {"missed": 1, "answered": 0, "voicemail": 1},
        "by_priority": {"low": 0, "medium": 0, "high": 1},
        "follow_up_required": 1,
    }
    assert ("select", ("status,priority,follow_up_required",), {}) in client.ops
