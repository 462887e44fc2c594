from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import os
import logging

# Lightweight adapter over Supabase client. For demo, keep an in-memory fallback when SUPABASE_URL is missing.
from supabase import create_client, Client

logger = logging.getLogger(__name__)

CALL_STATUSES = ("missed", "answered", "voicemail")
PRIORITIES = ("low", "medium", "high")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _clean(updates: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (updates or {}).items() if v is not None}


def summarize_calls(calls: List[Dict[str, Any]]) -> Dict[str, Any]:
    by_status = {s: 0 for s in CALL_STATUSES}
    by_priority = {p: 0 for p in PRIORITIES}
    follow_up = 0
    for call in calls:
        status = call.get("status")
        if status in by_status:
            by_status[status] += 1
        priority = call.get("priority")
        if priority in by_priority:
            by_priority[priority] += 1
        if call.get("follow_up_required"):
            follow_up += 1
    return {
        "total": len(calls),
        "by_status": by_status,
        "by_priority": by_priority,
        "follow_up_required": follow_up,
    }


class InMemoryDB:
    def __init__(self) -> None:
        self.calls: Dict[str, Dict[str, Any]] = {}

    def reset(self) -> None:
        self.calls.clear()

    def create_call(self, call_sid: str, phone_number: Optional[str] = None, status: str = "missed") -> Dict[str, Any]:
        existing = self.calls.get(call_sid)
        if existing:
            return dict(existing)
        now = _now()
        obj = {
            "call_sid": call_sid,
            "timestamp": now,
            "status": status,
            "phone_number": phone_number,
            "follow_up_required": False,
            "created_at": now,
            "updated_at": now,
        }
        self.calls[call_sid] = obj
        return dict(obj)

    def get_call(self, call_sid: str) -> Optional[Dict[str, Any]]:
        call = self.calls.get(call_sid)
        return dict(call) if call else None

    def upsert_call(self, call_sid: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        payload = _clean(updates)
        if call_sid not in self.calls:
            self.create_call(call_sid, status=payload.pop("status", "missed"))
        obj = self.calls[call_sid]
        obj.update(payload)
        obj["updated_at"] = _now()
        return dict(obj)

    def list_calls(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        items = [dict(c) for c in self.calls.values()]
        if status:
            items = [c for c in items if c.get("status") == status]
        if priority:
            items = [c for c in items if c.get("priority") == priority]
        if category:
            items = [c for c in items if c.get("category") == category]
        if start_date:
            items = [c for c in items if c["timestamp"] >= start_date]
        if end_date:
            items = [c for c in items if c["timestamp"] <= end_date]
        items.sort(key=lambda c: c["timestamp"], reverse=True)
        return items

    def call_stats(self) -> Dict[str, Any]:
        return summarize_calls(list(self.calls.values()))


class SupabaseDB:
    def __init__(self, client: Client) -> None:
        self.client = client

    def _first(self, call_sid: str) -> Optional[Dict[str, Any]]:
        res = self.client.table("calls").select("*").eq("call_sid", call_sid).limit(1).execute()
        return (res.data or [None])[0]

    def create_call(self, call_sid: str, phone_number: Optional[str] = None, status: str = "missed") -> Dict[str, Any]:
        existing = self._first(call_sid)
        if existing:
            return existing
        row = {
            "call_sid": call_sid,
            "timestamp": _now().isoformat(),
            "status": status,
            "phone_number": phone_number,
            "follow_up_required": False,
        }
        res = self.client.table("calls").insert(row).execute()
        return (res.data or [row])[0]

    def get_call(self, call_sid: str) -> Optional[Dict[str, Any]]:
        return self._first(call_sid)

    def upsert_call(self, call_sid: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        payload = _clean(updates)
        if not self._first(call_sid):
            self.create_call(call_sid, status=payload.pop("status", "missed"))
        payload["updated_at"] = _now().isoformat()
        res = self.client.table("calls").update(payload).eq("call_sid", call_sid).execute()
        return (res.data or [None])[0] or self._first(call_sid)

    def list_calls(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        query = self.client.table("calls").select("*")
        if status:
            query = query.eq("status", status)
        if priority:
            query = query.eq("priority", priority)
        if category:
            query = query.eq("category", category)
        if start_date:
            query = query.gte("timestamp", start_date.isoformat())
        if end_date:
            query = query.lte("timestamp", end_date.isoformat())
        res = query.order("timestamp", desc=True).execute()
        return res.data or []

    def call_stats(self) -> Dict[str, Any]:
        res = self.client.table("calls").select("status,priority,follow_up_required").execute()
        return summarize_calls(res.data or [])


_client: Optional[Client] = None
_db_instance: Optional[Any] = None


def get_db():
    global _client, _db_instance

    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if url and key:
        if _client is None:
            _client = create_client(url, key)
        if _db_instance is None or not isinstance(_db_instance, SupabaseDB):
            logger.info("Using Supabase call storage")
            _db_instance = SupabaseDB(_client)
        return _db_instance
    if _db_instance is None or not isinstance(_db_instance, InMemoryDB):
        logger.info("Using in-memory call storage (SUPABASE_URL not set)")
        _db_instance = InMemoryDB()
    return _db_instance
