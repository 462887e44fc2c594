import logging
from typing import Any, Dict

from ..db import get_db
from .openai_client import OpenAIClient

logger = logging.getLogger(__name__)


async def process_transcription_and_store(call_sid: str, transcription_text: str) -> Dict[str, Any]:
    """Analyze a voicemail transcription and merge the result into the call record."""
    client = OpenAIClient()
    analysis = await client.analyze_call(transcription_text)
    logger.info(f"Call analysis for {call_sid}: {analysis}")

    db = get_db()
    updates: Dict[str, Any] = {
        "transcription": transcription_text,
        "summary": analysis.get("summary"),
        "category": analysis.get("category"),
        "priority": analysis.get("priority"),
        "follow_up_required": analysis.get("follow_up_required"),
    }
    if not db.get_call(call_sid):
        # Transcription arrived before (or without) the inbound webhook
        updates["status"] = "voicemail"
    db.upsert_call(call_sid, updates)
    return analysis
