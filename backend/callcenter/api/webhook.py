from typing import Optional
from fastapi import APIRouter, Depends, Form, Request, HTTPException, Response
from fastapi.responses import JSONResponse
from ..db import get_db
from ..schemas.pydantic_schemas import TranscriptionResponse
from ..services.twilio_client import verify_signature
from ..services.openai_client import CallAnalysisError
from ..services.transcript_processor import process_transcription_and_store
import os
import logging

# Set up logger
logger = logging.getLogger(__name__)

router = APIRouter()


def public_base_url(request: Request) -> str:
    configured = os.getenv("PUBLIC_BASE_URL")
    if configured:
        return configured.rstrip("/")
    # Must match the URL Twilio was given; signatures are computed over it
    proto = request.headers.get("x-forwarded-proto", "https").split(",")[0].strip()
    return f"{proto}://{request.headers.get('host', 'localhost')}"


async def verify_twilio_request(request: Request) -> None:
    """Reject webhook calls that do not carry a valid X-Twilio-Signature."""
    form = await request.form()
    url = public_base_url(request) + request.url.path
    if request.url.query:
        url += f"?{request.url.query}"
    sig = request.headers.get("x-twilio-signature", "")
    if not verify_signature(url, form, sig):
        logger.warning(f"Twilio signature verification failed for {request.url.path}")
        raise HTTPException(status_code=403, detail="Invalid signature")


@router.post("/recording-status", dependencies=[Depends(verify_twilio_request)])
async def recording_status(
    call_sid: Optional[str] = Form(default=None, alias="CallSid"),
    recording_url: Optional[str] = Form(default=None, alias="RecordingUrl"),
    recording_status: Optional[str] = Form(default=None, alias="RecordingStatus"),
    recording_duration: Optional[int] = Form(default=None, alias="RecordingDuration"),
):
    if recording_status == "completed" and call_sid:
        logger.info(f"Recording completed for {call_sid}: {recording_url}")
        get_db().upsert_call(call_sid, {"recording_url": recording_url, "duration": recording_duration})
    return Response(status_code=200)


@router.post("/call-status", dependencies=[Depends(verify_twilio_request)])
async def call_status(
    call_sid: Optional[str] = Form(default=None, alias="CallSid"),
    status: Optional[str] = Form(default=None, alias="CallStatus"),
    duration: Optional[int] = Form(default=None, alias="CallDuration"),
):
    logger.info(f"Call status for {call_sid}: {status}")
    db = get_db()
    call = db.get_call(call_sid) if call_sid else None
    if call:
        updates = {"duration": duration}
        if status == "in-progress" and call.get("status") != "voicemail":
            updates["status"] = "answered"
        db.upsert_call(call_sid, updates)
    return Response(status_code=200)


@router.post("/transcription", response_model=TranscriptionResponse, dependencies=[Depends(verify_twilio_request)])
async def transcription(
    call_sid: Optional[str] = Form(default=None, alias="CallSid"),
    transcription_text: Optional[str] = Form(default=None, alias="TranscriptionText"),
):
    if not transcription_text or not call_sid:
        error = "No transcription text provided" if not transcription_text else "No call SID provided"
        logger.warning(f"Transcription callback rejected: {error}")
        return JSONResponse(status_code=400, content={"success": False, "error": error})

    logger.info(f"Transcription received for {call_sid}")
    try:
        analysis = await process_transcription_and_store(call_sid, transcription_text)
    except CallAnalysisError as e:
        logger.error(f"Error in transcription handler: {str(e)}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {"success": True, "analysis": analysis, "call_sid": call_sid}
