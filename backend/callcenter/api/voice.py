from typing import Optional
from fastapi import APIRouter, Depends, Form, Response
from ..db import get_db
from ..services import ivr
from ..services.escalation import is_emergency_request
from ..services.twilio_client import emergency_number
from .webhook import verify_twilio_request
import logging

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_twilio_request)])


def twiml_response(twiml) -> Response:
    return Response(content=str(twiml), media_type="text/xml")


@router.post("/voice")
async def incoming_call(
    call_sid: Optional[str] = Form(default=None, alias="CallSid"),
    from_number: Optional[str] = Form(default=None, alias="From"),
):
    logger.info(f"Incoming call {call_sid} from {from_number}")
    if call_sid:
        get_db().create_call(call_sid, phone_number=from_number, status="missed")
    return twiml_response(ivr.welcome_menu())


@router.post("/handle-input")
async def handle_input(
    call_sid: Optional[str] = Form(default=None, alias="CallSid"),
    digits: Optional[str] = Form(default=None, alias="Digits"),
    speech_result: Optional[str] = Form(default=None, alias="SpeechResult"),
):
    db = get_db()
    call = db.get_call(call_sid) if call_sid else None
    if not call:
        logger.warning(f"Menu input for unknown call {call_sid}")
        return twiml_response(ivr.empty())

    logger.info(f"Menu input for {call_sid}: digits={digits!r} speech={speech_result!r}")
    if digits == "1" or is_emergency_request(speech_result):
        db.upsert_call(call_sid, {"priority": "high", "category": "emergency"})
        twiml = ivr.emergency_transfer(emergency_number())
    elif digits == "2":
        db.upsert_call(call_sid, {"priority": "medium", "category": "general"})
        twiml = ivr.general_inquiry()
    else:
        twiml = ivr.redirect_to_voicemail()
    return twiml_response(twiml)


@router.post("/voicemail")
async def voicemail(call_sid: Optional[str] = Form(default=None, alias="CallSid")):
    db = get_db()
    if call_sid and db.get_call(call_sid):
        db.upsert_call(call_sid, {"status": "voicemail"})
    return twiml_response(ivr.voicemail())
