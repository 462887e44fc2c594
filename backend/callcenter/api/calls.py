from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from typing import Optional
from ..schemas.pydantic_schemas import (
    CallDetailResponse,
    CallListResponse,
    CallStatsResponse,
    CallUpdate,
    OutboundCallRequest,
    OutboundCallResponse,
)
from ..db import get_db, parse_timestamp
from ..services.twilio_client import TwilioClient
from .webhook import public_base_url
import logging

# Set up logger
logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {"success": False, "error": "Call data not found"}


def _date_param(name: str, value: Optional[str]):
    try:
        return parse_timestamp(value) if value else None
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid {name}: {value}")


@router.post("/call", response_model=OutboundCallResponse)
async def start_call(payload: OutboundCallRequest, request: Request):
    logger.info(f"Starting outbound call to {payload.to}")
    client = TwilioClient()
    try:
        call = await run_in_threadpool(client.create_outbound_call, payload.to, public_base_url(request))
    except Exception as e:
        logger.error(f"Error making call: {str(e)}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    get_db().create_call(call["sid"], phone_number=payload.to, status="missed")
    return {"success": True, "call_sid": call["sid"]}


@router.get("/calls", response_model=CallListResponse)
async def list_calls(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
):
    db = get_db()
    calls = db.list_calls(
        status=status,
        priority=priority,
        category=category,
        start_date=_date_param("startDate", start_date),
        end_date=_date_param("endDate", end_date),
    )
    return {"success": True, "calls": calls}


@router.get("/calls/stats", response_model=CallStatsResponse)
async def call_stats():
    return {"success": True, "stats": get_db().call_stats()}


@router.get("/calls/{call_sid}", response_model=CallDetailResponse)
async def get_call(call_sid: str):
    call = get_db().get_call(call_sid)
    if not call:
        return JSONResponse(status_code=404, content=NOT_FOUND)
    return {"success": True, "data": call}


@router.patch("/calls/{call_sid}", response_model=CallDetailResponse)
async def update_call(call_sid: str, body: CallUpdate):
    db = get_db()
    if not db.get_call(call_sid):
        return JSONResponse(status_code=404, content=NOT_FOUND)
    updated = db.upsert_call(call_sid, body.model_dump(exclude_none=True))
    logger.info(f"Call {call_sid} updated by operator: {sorted(body.model_dump(exclude_none=True))}")
    return {"success": True, "data": updated}
