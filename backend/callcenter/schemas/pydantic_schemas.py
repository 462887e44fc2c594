from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


CallStatus = Literal["missed", "answered", "voicemail"]
Priority = Literal["low", "medium", "high"]


class CamelModel(BaseModel):
    # Wire format is camelCase (callSid, recordingUrl, ...); storage rows are snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CallRecord(CamelModel):
    call_sid: str
    timestamp: datetime
    status: CallStatus = "missed"
    phone_number: Optional[str] = None
    duration: Optional[int] = None
    recording_url: Optional[str] = None
    transcription: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[Priority] = None
    follow_up_required: bool = False
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CallUpdate(CamelModel):
    notes: Optional[str] = None
    follow_up_required: Optional[bool] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None


class CallAnalysis(CamelModel):
    summary: str = ""
    category: str = ""
    priority: Priority = "low"
    follow_up_required: bool = False


class OutboundCallRequest(BaseModel):
    to: str = Field(min_length=1)


class OutboundCallResponse(CamelModel):
    success: bool = True
    call_sid: str


class TokenResponse(BaseModel):
    token: str


class CallListResponse(BaseModel):
    success: bool = True
    calls: List[CallRecord]


class CallDetailResponse(BaseModel):
    success: bool = True
    data: CallRecord


class TranscriptionResponse(CamelModel):
    success: bool = True
    analysis: CallAnalysis
    call_sid: str


class CallStats(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    follow_up_required: int


class CallStatsResponse(BaseModel):
    success: bool = True
    stats: CallStats
