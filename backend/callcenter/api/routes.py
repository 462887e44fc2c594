from fastapi import APIRouter
from .access_token import router as token_router
from .voice import router as voice_router
from .webhook import router as webhook_router
from .calls import router as calls_router

api_router = APIRouter()
api_router.include_router(token_router, tags=["token"])
api_router.include_router(voice_router, tags=["voice"])
api_router.include_router(webhook_router, tags=["twilio-callbacks"])
api_router.include_router(calls_router, tags=["calls"])
