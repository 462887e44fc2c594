from fastapi import APIRouter
from fastapi.responses import JSONResponse
from ..schemas.pydantic_schemas import TokenResponse
from ..services.twilio_client import TwilioClient
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/token", response_model=TokenResponse)
async def issue_token():
    try:
        token = TwilioClient().issue_access_token()
    except Exception as e:
        logger.error(f"Failed to issue access token: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return {"token": token}
