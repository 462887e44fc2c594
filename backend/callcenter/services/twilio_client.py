import os
import logging
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from twilio.jwt.access_token import AccessToken
from twilio.jwt.access_token.grants import VoiceGrant
from twilio.request_validator import RequestValidator
from twilio.rest import Client

# Set up logger
logger = logging.getLogger(__name__)

STATUS_CALLBACK_EVENTS = ["initiated", "ringing", "answered", "completed"]


def emergency_number() -> Optional[str]:
    return os.getenv("EMERGENCY_PHONE_NUMBER") or os.getenv("TWILIO_PHONE_NUMBER")


class TwilioConfigError(RuntimeError):
    pass


class TwilioClient:
    def __init__(self) -> None:
        self.account_sid = os.getenv("TWILIO_ACCOUNT_SID")
        self.auth_token = os.getenv("TWILIO_AUTH_TOKEN")
        self.api_key = os.getenv("TWILIO_API_KEY")
        self.api_secret = os.getenv("TWILIO_API_SECRET")
        self.twiml_app_sid = os.getenv("TWILIO_TWIML_APP_SID")
        self.phone_number = os.getenv("TWILIO_PHONE_NUMBER")
        self.identity = os.getenv("TWILIO_IDENTITY") or "user"
        self.simulated = (
            os.getenv("SIMULATE_TWILIO", "false").lower() == "true"
            or not self.account_sid
            or not self.auth_token
        )

        if self.simulated:
            logger.info("TwilioClient initialized in simulation mode (no REST credentials provided)")
        else:
            logger.info("TwilioClient initialized with account credentials")

    def issue_access_token(self) -> str:
        """Sign a Voice SDK token for the browser client."""
        missing = [
            name
            for name, value in (
                ("TWILIO_ACCOUNT_SID", self.account_sid),
                ("TWILIO_API_KEY", self.api_key),
                ("TWILIO_API_SECRET", self.api_secret),
            )
            if not value
        ]
        if missing:
            raise TwilioConfigError(f"Missing Twilio configuration: {', '.join(missing)}")

        token = AccessToken(self.account_sid, self.api_key, self.api_secret, identity=self.identity)
        grant = VoiceGrant(outgoing_application_sid=self.twiml_app_sid, incoming_allow=True)
        token.add_grant(grant)
        jwt = token.to_jwt()
        # Older SDKs returned bytes
        return jwt.decode("utf-8") if isinstance(jwt, bytes) else jwt

    def create_outbound_call(self, to: str, base_url: str) -> Dict[str, Any]:
        """Dial `to` and point Twilio back at this server's webhooks."""
        base_url = base_url.rstrip("/")
        logger.info(f"Attempting to place outbound call to {to}")

        if self.simulated:
            sid = f"CA{uuid4().hex}"
            logger.info(f"Simulated outbound call {sid} (no Twilio credentials)")
            return {"sid": sid, "status": "queued"}

        if not self.phone_number:
            logger.error("TWILIO_PHONE_NUMBER is missing. Set it to your Twilio number in E.164 format")
            raise TwilioConfigError("TWILIO_PHONE_NUMBER missing")

        client = Client(self.account_sid, self.auth_token)
        call = client.calls.create(
            url=f"{base_url}/api/voice",
            to=to,
            from_=self.phone_number,
            record=True,
            recording_status_callback=f"{base_url}/api/recording-status",
            recording_status_callback_event=["completed"],
            status_callback=f"{base_url}/api/call-status",
            status_callback_event=STATUS_CALLBACK_EVENTS,
        )
        logger.info(f"Outbound call created: {call.sid}")
        return {"sid": call.sid, "status": call.status}


def verify_signature(url: str, params: Mapping[str, Any], signature: str) -> bool:
    auth_token = os.getenv("TWILIO_AUTH_TOKEN")
    if not auth_token:
        return True  # allow in local dev
    return RequestValidator(auth_token).validate(url, dict(params), signature or "")
