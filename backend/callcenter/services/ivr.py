"""TwiML documents for the inbound call menu and voicemail."""
from twilio.twiml.voice_response import VoiceResponse

LANGUAGE = "ro-RO"
VOICE = "Polly.Carmen"

HANDLE_INPUT_PATH = "/api/handle-input"
VOICEMAIL_PATH = "/api/voicemail"
RECORDING_STATUS_PATH = "/api/recording-status"
TRANSCRIPTION_PATH = "/api/transcription"

WELCOME_PROMPT = (
    "Bună ziua! Ați sunat la serviciul de asistență. Apăsați 1 pentru urgențe, "
    "2 pentru informații generale, sau așteptați să înregistrați un mesaj."
)
EMERGENCY_PROMPT = "Vă vom redirecționa către serviciul de urgență. Vă rugăm să așteptați."
GENERAL_PROMPT = (
    "Vă rugăm să lăsați un mesaj cu întrebarea dumneavoastră și vă vom contacta "
    "în cel mai scurt timp."
)
VOICEMAIL_PROMPT = (
    "Vă rugăm să lăsați un mesaj după ton. Mesajul dumneavoastră va fi procesat "
    "și veți fi contactat în cel mai scurt timp."
)

MAX_RECORDING_SECONDS = 300


def _say(twiml, message: str) -> None:
    twiml.say(message, language=LANGUAGE, voice=VOICE)


def welcome_menu() -> VoiceResponse:
    twiml = VoiceResponse()
    gather = twiml.gather(
        input="speech dtmf",
        timeout=3,
        num_digits=1,
        action=HANDLE_INPUT_PATH,
        language=LANGUAGE,
    )
    _say(gather, WELCOME_PROMPT)
    # No input: fall through to voicemail
    twiml.redirect(VOICEMAIL_PATH)
    return twiml


def emergency_transfer(number: str) -> VoiceResponse:
    twiml = VoiceResponse()
    _say(twiml, EMERGENCY_PROMPT)
    twiml.dial(number)
    return twiml


def general_inquiry() -> VoiceResponse:
    twiml = VoiceResponse()
    _say(twiml, GENERAL_PROMPT)
    twiml.redirect(VOICEMAIL_PATH)
    return twiml


def redirect_to_voicemail() -> VoiceResponse:
    twiml = VoiceResponse()
    twiml.redirect(VOICEMAIL_PATH)
    return twiml


def voicemail() -> VoiceResponse:
    twiml = VoiceResponse()
    _say(twiml, VOICEMAIL_PROMPT)
    twiml.record(
        action=RECORDING_STATUS_PATH,
        transcribe=True,
        transcribe_callback=TRANSCRIPTION_PATH,
        recording_status_callback=RECORDING_STATUS_PATH,
        recording_status_callback_event="completed",
        max_length=MAX_RECORDING_SECONDS,
        timeout=5,
        play_beep=True,
    )
    return twiml


def empty() -> VoiceResponse:
    return VoiceResponse()
