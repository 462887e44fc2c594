EMERGENCY_KEYWORDS = [
    "urgență",
    "urgenta",
    "accident",
    "ambulanță",
    "ambulanta",
    "incendiu",
    "foc",
    "sânger",
    "rănit",
    "ranit",
    "nu respiră",
    "ajutor",
]


def detect_emergency_keywords(text: str) -> bool:
    t = (text or "").lower()
    return any(k in t for k in EMERGENCY_KEYWORDS)


def is_emergency_request(speech_result: str) -> bool:
    """Spoken IVR input asking for the emergency line."""
    t = (speech_result or "").lower()
    return "urgență" in t or "urgenta" in t
