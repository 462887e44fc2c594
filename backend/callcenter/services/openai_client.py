import os
import re
import logging
from typing import Any, Dict, List
from tenacity import retry, wait_exponential, stop_after_attempt
from openai import AsyncOpenAI

from .escalation import detect_emergency_keywords

logger = logging.getLogger(__name__)


ANALYSIS_SYSTEM_PROMPT = (
    "Ești un asistent specializat în analiza apelurilor pentru o instituție publică din România.\n"
    "Trebuie să:\n"
    "1. Creezi un rezumat concis al conversației\n"
    "2. Determini categoria apelului (ex: urgență medicală, reclamație, informații generale, etc.)\n"
    "3. Evaluezi prioritatea (low/medium/high) bazată pe urgența și importanța situației\n"
    "4. Determini dacă este necesară o urmărire ulterioară\n"
    "Răspunde în română, dar folosește valorile specificate pentru priority.\n"
    "Folosește exact formatul, câte o linie pentru fiecare câmp:\n"
    "Rezumat: <text>\n"
    "Categorie: <text>\n"
    "Prioritate: <low|medium|high>\n"
    "Urmărire: <da|nu>"
)

ANALYSIS_FAILED_MESSAGE = "Nu s-a putut analiza apelul"

FOLLOW_UP_HINTS = ["sunați", "sunati", "contactați", "contactati", "înapoi", "inapoi", "răspuns", "raspuns"]

SIMULATED_SUMMARY_LENGTH = 200


class CallAnalysisError(Exception):
    pass


def _field_value(line: str) -> str:
    return line.split(":", 1)[1].strip().strip("*_ ").strip()


def parse_analysis(content: str) -> Dict[str, Any]:
    """Read the `Label: value` lines of a model answer into analysis fields."""
    summary = ""
    category = ""
    priority = "low"
    follow_up_required = False

    for line in (content or "").split("\n"):
        lowered = line.lower()
        if "rezumat:" in lowered:
            summary = _field_value(line)
        elif "categorie:" in lowered:
            category = _field_value(line)
        elif "prioritate:" in lowered:
            value = _field_value(line).lower()
            priority = "high" if "high" in value else "medium" if "medium" in value else "low"
        elif "urmărire:" in lowered or "urmarire:" in lowered:
            follow_up_required = "da" in _field_value(line).lower()

    return {
        "summary": summary,
        "category": category,
        "priority": priority,
        "follow_up_required": follow_up_required,
    }


def simulate_analysis(transcription: str) -> Dict[str, Any]:
    text = re.sub(r"\s+", " ", transcription or "").strip()
    lowered = text.lower()
    emergency = detect_emergency_keywords(lowered)
    follow_up = emergency or any(h in lowered for h in FOLLOW_UP_HINTS)
    summary = text if len(text) <= SIMULATED_SUMMARY_LENGTH else text[:SIMULATED_SUMMARY_LENGTH].rstrip() + "..."
    return {
        "summary": summary,
        "category": "urgență" if emergency else "informații generale",
        "priority": "high" if emergency else "medium" if follow_up else "low",
        "follow_up_required": follow_up,
    }


class OpenAIClient:
    def __init__(self) -> None:
        openai_key = os.getenv("OPENAI_API_KEY")

        if openai_key and len(openai_key.strip()) > 0:
            self.client = AsyncOpenAI(api_key=openai_key)
            self.model = os.getenv("OPENAI_MODEL", "gpt-4")
            self.simulated = False
            logger.info(f"OpenAIClient: using model {self.model}")
        else:
            # No API key, use keyword heuristics
            self.client = None
            self.model = None
            self.simulated = True
            logger.info("OpenAIClient: using simulated analysis (no OPENAI_API_KEY)")

    @retry(wait=wait_exponential(min=1, max=10), stop=stop_after_attempt(3), reraise=True)
    async def _complete(self, messages: List[Dict[str, str]]) -> str:
        chat = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=0.7,
            max_tokens=500,
        )
        return chat.choices[0].message.content or ""

    async def analyze_call(self, transcription: str) -> Dict[str, Any]:
        if self.simulated:
            return simulate_analysis(transcription)

        messages = [
            {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": f"Analizează următoarea conversație telefonică: {transcription}"},
        ]
        try:
            content = await self._complete(messages)
        except Exception as e:
            logger.error(f"Error analyzing call: {type(e).__name__}: {str(e)}")
            raise CallAnalysisError(ANALYSIS_FAILED_MESSAGE) from e
        return parse_analysis(content)
