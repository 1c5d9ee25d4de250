# Emergency detection and the disclaimer that goes in front of urgent answers.

from __future__ import annotations

URGENCY_KEYWORDS = (
    "emergency", "urgent", "severe pain", "can't breathe", "bleeding heavily",
    "fever over 101", "fever over 38", "high fever", "chest pain", "fainting",
    "unconscious", "seizure", "allergic reaction", "swelling throat",
    "difficulty breathing", "blood in stool", "can't keep anything down",
    "severe diarrhea", "confusion", "sudden weakness", "stroke",
)

EMERGENCY_BANNER = """\
⚠️ **URGENT - SEEK IMMEDIATE CARE**

The symptoms you're describing may require immediate medical attention. Please:
1. Contact your oncology team's emergency line immediately
2. If you can't reach them, go to the emergency room
3. Don't wait to see if symptoms improve"""

SEPARATOR = "\n\n---\n\n"


def detect_urgency(message: str) -> bool:
    """Substring match, so "stroke" also fires inside "heatstroke"."""
    lowered = (message or "").lower()
    return any(kw in lowered for kw in URGENCY_KEYWORDS)


def add_medical_disclaimer(answer: str, is_urgent: bool) -> str:
    if is_urgent:
        return f"{EMERGENCY_BANNER}{SEPARATOR}{answer}"
    return answer
