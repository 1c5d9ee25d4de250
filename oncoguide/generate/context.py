"""
Prompt assembly.

Builds the user prompt from labeled sections in a fixed order:
context header, patient profile, reference sources (or a notice that none
were found), recent conversation, the question, and response guidelines.
Sections whose source is absent are left out entirely. Pure string work.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from oncoguide.search.types import QueryType

from .types import Message, PatientContext

CONTEXT_HEADER = "=== CONTEXT FOR ANSWERING ==="

NO_SOURCES_NOTICE = "⚠️ NOTE: No directly relevant medical sources were found for this query."

FOCUS_INSTRUCTIONS: Dict[str, str] = {
    "treatment": "Focus on: Specific treatment regimens, drug names, treatment sequences, duration of therapy, and what to expect during treatment.",
    "side_effect": "Focus on: Common and serious side effects, practical management strategies, when to call the doctor, and preventive measures.",
    "prognosis": "Focus on: Stage-specific information, prognostic factors, survival statistics (with appropriate context), and factors that influence outcomes.",
    "diagnosis": "Focus on: Explaining test results, staging criteria, what different findings mean, and next steps in the diagnostic workup.",
    "screening": "Focus on: Screening recommendations by age and risk level, screening test options, and prevention strategies.",
    "general": "Focus on: Providing comprehensive, accurate information that addresses the patient's underlying concern.",
}

GENERAL_REMINDERS = """\
Remember to:
1. Be specific - include actual names, numbers, and timeframes
2. Be accurate - only state what's supported by the sources
3. Be helpful - give actionable information
4. Be caring - acknowledge the patient's situation with empathy"""


def format_patient_context(profile: PatientContext) -> str:
    """One bullet per populated field, empty string when nothing is set."""
    parts: List[str] = []
    if profile.cancer_type:
        parts.append(f"• Cancer Type: {profile.cancer_type}")
    if profile.cancer_stage:
        parts.append(f"• Stage: {profile.cancer_stage}")
    if profile.diagnosis_date:
        parts.append(f"• Diagnosis Date: {profile.diagnosis_date}")
    if profile.age:
        parts.append(f"• Age: {profile.age}")
    if profile.gender:
        parts.append(f"• Gender: {profile.gender}")
    if profile.current_treatments:
        parts.append(f"• Current Treatments: {', '.join(profile.current_treatments)}")
    if profile.medications:
        parts.append(f"• Medications: {', '.join(profile.medications)}")
    if profile.symptoms:
        parts.append(f"• Current Symptoms: {', '.join(profile.symptoms)}")
    if profile.biomarkers:
        markers = ", ".join(f"{k}: {v}" for k, v in profile.biomarkers.items())
        parts.append(f"• Biomarkers: {markers}")
    return "\n".join(parts)


def chronological(recent_first: Sequence[Message]) -> List[Message]:
    """History stores hand back newest first; prompts read oldest first."""
    return list(reversed(recent_first))


def format_history(history: Sequence[Message]) -> str:
    """Render turns as Q1/A1, Q2/A2 ... in the order given."""
    lines = []
    for i, m in enumerate(history):
        tag = "Q" if m.role == "user" else "A"
        lines.append(f"{tag}{i // 2 + 1}: {m.content}")
    return "\n".join(lines)


def assemble_prompt(
    question: str,
    chunks: Sequence[str],
    patient_context: Optional[PatientContext],
    history: Sequence[Message],
    query_type,
) -> str:
    qtype = QueryType.normalize(query_type).value
    parts: List[str] = [CONTEXT_HEADER]

    if patient_context is not None and not patient_context.is_empty():
        parts.append(
            f"\n📋 PATIENT PROFILE:\n{format_patient_context(patient_context)}\n\n"
            "IMPORTANT: Tailor your response to this specific patient's situation, stage, and current treatments."
        )

    if chunks:
        sources = "\n".join(
            f"\n--- Source {i} ---\n{chunk.strip()}\n" for i, chunk in enumerate(chunks, start=1)
        )
        parts.append(
            f"\n📚 MEDICAL REFERENCE INFORMATION (from NCCN Guidelines and Clinical Sources):\n{sources}\n\n"
            "IMPORTANT: Base your answer on the above medical sources. Cite specific information when available."
        )
    else:
        parts.append(
            f"\n{NO_SOURCES_NOTICE}\n"
            "Provide general guidance based on established cancer care principles, "
            "and clearly indicate when you're speaking generally vs. from specific sources."
        )

    rendered_history = format_history(history)
    if rendered_history.strip():
        parts.append(
            f"\n💬 RECENT CONVERSATION:\n{rendered_history}\n\n"
            "Use this context to provide a coherent, connected response."
        )

    parts.append(
        f"\n=== PATIENT'S QUESTION ===\n\"{question}\"\n\nQuery Type Detected: {qtype.upper()}"
    )

    focus = FOCUS_INSTRUCTIONS.get(qtype, FOCUS_INSTRUCTIONS["general"])
    parts.append(f"\n=== RESPONSE GUIDELINES ===\n{focus}\n\n{GENERAL_REMINDERS}")

    return "\n".join(parts)
