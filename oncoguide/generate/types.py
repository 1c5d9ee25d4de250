# Typed dataclasses shared across generator modules.

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import List, Optional, Dict, Any


@dataclass
class Message:
    """Single chat turn: system, user, or assistant."""
    role: str
    content: str


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    repetition_penalty: Optional[float] = None


@dataclass
class ResponseSettings:
    """Output cap and system instruction derived from (length, query type)."""
    max_tokens: int
    system_message: str


@dataclass
class GeneratedAnswer:
    """Final response from the generator."""
    text: str
    api_used: str
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PatientContext:
    """Patient profile as seen by the prompt builder. Every field is optional."""
    cancer_type: Optional[str] = None
    cancer_stage: Optional[str] = None
    diagnosis_date: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    current_treatments: List[str] = field(default_factory=list)
    medications: List[str] = field(default_factory=list)
    symptoms: List[str] = field(default_factory=list)
    biomarkers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PatientContext":
        """
        Build from a stored profile row.
        `current_treatments` is stored as [{"regimen": ...}, ...]; entries
        without a regimen are dropped. Plain strings are accepted as well.
        """
        treatments = []
        for t in record.get("current_treatments") or []:
            regimen = t.get("regimen") if isinstance(t, dict) else t
            if regimen:
                treatments.append(str(regimen))
        diagnosis_date = record.get("diagnosis_date")
        return cls(
            cancer_type=record.get("cancer_type"),
            cancer_stage=record.get("cancer_stage"),
            diagnosis_date=str(diagnosis_date) if diagnosis_date else None,
            age=record.get("age"),
            gender=record.get("gender"),
            current_treatments=treatments,
            medications=list(record.get("medications") or []),
            symptoms=list(record.get("symptoms") or []),
            biomarkers={str(k): str(v) for k, v in (record.get("biomarkers") or {}).items()},
        )

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))
