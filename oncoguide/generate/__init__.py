# Generator package

# Makes generate/ importable and exposes key interfaces.

from .context import assemble_prompt
from .generator import AnswerGenerator, GenerationError, trim_incomplete_sentence
from .safety import add_medical_disclaimer, detect_urgency
from .types import GeneratedAnswer, Message, ModelParams, PatientContext
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "AnswerGenerator",
    "GenerationError",
    "trim_incomplete_sentence",
    "assemble_prompt",
    "add_medical_disclaimer",
    "detect_urgency",
    "GeneratedAnswer",
    "Message",
    "ModelParams",
    "PatientContext",
    "EchoDevClient",
]
