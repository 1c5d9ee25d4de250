"""
Request pipeline: classify -> detect urgency -> retrieve -> assemble ->
generate -> finalize.

One ChatPipeline is built at startup with its collaborators and shared by
all requests; it keeps no per-request state of its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from oncoguide.generate.clients.echo_dev_client import EchoDevClient
from oncoguide.generate.context import assemble_prompt, chronological
from oncoguide.generate.generator import AnswerGenerator
from oncoguide.generate.prompts import normalize_length
from oncoguide.generate.safety import add_medical_disclaimer, detect_urgency
from oncoguide.search.backends import SqliteChunkSearch
from oncoguide.search.classifier import classify_query_type
from oncoguide.search.retriever import HybridRetriever, limit_for
from oncoguide.settings import Settings
from oncoguide.stores import (
    HistoryStore,
    InMemoryHistoryStore,
    InMemoryProfileStore,
    ProfileStore,
    conversation_key,
)

logger = logging.getLogger(__name__)


class InvalidQueryError(ValueError):
    """The message is missing or blank."""


@dataclass
class ChatResult:
    answer: str
    api_used: str
    retrieved_count: int
    patient_context_used: bool
    query_type: str
    is_urgent: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "api_used": self.api_used,
            "retrieved_count": self.retrieved_count,
            "patient_context_used": self.patient_context_used,
            "query_type": self.query_type,
            "is_urgent": self.is_urgent,
        }


class ChatPipeline:
    def __init__(
        self,
        retriever: HybridRetriever,
        generator: AnswerGenerator,
        profiles: ProfileStore,
        history: HistoryStore,
        history_max_turns: int = 12,
    ):
        self.retriever = retriever
        self.generator = generator
        self.profiles = profiles
        self.history = history
        self.history_max_turns = history_max_turns

    def answer(
        self,
        message: Optional[str],
        response_length: str = "normal",
        session_id: str = "default",
        user_id: str = "anonymous",
    ) -> ChatResult:
        if not message or not message.strip():
            raise InvalidQueryError("No message provided")

        length = normalize_length(response_length)
        query_type = classify_query_type(message)
        is_urgent = detect_urgency(message)
        if is_urgent:
            logger.warning("Urgent symptoms detected in message (session=%s)", session_id)

        conv_id = conversation_key(user_id, session_id or "default")
        patient = self.profiles.get_patient_context(user_id)
        turns = chronological(self.history.get_recent_history(conv_id, self.history_max_turns))

        chunks = self.retriever.retrieve(message, query_type, limit_for(length))

        prompt = assemble_prompt(message, chunks, patient, turns, query_type)
        generated = self.generator.generate(prompt, length, query_type.value)
        final = add_medical_disclaimer(generated.text, is_urgent)

        self.history.append(conv_id, "user", message)
        self.history.append(conv_id, "assistant", final)

        logger.info(
            "Answered type=%s length=%s chunks=%d api=%s urgent=%s",
            query_type.value, length, len(chunks), generated.api_used, is_urgent,
        )
        return ChatResult(
            answer=final,
            api_used=generated.api_used,
            retrieved_count=len(chunks),
            patient_context_used=patient is not None,
            query_type=query_type.value,
            is_urgent=is_urgent,
        )


def build_providers(settings: Settings) -> List[Any]:
    """Together first, then Groq, then Ollama; echo when nothing is configured."""
    providers: List[Any] = []
    if settings.TOGETHER_API_KEY:
        from oncoguide.generate.clients.openai_client import OpenAIClient
        providers.append(OpenAIClient(
            model=settings.TOGETHER_MODEL,
            api_key=settings.TOGETHER_API_KEY,
            base_url=settings.TOGETHER_BASE_URL,
            engine="together",
            supports_repetition_penalty=True,
        ))
    if settings.GROQ_API_KEY:
        from oncoguide.generate.clients.openai_client import OpenAIClient
        providers.append(OpenAIClient(
            model=settings.GROQ_MODEL,
            api_key=settings.GROQ_API_KEY,
            base_url=settings.GROQ_BASE_URL,
            engine="groq",
        ))
    if settings.USE_OLLAMA:
        from oncoguide.generate.clients.ollama_client import OllamaClient
        providers.append(OllamaClient(model=settings.OLLAMA_MODEL, host=settings.OLLAMA_HOST))
    if not providers:
        logger.warning("No generation provider configured; using the echo dev client")
        providers.append(EchoDevClient())
    return providers


def build_pipeline(
    settings: Settings,
    providers: Optional[Sequence[Any]] = None,
    profiles: Optional[ProfileStore] = None,
    history: Optional[HistoryStore] = None,
) -> ChatPipeline:
    backend = SqliteChunkSearch(settings.DB_PATH)
    backend.ensure_schema()
    return ChatPipeline(
        retriever=HybridRetriever(backend),
        generator=AnswerGenerator(providers or build_providers(settings)),
        profiles=profiles or InMemoryProfileStore(),
        history=history or InMemoryHistoryStore(settings.HISTORY_MAX_TURNS),
        history_max_turns=settings.HISTORY_MAX_TURNS,
    )
