# AnswerGenerator:
# - derives output cap + system instruction from (response length, query type)
# - tries each provider client in order until one returns text
# - trims a dangling partial sentence left by the output cap

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .prompts import get_response_settings
from .types import GeneratedAnswer, Message, ModelParams

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")
PROVIDER_LABELS = ("primary", "secondary")


class GenerationError(RuntimeError):
    """Every provider failed or returned empty text."""


def trim_incomplete_sentence(text: str) -> str:
    """
    Drop a trailing partial sentence.
    Text already ending in . ! ? or a closing quote is kept; so is text
    with no sentence break at all.
    """
    if not text:
        return text
    text = text.strip()
    if text.endswith((".", "!", "?", '"')):
        return text
    last = max(text.rfind("."), text.rfind("!"), text.rfind("?"))
    return text[:last + 1] if last > 0 else text


def provider_label(index: int) -> str:
    return PROVIDER_LABELS[min(index, len(PROVIDER_LABELS) - 1)]


class AnswerGenerator:
    def __init__(self, providers: Sequence[Any], config_path: Optional[str] = DEFAULT_CONFIG_PATH):
        if not providers:
            raise ValueError("AnswerGenerator needs at least one provider")
        self.providers = list(providers)
        self.config_path = config_path
        self.cfg = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_path or not os.path.exists(self.config_path):
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _params_for(self, provider, max_tokens: int, temperature: float) -> ModelParams:
        penalty = self.cfg.get("repetition_penalty", 1.1)
        return ModelParams(
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=self.cfg.get("top_p", 0.9),
            repetition_penalty=penalty if getattr(provider, "supports_repetition_penalty", False) else None,
        )

    def generate(
        self,
        prompt: str,
        response_length: str = "normal",
        query_type: str = "general",
        temperature: Optional[float] = None,
    ) -> GeneratedAnswer:
        """Main entry point for generation."""
        settings = get_response_settings(response_length, query_type, self.cfg.get("max_tokens"))
        if temperature is None:
            temperature = self.cfg.get("temperature", 0.3)
        messages: List[Message] = [
            Message(role="system", content=settings.system_message),
            Message(role="user", content=prompt),
        ]

        for i, provider in enumerate(self.providers):
            label = provider_label(i)
            engine = getattr(provider, "engine", type(provider).__name__)
            try:
                text, meta = provider.generate(messages, self._params_for(provider, settings.max_tokens, temperature))
            except Exception as e:
                logger.warning("Provider %s (%s) failed: %s", label, engine, e)
                continue
            if not text or not text.strip():
                logger.warning("Provider %s (%s) returned an empty response", label, engine)
                continue
            if i > 0:
                logger.info("Answer produced by fallback provider %s", engine)
            return GeneratedAnswer(
                text=trim_incomplete_sentence(text),
                api_used=label,
                meta={**(meta or {}), "max_tokens": settings.max_tokens},
            )

        logger.error("All %d generation providers failed", len(self.providers))
        raise GenerationError("All generation providers failed to produce a response")
