# Client for Ollama local inference.
# Accepts a model name and exposes generate(messages, params).

import requests
from typing import List, Optional, Tuple, Dict, Any
from oncoguide.settings import settings
from ..types import Message, ModelParams


class OllamaClient:
    engine = "ollama"
    supports_repetition_penalty = True

    def __init__(self, model: str = "mistral:7b-instruct", host: Optional[str] = None):
        self.model = model
        self.host = host or settings.OLLAMA_HOST

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        prompt = self._compose_prompt(messages)
        options: Dict[str, Any] = {
            "temperature": float(params.temperature if params.temperature is not None else 0.3),
            "num_predict": int(params.max_tokens or 500),
        }
        if params.top_p is not None:
            options["top_p"] = float(params.top_p)
        if params.repetition_penalty is not None:
            options["repeat_penalty"] = float(params.repetition_penalty)
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        url = f"{self.host}/api/generate"
        resp = requests.post(url, json=payload, timeout=180)
        resp.raise_for_status()
        data = resp.json()
        return (data.get("response") or "").strip(), {"engine": self.engine, "model": self.model}

    def _compose_prompt(self, messages: List[Message]) -> str:
        parts = []
        for m in messages:
            parts.append(f"{m.role.upper()}:\n{m.content.strip()}\n")
        return "\n".join(parts)
