# Client for any OpenAI-compatible Chat Completions API (OpenAI, Together, Groq).
# Same interface as OllamaClient: generate(messages, params) -> (text, meta).

import os
from typing import List, Optional, Tuple, Dict, Any
from openai import OpenAI
from ..types import Message, ModelParams


class OpenAIClient:
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        engine: str = "openai",
        supports_repetition_penalty: bool = False,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.engine = engine
        self.supports_repetition_penalty = supports_repetition_penalty
        self.client = client or OpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"), base_url=base_url)

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        formatted = [{"role": m.role, "content": m.content} for m in messages]
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": formatted,
            "temperature": params.temperature if params.temperature is not None else 0.3,
            "max_tokens": params.max_tokens or 500,
        }
        if params.top_p is not None:
            kwargs["top_p"] = params.top_p
        # not part of the OpenAI schema; Together reads it from the body
        if self.supports_repetition_penalty and params.repetition_penalty is not None:
            kwargs["extra_body"] = {"repetition_penalty": params.repetition_penalty}

        resp = self.client.chat.completions.create(**kwargs)
        content = resp.choices[0].message.content if resp.choices else None
        text = (content or "").strip()
        meta = {"engine": self.engine, "model": self.model}
        return text, meta
