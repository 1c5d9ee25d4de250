# Dummy model client for local dev and testing without API calls.
# Echoes the user prompt, cut to max_tokens words like a capped provider would.

from typing import List, Tuple, Dict, Any
from ..types import Message, ModelParams


class EchoDevClient:
    engine = "echo"
    supports_repetition_penalty = False

    def __init__(self):
        self.model = "echo-dev"

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        user_inputs = [m.content for m in messages if m.role == "user"]
        words = (user_inputs[-1] if user_inputs else "(no user input)").split()
        cap = params.max_tokens or len(words)
        text = "[ECHO RESPONSE] " + " ".join(words[:cap])
        meta = {
            "engine": self.engine,
            "model": self.model,
            "temp": params.temperature,
            "max_tokens": params.max_tokens,
            "truncated": len(words) > cap,
        }
        return text, meta
