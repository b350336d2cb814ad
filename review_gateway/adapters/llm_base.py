from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from review_gateway.config import TaskSettings


@dataclass
class LLMResponse:
    raw_text: str
    usage: Optional[Dict[str, Optional[int]]] = None


class LLMAdapter(Protocol):
    name: str

    def complete(self, prompt: str, settings: TaskSettings) -> LLMResponse:
        raise NotImplementedError

    def generate(self, prompt: str, settings: TaskSettings) -> str:
        return self.complete(prompt, settings).raw_text
