from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

import pytest

from review_gateway.adapters.llm_base import LLMResponse
from review_gateway.config import TaskSettings, load_task_settings


class ScriptedAdapter:
    """Replays canned replies in order and records every prompt it receives."""

    name = "scripted"

    def __init__(self, replies: Sequence[Any]) -> None:
        self.replies: List[Any] = list(replies)
        self.prompts: List[str] = []

    def complete(self, prompt: str, settings: TaskSettings) -> LLMResponse:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(raw_text=reply)

    def generate(self, prompt: str, settings: TaskSettings) -> str:
        return self.complete(prompt, settings).raw_text


def classification_reply(ids: Sequence[Any], label: str = "INCLUIR") -> str:
    entries = [
        {"id": item_id, "classification": label, "justification": f"motivo {item_id}"}
        for item_id in ids
    ]
    return "```json\n" + json.dumps(entries) + "\n```"


@pytest.fixture
def task_settings() -> Dict[str, TaskSettings]:
    return load_task_settings()


@pytest.fixture
def scripted():
    return ScriptedAdapter
