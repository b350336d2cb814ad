from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from review_gateway.adapters.llm_base import LLMAdapter
from review_gateway.config import TaskSettings
from review_gateway.errors import EmptyResponse
from review_gateway.gates.parsers import extract_json_object
from review_gateway.prompts import dump, render_prompt
from review_gateway.utils.time import epoch_millis

logger = logging.getLogger(__name__)

PDF_TEXT_LIMIT = 12000
DEFAULT_SOURCES = "PubMed, Semantic Scholar, CrossRef y Europe PMC"
SEARCH_STEPS = ("derivation", "subquestions")


def normalize_step(step: Optional[str]) -> str:
    return step if step in SEARCH_STEPS else "full"


class TaskPipeline:
    """Single-shot generation tasks. Any extraction failure is raised to the caller."""

    def __init__(self, adapter: LLMAdapter, settings: Dict[str, TaskSettings]) -> None:
        self.adapter = adapter
        self.settings = settings

    def protocol(self, topic: str) -> Dict[str, Any]:
        prompt = render_prompt("protocol", {"TOPIC": topic})
        protocol = self._run_object("protocol", prompt)
        return {"topic": topic, "protocol": protocol, "generatedAt": epoch_millis()}

    def extraction(self, pdf_text: str) -> Dict[str, Any]:
        prompt = render_prompt("extraction", {"PDF_TEXT": pdf_text[:PDF_TEXT_LIMIT]})
        return self._run_object("extraction", prompt)

    def narrative(self, themes: Any, stats: Any) -> Dict[str, str]:
        prompt = render_prompt("narrative", {"THEMES": dump(themes), "STATS": dump(stats)})
        text = self.adapter.generate(prompt, self.settings["narrative"])
        if not text or not text.strip():
            raise EmptyResponse("Empty model response")
        return {"narrative": text.strip()}

    def manuscript(self, project_id: str, aggregated: Any) -> Dict[str, Any]:
        prompt = render_prompt("manuscript", {"AGGREGATED": dump(aggregated)})
        manuscript = self._run_object("manuscript", prompt)
        return {**manuscript, "generatedAt": epoch_millis(), "projectId": project_id}

    def search_strategy(
        self,
        topic: str,
        phase1: Any,
        sources: Optional[Sequence[str]] = None,
        step: Optional[str] = None,
        keyword_matrix: Optional[List[Any]] = None,
    ) -> Dict[str, Any]:
        normalized = normalize_step(step)
        values = {
            "TOPIC": topic,
            "SOURCES": ", ".join(sources) if sources else DEFAULT_SOURCES,
            "PHASE1": dump(phase1),
        }
        if normalized == "subquestions":
            values["KEYWORD_MATRIX"] = dump(keyword_matrix if isinstance(keyword_matrix, list) else [])
        task = f"search_strategy_{normalized}"
        return self._run_object(task, render_prompt(task, values))

    def _run_object(self, task: str, prompt: str) -> Dict[str, Any]:
        response = self.adapter.complete(prompt, self.settings[task])
        logger.info("[%s] task=%s chars=%d", self.adapter.name, task, len(response.raw_text))
        return extract_json_object(response.raw_text)
