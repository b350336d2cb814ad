from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from review_gateway.batching import Criteria, WorkItem
from review_gateway.utils.io import read_text

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

NO_CRITERIA = "- Sin criterios proporcionados"
NO_QUESTION = "Pregunta no especificada"

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render_prompt(name: str, values: Mapping[str, str]) -> str:
    template = read_text(TEMPLATES_DIR / f"{name}.md")
    return _PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), template)


def dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _bullets(entries: Sequence[str]) -> str:
    if not entries:
        return NO_CRITERIA
    return "\n".join(f"- {entry}" for entry in entries)


def classification_prompt(criteria: Criteria, batch: Sequence[WorkItem]) -> str:
    payload: List[Dict[str, Any]] = [
        {"id": item.id, "titulo": item.title, "resumen": item.abstract} for item in batch
    ]
    return render_prompt(
        "classify",
        {
            "QUESTION": criteria.main_question or NO_QUESTION,
            "INCLUSION": _bullets(criteria.inclusion),
            "EXCLUSION": _bullets(criteria.exclusion),
            "ARTICLES": dump(payload),
        },
    )
