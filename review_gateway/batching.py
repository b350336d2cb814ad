"""Work items, batch planning and decision normalisation for screening."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

DEFAULT_JUSTIFICATION = "Sin justificación proporcionada."


class Decision(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"
    UNCERTAIN = "uncertain"


@dataclass(frozen=True)
class WorkItem:
    id: Union[str, int]
    title: str = ""
    abstract: str = ""


@dataclass
class Criteria:
    main_question: str = ""
    inclusion: List[str] = field(default_factory=list)
    exclusion: List[str] = field(default_factory=list)


@dataclass
class ClassificationRecord:
    id: Any
    decision: Decision
    justification: str = DEFAULT_JUSTIFICATION
    subtopic: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "decision": self.decision.value,
            "justification": self.justification,
        }
        if self.subtopic is not None:
            payload["subtopic"] = self.subtopic
        return payload


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive batches of at most ``size`` entries.

    Every item lands in exactly one batch and order is preserved; only the
    last batch may be shorter. An empty sequence yields no batches.
    """
    if size <= 0:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


def normalize_decision(label: Optional[str]) -> Decision:
    value = (label or "").lower()
    if "inclu" in value:
        return Decision.INCLUDE
    if "exclu" in value:
        return Decision.EXCLUDE
    return Decision.UNCERTAIN


def record_from_entry(entry: Any) -> Optional[ClassificationRecord]:
    """Build a record from one model entry, or ``None`` when it lacks an id or label."""
    if not isinstance(entry, dict):
        return None
    entry_id = entry.get("id")
    label = entry.get("classification")
    if not entry_id or not label:
        return None
    return ClassificationRecord(
        id=entry_id,
        decision=normalize_decision(str(label)),
        justification=entry.get("justification") or DEFAULT_JUSTIFICATION,
        subtopic=entry.get("subtopic"),
    )
