"""Batched relevance screening over a sequence of articles.

Batches are sent one at a time, in input order, so the aggregate keeps the
order in which the model returned entries for each batch. Any hard failure
(provider error, empty output, wrongly shaped output) aborts the run and
nothing aggregated so far is returned: results are committed only once every
batch has succeeded. Malformed JSON in one batch is a soft failure and just
contributes no records.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from review_gateway.adapters.llm_base import LLMAdapter
from review_gateway.batching import ClassificationRecord, Criteria, WorkItem, chunk, record_from_entry
from review_gateway.config import TaskSettings
from review_gateway.gates.parsers import extract_json_array
from review_gateway.prompts import classification_prompt

logger = logging.getLogger(__name__)

RawSink = Callable[[int, str], None]


class ClassificationPipeline:
    def __init__(
        self,
        adapter: LLMAdapter,
        settings: TaskSettings,
        batch_size: int,
        raw_sink: Optional[RawSink] = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got {batch_size}")
        self.adapter = adapter
        self.settings = settings
        self.batch_size = batch_size
        self.raw_sink = raw_sink

    def run(self, criteria: Criteria, items: Sequence[WorkItem]) -> List[ClassificationRecord]:
        batches = chunk(items, self.batch_size)
        logger.info("[classify] items=%d batches=%d", len(items), len(batches))
        pending: List[ClassificationRecord] = []
        for index, batch in enumerate(batches, start=1):
            pending.extend(self._run_batch(index, criteria, batch))
        return pending

    def _run_batch(
        self, index: int, criteria: Criteria, batch: Sequence[WorkItem]
    ) -> List[ClassificationRecord]:
        prompt = classification_prompt(criteria, batch)
        response = self.adapter.complete(prompt, self.settings)
        if self.raw_sink is not None:
            self.raw_sink(index, response.raw_text)

        entries = extract_json_array(response.raw_text)
        if entries is None:
            logger.warning("[classify] batch=%d produced no parsable results", index)
            return []

        records: List[ClassificationRecord] = []
        for entry in entries:
            record = record_from_entry(entry)
            if record is not None:
                records.append(record)
        dropped = len(entries) - len(records)
        logger.info("[classify] batch=%d size=%d records=%d dropped=%d", index, len(batch), len(records), dropped)
        return records
