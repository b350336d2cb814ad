from __future__ import annotations

import pytest

from review_gateway.batching import (
    DEFAULT_JUSTIFICATION,
    Decision,
    WorkItem,
    chunk,
    normalize_decision,
    record_from_entry,
)


@pytest.mark.parametrize("count,size", [(1, 1), (5, 10), (10, 10), (11, 10), (23, 10), (7, 3)])
def test_chunk_preserves_every_item_in_order(count: int, size: int) -> None:
    items = [WorkItem(id=str(n)) for n in range(count)]
    batches = chunk(items, size)
    assert [item for batch in batches for item in batch] == items
    assert all(len(batch) == size for batch in batches[:-1])
    assert 0 < len(batches[-1]) <= size


def test_chunk_of_23_by_10() -> None:
    assert [len(batch) for batch in chunk(list(range(23)), 10)] == [10, 10, 3]


def test_chunk_of_empty_sequence_is_empty() -> None:
    assert chunk([], 10) == []


@pytest.mark.parametrize("size", [0, -1])
def test_chunk_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ValueError):
        chunk([1, 2, 3], size)


@pytest.mark.parametrize(
    "label,expected",
    [
        ("INCLUIR", Decision.INCLUDE),
        ("Se debe EXCLUIR", Decision.EXCLUDE),
        ("", Decision.UNCERTAIN),
        ("tal vez", Decision.UNCERTAIN),
        ("DUDA", Decision.UNCERTAIN),
        ("include", Decision.INCLUDE),
        ("Excluded: wrong population", Decision.EXCLUDE),
        (None, Decision.UNCERTAIN),
    ],
)
def test_normalize_decision(label, expected) -> None:
    assert normalize_decision(label) is expected


def test_entry_without_label_is_dropped() -> None:
    assert record_from_entry({"id": "A1", "justification": "x"}) is None


def test_entry_without_id_is_dropped() -> None:
    assert record_from_entry({"classification": "INCLUIR"}) is None


def test_non_object_entry_is_dropped() -> None:
    assert record_from_entry("A1 INCLUIR") is None
    assert record_from_entry(None) is None


def test_entry_without_subtopic_is_kept_without_one() -> None:
    record = record_from_entry({"id": "A1", "classification": "EXCLUIR"})
    assert record is not None
    assert record.subtopic is None
    assert record.justification == DEFAULT_JUSTIFICATION
    assert record.to_dict() == {"id": "A1", "decision": "exclude", "justification": DEFAULT_JUSTIFICATION}


def test_record_keeps_subtopic_and_id_unchanged() -> None:
    record = record_from_entry(
        {"id": 42, "classification": "duda", "justification": "poco claro", "subtopic": "Dolor"}
    )
    assert record.to_dict() == {
        "id": 42,
        "decision": "uncertain",
        "justification": "poco claro",
        "subtopic": "Dolor",
    }
