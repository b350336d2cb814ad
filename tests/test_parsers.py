from __future__ import annotations

import json

import pytest

from review_gateway.errors import EmptyResponse, MalformedOutput, UnexpectedShape
from review_gateway.gates.parsers import (
    clean_model_text,
    ensure_json_value,
    extract_json_array,
    extract_json_object,
    parse_json_safe,
)
from review_gateway.gates.shapes import Shape, coerce, shape_of


def test_clean_model_text_strips_fences_case_insensitively() -> None:
    assert clean_model_text("```JSON\n{\"a\": 1}\n```  ") == '{"a": 1}'
    assert clean_model_text("  [1, 2]  ") == "[1, 2]"


def test_valid_json_matches_direct_parse() -> None:
    text = '{"id": "A1", "values": [1, 2.5, null, true], "nested": {"k": "v"}}'
    assert parse_json_safe(text) == json.loads(text)


def test_fenced_json_is_unwrapped() -> None:
    assert ensure_json_value('```json\n{"a":1}\n```') == {"a": 1}


def test_near_valid_json_is_repaired() -> None:
    """Unquoted keys and trailing commas are recovered by the repair pass."""
    assert parse_json_safe("{a:1,}") == {"a": 1}


def test_trailing_comma_in_array_is_repaired() -> None:
    assert parse_json_safe('[{"id": "1", "classification": "INCLUIR"},]') == [
        {"id": "1", "classification": "INCLUIR"}
    ]


def test_irrecoverable_text_raises_malformed_output_with_raw_text() -> None:
    with pytest.raises(MalformedOutput) as excinfo:
        ensure_json_value("not json at all")
    assert excinfo.value.raw_text == "not json at all"
    assert "not json at all" in excinfo.value.details


@pytest.mark.parametrize("payload", [None, ""])
def test_empty_payload_raises_empty_response(payload) -> None:
    with pytest.raises(EmptyResponse):
        ensure_json_value(payload)


def test_structured_payload_is_returned_unchanged() -> None:
    payload = {"already": ["parsed"]}
    assert ensure_json_value(payload) is payload


def test_unsupported_payload_type_is_rejected() -> None:
    with pytest.raises(UnexpectedShape):
        ensure_json_value(3.5)


def test_object_path_fails_hard_on_malformed_text() -> None:
    with pytest.raises(MalformedOutput):
        extract_json_object("not json at all")


def test_object_path_rejects_arrays() -> None:
    with pytest.raises(UnexpectedShape):
        extract_json_object('[{"a": 1}]')


def test_array_path_soft_fails_on_malformed_text() -> None:
    assert extract_json_array("not json at all") is None


def test_array_path_rejects_objects() -> None:
    with pytest.raises(UnexpectedShape):
        extract_json_array('{"results": []}')


def test_array_path_still_raises_on_empty_text() -> None:
    with pytest.raises(EmptyResponse):
        extract_json_array("")


def test_shape_of_tags_values() -> None:
    assert shape_of({}) is Shape.OBJECT
    assert shape_of([]) is Shape.ARRAY
    assert shape_of("text") is Shape.INVALID
    assert shape_of(None) is Shape.INVALID


def test_coerce_returns_value_for_matching_shape() -> None:
    value = [{"id": 1}]
    assert coerce(value, Shape.ARRAY) is value
    with pytest.raises(UnexpectedShape):
        coerce("just a string", Shape.OBJECT)
