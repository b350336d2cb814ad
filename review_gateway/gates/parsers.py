from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from json_repair import repair_json

from review_gateway.errors import EmptyResponse, MalformedOutput, UnexpectedShape
from review_gateway.gates.shapes import Shape, coerce

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```json", flags=re.IGNORECASE)


def clean_model_text(text: str) -> str:
    return _JSON_FENCE.sub("", text).replace("```", "").strip()


def _repair(cleaned: str, raw_text: str) -> Any:
    try:
        repaired = repair_json(cleaned, return_objects=True)
    except Exception as exc:
        raise MalformedOutput("Model output could not be repaired into JSON.", raw_text) from exc
    # json_repair hands back "" when nothing JSON-like was found.
    if not isinstance(repaired, (dict, list)):
        raise MalformedOutput("Model output is not valid JSON.", raw_text)
    logger.info("[extract] recovered JSON through repair")
    return repaired


def parse_json_safe(text: str) -> Any:
    cleaned = clean_model_text(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        return _repair(cleaned, text)


def ensure_json_value(payload: Any) -> Any:
    """Turn a model payload into a JSON value.

    Text is cleaned and parsed, with one repair attempt on a syntax error.
    Payloads that are already structured pass through untouched.
    """
    if payload is None or payload == "":
        raise EmptyResponse("Empty model response")
    if isinstance(payload, str):
        return parse_json_safe(payload)
    if isinstance(payload, (dict, list)):
        return payload
    raise UnexpectedShape(f"Unsupported model response type: {type(payload).__name__}")


def extract_json_object(payload: Any) -> dict:
    return coerce(ensure_json_value(payload), Shape.OBJECT)


def extract_json_array(payload: Any) -> Optional[list]:
    """Array path used by batch classification.

    Malformed text is logged and reported as ``None`` so the caller can treat the
    batch as having no results. Empty payloads and wrongly shaped values still
    raise.
    """
    try:
        value = ensure_json_value(payload)
    except MalformedOutput as exc:
        logger.warning("[extract] discarding malformed array output: %s", exc.details)
        return None
    return coerce(value, Shape.ARRAY)
