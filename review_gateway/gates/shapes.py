from __future__ import annotations

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jsonschema import ValidationError, validate

from review_gateway.errors import UnexpectedShape

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


class Shape(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    INVALID = "invalid"


_SCHEMA_FILES = {
    Shape.OBJECT: "json_object.schema.json",
    Shape.ARRAY: "json_array.schema.json",
}


def shape_of(value: Any) -> Shape:
    if isinstance(value, dict):
        return Shape.OBJECT
    if isinstance(value, list):
        return Shape.ARRAY
    return Shape.INVALID


@lru_cache(maxsize=None)
def _load_schema(shape: Shape) -> Dict:
    return json.loads((SCHEMAS_DIR / _SCHEMA_FILES[shape]).read_text(encoding="utf-8"))


def coerce(value: Any, expected: Shape) -> Any:
    if expected is Shape.INVALID:
        raise ValueError("Cannot coerce to the invalid shape")
    actual = shape_of(value)
    if actual is not expected:
        raise UnexpectedShape(
            f"Expected a JSON {expected.value}, got {actual.value}",
            details=f"received {type(value).__name__}",
        )
    try:
        validate(instance=value, schema=_load_schema(expected))
    except ValidationError as exc:
        raise UnexpectedShape(f"Model output failed {expected.value} validation", details=exc.message) from exc
    return value
