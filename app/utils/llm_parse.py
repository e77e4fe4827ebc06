"""LLM JSON parsing helpers with schema validation and local recovery."""

from __future__ import annotations

import json
import re
from typing import Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_json_with_schema(raw: str, schema: Type[T]) -> T:
    data = json.loads(raw)
    return schema.model_validate(data)


def _strip_fences(raw: str) -> str:
    return _FENCE_RE.sub("", raw.strip())


def _sanitize_invalid_escapes(raw: str) -> str:
    return re.sub(r'\\([^"\\/bfnrtu])', r"\1", raw)


def _extract_json_object(raw: str) -> str | None:
    if not raw:
        return None
    start = raw.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(raw)):
        char = raw[idx]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return raw[start : idx + 1]
    return None


def parse_structured(raw: str, schema: Type[T]) -> T:
    """Parse model output into ``schema`` without calling the model again.

    Tries the text as-is, then with markdown fences and invalid escapes
    removed, then the first balanced JSON object found in surrounding prose.
    Schema violations on well-formed JSON are raised immediately.

    Raises
    ------
    ValueError
        When no JSON object can be recovered.
    pydantic.ValidationError
        When the JSON does not match ``schema``.
    """
    if not raw or not raw.strip():
        raise ValueError("Model returned an empty response.")
    candidates = [raw, _sanitize_invalid_escapes(_strip_fences(raw))]
    extracted = _extract_json_object(raw)
    if extracted:
        candidates.append(_sanitize_invalid_escapes(extracted))
    for candidate in candidates:
        try:
            return parse_json_with_schema(candidate, schema)
        except json.JSONDecodeError:
            continue
    raise ValueError("Unable to parse JSON from model output.")
