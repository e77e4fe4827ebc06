"""Tests for JSON parsing of model output."""

import pytest
from pydantic import ValidationError

from app.schemas.plan import PlanOutline, TopicList
from app.utils.llm_parse import parse_structured


def test_parse_structured_accepts_plain_json():
    parsed = parse_structured('{"topics":[{"name":"Glazing","isCore":true}]}', TopicList)
    assert parsed.topics[0].name == "Glazing"
    assert parsed.topics[0].is_core is True


def test_parse_structured_recovers_json_from_prose_and_fences():
    raw = 'Here is output:\n```json\n{"topics":[{"name":"Clay {types}","isCore":false}]}\n```'
    parsed = parse_structured(raw, TopicList)
    assert parsed.topics[0].name == "Clay {types}"


def test_parse_structured_rejects_schema_violations():
    raw = '{"title":"Plan","description":"d","schedule":[]}'
    with pytest.raises(ValidationError):
        parse_structured(raw, PlanOutline)


def test_parse_structured_raises_value_error_on_garbage():
    with pytest.raises(ValueError, match="Unable to parse JSON"):
        parse_structured("no json here", TopicList)


def test_parse_structured_raises_on_empty_output():
    with pytest.raises(ValueError):
        parse_structured("   ", TopicList)
