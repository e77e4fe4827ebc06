"""Token accounting for model responses."""

from __future__ import annotations

import math
from typing import Any


def estimate_tokens(input_text: str, output_text: str) -> int:
    """Approximate token count at roughly four characters per token.

    This is a fallback for providers that report no usage. It is not
    billing-accurate.
    """
    return math.ceil(len(input_text) / 4) + math.ceil(len(output_text) / 4)


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def _from_usage_metadata(usage: Any) -> int | None:
    if not isinstance(usage, dict):
        return None
    total = _as_int(usage.get("total_tokens"))
    if total is not None:
        return total
    prompt = _as_int(usage.get("input_tokens"))
    completion = _as_int(usage.get("output_tokens"))
    if prompt is not None and completion is not None:
        return prompt + completion
    return None


def _from_response_metadata(metadata: Any) -> int | None:
    if not isinstance(metadata, dict):
        return None
    token_usage = metadata.get("token_usage")
    if isinstance(token_usage, dict):
        total = _as_int(token_usage.get("total_tokens"))
        if total is not None:
            return total
        prompt = _as_int(token_usage.get("prompt_tokens"))
        completion = _as_int(token_usage.get("completion_tokens"))
        if prompt is not None and completion is not None:
            return prompt + completion
    # Ollama native counters.
    prompt = _as_int(metadata.get("prompt_eval_count"))
    completion = _as_int(metadata.get("eval_count"))
    if prompt is not None and completion is not None:
        return prompt + completion
    return None


def tokens_used(response: Any, input_text: str, output_text: str) -> int:
    """Return provider-reported usage for ``response`` or a length-based estimate.

    Checks ``usage_metadata`` first (LangChain's normalized field), then the
    raw ``response_metadata`` for OpenAI-style ``token_usage`` or Ollama's
    ``prompt_eval_count``/``eval_count``.
    """
    reported = _from_usage_metadata(getattr(response, "usage_metadata", None))
    if reported is None:
        reported = _from_response_metadata(getattr(response, "response_metadata", None))
    if reported is not None:
        return reported
    return estimate_tokens(input_text, output_text)
