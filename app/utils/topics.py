"""Topic batch normalization."""

from __future__ import annotations

from typing import Iterable

from app.schemas.plan import Topic
from app.utils.constants import PAD_TOPIC_TEMPLATE, TOPIC_COUNT


def _key(name: str) -> str:
    return name.strip().casefold()


def normalize_topics(
    topics: Iterable[Topic],
    exclude: Iterable[str] | None = None,
    size: int = TOPIC_COUNT,
) -> list[Topic]:
    """Return exactly ``size`` topics in provider order.

    Blank names, case-insensitive duplicates (first occurrence wins) and names
    listed in ``exclude`` are dropped. The rest is truncated to ``size`` or
    padded with non-core ``Additional Topic N`` placeholders, skipping any
    placeholder name that is already present or excluded.
    """
    seen = {_key(name) for name in exclude or () if name and name.strip()}
    kept: list[Topic] = []
    for topic in topics:
        key = _key(topic.name)
        if not key or key in seen:
            continue
        seen.add(key)
        kept.append(Topic(name=topic.name.strip(), is_core=topic.is_core))
        if len(kept) == size:
            return kept

    pad_index = 1
    while len(kept) < size:
        name = PAD_TOPIC_TEMPLATE.format(index=pad_index)
        pad_index += 1
        if _key(name) in seen:
            continue
        seen.add(_key(name))
        kept.append(Topic(name=name, is_core=False))
    return kept
