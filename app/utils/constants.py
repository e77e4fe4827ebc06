"""Shared magic values used across generation and the client workflow."""

# Every topic batch handed to the client has exactly this many entries.
TOPIC_COUNT = 20

# Target range for core topics, stated in the topic prompt.
CORE_TOPICS_MIN = 8
CORE_TOPICS_MAX = 12

# Placeholder names used to pad short topic batches ("Additional Topic 1", ...).
PAD_TOPIC_TEMPLATE = "Additional Topic {index}"

# Levels offered by the input form.
LEVELS: tuple[str, ...] = ("Beginner", "Intermediate", "Expert")

# Audit history page size when the caller does not pass one.
DEFAULT_HISTORY_LIMIT = 50
