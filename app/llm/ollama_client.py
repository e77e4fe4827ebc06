"""Factory for the Ollama-backed chat model."""

from __future__ import annotations

from typing import Any

from langchain_ollama import ChatOllama

from app.config import settings


def get_chat_model(output_schema: dict[str, Any] | None = None):
    """Return a ChatOllama instance configured from settings.

    Parameters
    ----------
    output_schema : dict | None
        JSON schema the model is constrained to. When omitted the model
        returns free text.

    Returns
    -------
    langchain_ollama.ChatOllama
        A chat model connected to the Ollama server, with the HTTP client
        timeout bounded by ``GENERATION_TIMEOUT_SECONDS``.
    """
    kwargs: dict[str, Any] = {}
    if output_schema is not None:
        kwargs["format"] = output_schema
    return ChatOllama(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        temperature=settings.ollama_temperature,
        client_kwargs={"timeout": settings.generation_timeout_seconds},
        **kwargs,
    )
