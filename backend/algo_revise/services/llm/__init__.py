"""
LLM Service Module

Provides a unified interface to multiple LLM providers via LiteLLM.

Usage:
    from algo_revise.services.llm import build_messages, get_llm_client

    client = get_llm_client()
    data = client.complete_sync(messages=build_messages("..."), json_mode=True)
"""

from algo_revise.services.llm.client import (
    LLMClient,
    build_messages,
    get_default_text_model,
    get_llm_client,
    reset_llm_client,
)

__all__ = [
    "LLMClient",
    "build_messages",
    "get_default_text_model",
    "get_llm_client",
    "reset_llm_client",
]
