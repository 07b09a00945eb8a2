"""
LLM Client supporting multiple providers via LiteLLM.

LiteLLM provides a unified interface to 100+ LLM providers using
the format "provider/model-name". Key features:
- Model selection from settings (CLASSIFIER_MODEL, falling back to TEXT_MODEL)
- Automatic retries with exponential backoff
- Optional JSON mode with parsed responses
- Native async support

See: https://docs.litellm.ai/

Usage:
    from algo_revise.services.llm import build_messages, get_llm_client

    client = get_llm_client()

    # Async completion
    text = await client.complete(messages=build_messages("Classify..."))

    # Sync completion with parsed JSON
    data = client.complete_sync(
        messages=build_messages("Classify...", system_prompt="..."),
        json_mode=True,
    )
"""

import json
import logging
import os
import time
from typing import Any, Optional, Union

import litellm
from litellm import acompletion, completion
from tenacity import retry, stop_after_attempt, wait_exponential

from algo_revise.config.settings import settings

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"


def get_default_text_model() -> str:
    """Get the model used for classification, falling back to TEXT_MODEL."""
    return settings.CLASSIFIER_MODEL or settings.TEXT_MODEL


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def _build_kwargs(
    model: str,
    messages: list[dict],
    temperature: float,
    max_tokens: int,
    json_mode: bool,
) -> dict[str, Any]:
    kwargs = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    return kwargs


class LLMClient:
    """
    LLM client with settings-based model selection.

    Provides async and sync completion methods. Both retry transient
    failures (including unparseable JSON in json_mode) up to three times.
    """

    def __init__(self, model: Optional[str] = None):
        """
        Initialize the LLM client and validate API keys.

        Args:
            model: Default model for this client (defaults to
                get_default_text_model())
        """
        self.model = model or get_default_text_model()
        self._validate_api_keys()

    def _validate_api_keys(self):
        """Log which providers have API keys configured."""
        available_keys = []

        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available_keys.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available_keys.append("Anthropic")
        if os.getenv("GEMINI_API_KEY") or settings.GEMINI_API_KEY:
            available_keys.append("Google/Gemini")

        if not available_keys:
            logger.warning(
                "No LLM API keys configured. Set at least one of: "
                "OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY"
            )
        else:
            logger.info(f"LLM client initialized with providers: {available_keys}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        max_tokens: int = 4096,
        json_mode: bool = False,
        model: Optional[str] = None,
    ) -> Union[str, Any]:
        """
        Generate a completion.

        Args:
            messages: Chat messages in OpenAI format
                [{"role": "user", "content": "..."}, ...]
            temperature: Sampling temperature (0-1, lower = more deterministic)
            max_tokens: Maximum tokens in response
            json_mode: Request structured JSON output and parse response as JSON.
                Returns parsed dict/list. JSONDecodeError triggers retry.
            model: Optional model override

        Returns:
            Response text, or parsed JSON if json_mode

        Raises:
            json.JSONDecodeError: If json_mode=True and response is not valid JSON
                after all retries
            Exception: If completion fails after retries
        """
        model = model or self.model
        kwargs = _build_kwargs(model, messages, temperature, max_tokens, json_mode)
        start_time = time.perf_counter()

        try:
            response = await acompletion(**kwargs)
            content = response.choices[0].message.content
            logger.debug(
                f"LLM completion [{model}] - "
                f"Latency: {int((time.perf_counter() - start_time) * 1000)}ms"
            )
            if json_mode:
                # JSONDecodeError will trigger @retry
                content = json.loads(content)
            return content

        except json.JSONDecodeError:
            logger.warning(f"JSON decode error, will retry (model={model})")
            raise
        except Exception as e:
            logger.error(f"LLM completion failed: {e} (model={model})")
            raise

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    def complete_sync(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        max_tokens: int = 4096,
        json_mode: bool = False,
        model: Optional[str] = None,
    ) -> Union[str, Any]:
        """
        Synchronous completion for sync contexts (classifiers, scripts, CLI).

        Uses LiteLLM's native sync ``completion()`` rather than running the
        async method in a fresh event loop.

        Args:
            messages: Chat messages in OpenAI format
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            json_mode: Request and parse JSON output
            model: Optional model override

        Returns:
            Response text, or parsed JSON if json_mode
        """
        model = model or self.model
        kwargs = _build_kwargs(model, messages, temperature, max_tokens, json_mode)
        start_time = time.perf_counter()

        try:
            response = completion(**kwargs)
            content = response.choices[0].message.content
            logger.debug(
                f"LLM completion [{model}] - "
                f"Latency: {int((time.perf_counter() - start_time) * 1000)}ms"
            )
            if json_mode:
                content = json.loads(content)
            return content

        except json.JSONDecodeError:
            logger.warning(f"JSON decode error, will retry (model={model})")
            raise
        except Exception as e:
            logger.error(f"LLM completion failed: {e} (model={model})")
            raise


_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get the shared LLMClient instance, creating it on first use."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Drop the shared client (used by tests after changing settings)."""
    global _llm_client
    _llm_client = None
