"""
LLM-backed Problem Classifier

Asks an LLM (via LiteLLM) to analyze solution code and return structured
JSON matching ClassificationResult. On failure it delegates to a fallback
classifier when one is configured, otherwise raises LLMError.

Usage:
    from algo_revise.services.classification import KeywordClassifier, LLMClassifier

    classifier = LLMClassifier(fallback=KeywordClassifier())
    result = classifier.classify(solution_code)
"""

import logging
from typing import Any, Optional

from algo_revise.config.settings import settings
from algo_revise.enums.revision import ClassifierSource, Difficulty
from algo_revise.errors import LLMError
from algo_revise.models.classification import ClassificationResult
from algo_revise.services.classification.base import ProblemClassifier
from algo_revise.services.llm.client import LLMClient, build_messages, get_llm_client

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert competitive programmer who reviews solutions to "
    "algorithm problems. Respond with a single JSON object only."
)

CLASSIFY_PROMPT = """Analyze the following solution code.

Return a JSON object with these keys:
- "difficulty": one of "Easy", "Medium", "Hard"
- "topics": data structures used, e.g. "Array", "Graph", "Binary Tree", "Hash Table"
- "patterns": algorithmic techniques, e.g. "Two Pointers", "Dynamic Programming"
- "time_complexity": Big-O time, e.g. "O(n log n)"
- "space_complexity": Big-O space
- "optimization_suggestions": list of short suggestions (may be empty)
- "concepts_used": list of concepts the solution relies on
- "similar_problems": list of well-known problem titles solved the same way

Code:
```
{code}
```"""

_LIST_FIELDS = (
    "topics",
    "patterns",
    "optimization_suggestions",
    "concepts_used",
    "similar_problems",
)


def _normalize_difficulty(value: Any) -> Difficulty:
    if isinstance(value, str):
        for difficulty in Difficulty:
            if difficulty.value.lower() == value.strip().lower():
                return difficulty
    return Difficulty.MEDIUM


def parse_classification(data: Any) -> ClassificationResult:
    """
    Convert an LLM JSON payload into a ClassificationResult.

    Unknown keys are ignored, list fields accept a single string, and an
    unrecognized difficulty falls back to MEDIUM.

    Raises:
        ValueError: If the payload is not a JSON object
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    fields: dict[str, Any] = {"difficulty": _normalize_difficulty(data.get("difficulty"))}
    for name in _LIST_FIELDS:
        value = data.get(name) or []
        if isinstance(value, str):
            value = [value]
        fields[name] = [str(item).strip() for item in value if str(item).strip()]

    for name in ("time_complexity", "space_complexity"):
        if data.get(name):
            fields[name] = str(data[name]).strip()

    return ClassificationResult(source=ClassifierSource.LLM, **fields)


class LLMClassifier:
    """
    ProblemClassifier backed by an LLM.

    Attributes:
        client: LLMClient used for completions
        model: Model override (None uses the client's default)
        fallback: Classifier used when the LLM call or parsing fails
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        model: Optional[str] = None,
        fallback: Optional[ProblemClassifier] = None,
    ):
        self.client = client or get_llm_client()
        self.model = model
        self.fallback = fallback

    def _messages(self, code: str) -> list[dict[str, str]]:
        prompt = CLASSIFY_PROMPT.format(code=code[: settings.CLASSIFIER_MAX_CODE_CHARS])
        return build_messages(prompt, system_prompt=SYSTEM_PROMPT)

    def _fallback_or_raise(self, error: Exception) -> ProblemClassifier:
        if self.fallback is None:
            raise LLMError(f"LLM classification failed: {error}") from error
        logger.warning(f"LLM classification failed, using fallback classifier: {error}")
        return self.fallback

    def classify(self, code: str) -> ClassificationResult:
        """
        Classify solution code with the LLM.

        Code longer than settings.CLASSIFIER_MAX_CODE_CHARS is truncated.

        Raises:
            LLMError: If the call or parsing fails and no fallback is set
        """
        try:
            data = self.client.complete_sync(
                messages=self._messages(code),
                temperature=settings.CLASSIFIER_TEMPERATURE,
                max_tokens=settings.CLASSIFIER_MAX_TOKENS,
                json_mode=True,
                model=self.model,
            )
            return parse_classification(data)
        except Exception as e:
            return self._fallback_or_raise(e).classify(code)

    async def aclassify(self, code: str) -> ClassificationResult:
        """
        Classify solution code without blocking the event loop.

        Raises:
            LLMError: If the call or parsing fails and no fallback is set
        """
        try:
            data = await self.client.complete(
                messages=self._messages(code),
                temperature=settings.CLASSIFIER_TEMPERATURE,
                max_tokens=settings.CLASSIFIER_MAX_TOKENS,
                json_mode=True,
                model=self.model,
            )
            return parse_classification(data)
        except Exception as e:
            fallback = self._fallback_or_raise(e)
        return await fallback.aclassify(code)
