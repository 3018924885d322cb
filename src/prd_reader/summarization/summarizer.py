# ABOUTME: DSPy-based summarization of normalized product requirement documents
# ABOUTME: Produces a prose summary or a list of key points; the language model is bound per call

import re
from typing import Any, cast

import dspy
import litellm
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from prd_reader.utils.logging import get_logger

DEFAULT_SUMMARY_MODEL = "anthropic/claude-3-haiku-20240307"
DEFAULT_MAX_TOKENS = 1000
NO_SUMMARY = "Unable to generate summary"

_BULLET = re.compile(r"^[•-]\s*")
_NUMBERING = re.compile(r"^\d+\.\s*")

# Errors worth another attempt; auth and bad request errors fail at once
TRANSIENT_LM_ERRORS = (
    litellm.RateLimitError,
    litellm.Timeout,
    litellm.APIConnectionError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
    TimeoutError,
    ConnectionError,
)


class SummarizationError(Exception):
    """Raised when the language model call fails."""


class SummarySignature(dspy.Signature):
    """Summarize a Product Requirement Document clearly and concisely.

    Cover the main objectives and goals, key requirements and features, target
    audience or users, success criteria or metrics, and important constraints.
    """

    document_title: str = dspy.InputField(description="Title of the document, or 'Untitled'")
    document_content: str = dspy.InputField(description="Document content as Markdown text")
    summary: str = dspy.OutputField(description="Comprehensive summary of the document")


class KeyPointsSignature(dspy.Signature):
    """Extract the most important key points from a Product Requirement Document."""

    document_title: str = dspy.InputField(description="Title of the document, or 'Untitled'")
    document_content: str = dspy.InputField(description="Document content as Markdown text")
    key_points: list[str] = dspy.OutputField(description="Key points, one short statement each")


def clean_key_point(point: str) -> str:
    """Strip bullet and numbering markers a model may leave on a key point."""
    point = point.strip()
    point = _BULLET.sub("", point)
    return _NUMBERING.sub("", point).strip()


class DocumentSummarizer:
    """Summarizes documents with a language model reached through DSPy."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_SUMMARY_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_attempts: int = 3,
    ):
        """Initialize the summarizer.

        Args:
            api_key: API key for the model provider
            model: LiteLLM-style model identifier
            max_tokens: Maximum tokens generated per call
            max_attempts: Attempts per call before giving up
        """
        self.model = model
        self.max_tokens = max_tokens
        self.max_attempts = max_attempts
        self.lm = dspy.LM(model, api_key=api_key, max_tokens=max_tokens)
        self.summarize_document = dspy.Predict(SummarySignature)
        self.extract_key_points_from = dspy.Predict(KeyPointsSignature)
        self.logger = get_logger(__name__)

    async def summarize(self, content: str, title: str | None = None) -> str:
        """Summarize document content.

        Raises:
            SummarizationError: If the model call fails after all attempts
        """
        try:
            result = await self._predict(self.summarize_document, content, title)
        except Exception as e:
            raise SummarizationError(f"Summarization failed: {e}") from e

        summary = (cast("SummarySignature", result).summary or "").strip()
        self.logger.info("Generated summary", title=title, summary_length=len(summary))
        return summary or NO_SUMMARY

    async def extract_key_points(self, content: str, title: str | None = None) -> list[str]:
        """Extract key points from document content.

        Raises:
            SummarizationError: If the model call fails after all attempts
        """
        try:
            result = await self._predict(self.extract_key_points_from, content, title)
        except Exception as e:
            raise SummarizationError(f"Key points extraction failed: {e}") from e

        points = [clean_key_point(point) for point in cast("KeyPointsSignature", result).key_points or []]
        points = [point for point in points if point]
        self.logger.info("Extracted key points", title=title, point_count=len(points))
        return points

    async def _predict(self, predictor: dspy.Predict, content: str, title: str | None) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, max=8),
            retry=retry_if_exception_type(TRANSIENT_LM_ERRORS),
            reraise=True,
        ):
            with attempt:
                with dspy.context(lm=self.lm):
                    return await predictor.acall(document_title=title or "Untitled", document_content=content)
