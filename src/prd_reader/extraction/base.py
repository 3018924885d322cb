# ABOUTME: Shared contracts for platform document readers: errors, canonical document, HTTP plumbing
# ABOUTME: Every reader resolves a URL, fetches one content tree and returns a NormalizedDocument

from abc import ABC, abstractmethod
from typing import Any, Protocol

import httpx
from pydantic import BaseModel

from prd_reader.utils.logging import get_logger

DEFAULT_USER_AGENT = "prd-reader/0.1 (+https://github.com/prd-reader/prd-reader)"


class DocumentReaderError(Exception):
    """Base class for failures while reading a document from a platform."""

    def __init__(self, platform: str, message: str):
        super().__init__(message)
        self.platform = platform


class MalformedUrlError(DocumentReaderError):
    """Raised when no document identifier can be resolved from a URL. No request is made."""

    def __init__(self, platform: str, url: str, subject: str = "page"):
        super().__init__(platform, f"Cannot extract {subject} ID from URL: {url}")
        self.url = url


class UpstreamApiError(DocumentReaderError):
    """Raised when a platform API answers with an error status or an unusable body."""

    def __init__(self, platform: str, status_code: int | None, message: str):
        status = status_code if status_code is not None else "no response"
        super().__init__(platform, f"{platform} API error: {status} - {message}")
        self.status_code = status_code
        self.upstream_message = message


class InvalidCredentialsError(DocumentReaderError):
    """Raised when supplied credentials cannot be parsed."""


class NormalizedDocument(BaseModel):
    """Canonical, platform independent rendering of a document."""

    id: str
    title: str
    content: str
    url: str

    def to_markdown(self) -> str:
        """Render the document as a titled Markdown page with a source link."""
        return f"# {self.title}\n\n{self.content}\n\nSource: {self.url}"


class DocumentReader(Protocol):
    """Protocol for reading a document by its platform URL."""

    async def get_document_by_url(self, url: str) -> NormalizedDocument:
        """Resolve the URL, fetch the content tree and normalize it.

        Raises:
            MalformedUrlError: If the URL does not identify a document
            UpstreamApiError: If the platform API call fails
        """
        ...


class BaseDocumentReader(ABC):
    """Base class for platform readers. Owns an httpx client unless one is injected."""

    platform = "Document"

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0):
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": DEFAULT_USER_AGENT}, timeout=timeout
        )
        self.logger = get_logger(self.__class__.__module__)

    @abstractmethod
    async def get_document_by_url(self, url: str) -> NormalizedDocument:
        """Read the document addressed by the given URL."""

    @abstractmethod
    async def get_document_by_id(self, document_id: str) -> NormalizedDocument:
        """Read the document with the given platform identifier."""

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_json(self, url: str, **kwargs: Any) -> dict[str, Any]:
        """GET a JSON object, mapping every failure onto UpstreamApiError."""
        try:
            response = await self.http_client.get(url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamApiError(self.platform, None, str(e)) from e

        if response.is_error:
            raise UpstreamApiError(self.platform, response.status_code, _error_message(response))

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamApiError(self.platform, response.status_code, "Response body is not valid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamApiError(self.platform, response.status_code, "Response body is not a JSON object")

        return data


def _error_message(response: httpx.Response) -> str:
    """Pull the upstream error message out of an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or response.text

    if isinstance(data, dict):
        if isinstance(data.get("message"), str):
            return data["message"]
        # Google APIs nest the message under "error"
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]

    return response.reason_phrase or response.text
