# ABOUTME: Google Docs reader: fetches a document through the Docs API and flattens its structural elements
# ABOUTME: Paragraphs, heading styles, tables (with nested cell content) and section breaks become Markdown blocks

import asyncio
import json
import re
from typing import Any

import google.auth.exceptions
import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from prd_reader.extraction.base import (
    BaseDocumentReader,
    InvalidCredentialsError,
    NormalizedDocument,
    UpstreamApiError,
)
from prd_reader.extraction.rendering import DIVIDER, collect_blocks, join_blocks, render_heading, render_table
from prd_reader.extraction.resolver import GOOGLE_DOCS_ROOT, Platform, resolve
from prd_reader.utils.logging import log_api_call

GOOGLE_DOCS_API_URL = "https://docs.googleapis.com/v1"
GOOGLE_DOCS_SCOPES = ["https://www.googleapis.com/auth/documents.readonly"]
UNTITLED_DOCUMENT = "Untitled Document"

_HEADING_STYLE = re.compile(r"HEADING_(\d+)")


def extract_element(element: dict[str, Any]) -> list[str]:
    """Render one structural element. Unknown element kinds render to nothing."""
    match element:
        case {"paragraph": dict() as paragraph}:
            return [extract_paragraph(paragraph)]
        case {"table": dict() as table}:
            return [extract_table(table)]
        case {"sectionBreak": _}:
            return [DIVIDER]
        case _:
            # Table of contents and element kinds added later are skipped
            return []


def extract_paragraph(paragraph: dict[str, Any]) -> str:
    elements = paragraph.get("elements") or []

    text = ""
    for element in elements:
        run = element.get("textRun") if isinstance(element, dict) else None
        content = run.get("content") if isinstance(run, dict) else None
        if isinstance(content, str):
            text += content

    style = (paragraph.get("paragraphStyle") or {}).get("namedStyleType") or ""
    heading = _HEADING_STYLE.fullmatch(style)
    if heading:
        return render_heading(int(heading.group(1)), text)

    return text.strip()


def extract_table(table: dict[str, Any]) -> str:
    rows: list[list[str]] = []

    for row in table.get("tableRows") or []:
        cells = []
        for cell in row.get("tableCells") or []:
            # Inner block boundaries collapse inside a cell
            cells.append("".join(block for element in cell.get("content") or [] for block in extract_element(element)))
        rows.append(cells)

    return render_table(rows)


def extract_body(body: dict[str, Any] | None) -> list[str]:
    """Render a document body into its ordered, non-blank blocks."""
    if not isinstance(body, dict):
        return []
    return collect_blocks(extract_element(element) for element in body.get("content") or [])


class GoogleDocsReader(BaseDocumentReader):
    """Reads Google Docs with a service account."""

    platform = Platform.GOOGLE_DOCS.label

    def __init__(
        self,
        credentials: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        api_url: str = GOOGLE_DOCS_API_URL,
    ):
        """Initialize the reader.

        Args:
            credentials: Service account key file contents as a JSON string
            client: HTTP client for Docs API calls (optional)
            timeout: Request timeout in seconds for the default client
            api_url: Docs API base URL
        """
        try:
            self._service_account_info = json.loads(credentials)
        except (TypeError, ValueError) as e:
            raise InvalidCredentialsError(self.platform, "Invalid JSON format in credentials") from e

        if not isinstance(self._service_account_info, dict):
            raise InvalidCredentialsError(self.platform, "Invalid JSON format in credentials")

        super().__init__(client=client, timeout=timeout)

        self.api_url = api_url.rstrip("/")
        self._google_credentials: service_account.Credentials | None = None

    async def get_document_by_url(self, url: str) -> NormalizedDocument:
        location = resolve(Platform.GOOGLE_DOCS, url)
        return await self.get_document_by_id(location.document_id)

    async def get_document_by_id(self, document_id: str) -> NormalizedDocument:
        token = await self._authorize()
        document = await self._fetch_document(document_id, token)

        title = document.get("title")
        if not isinstance(title, str | None):
            raise UpstreamApiError(self.platform, None, "Document title is not a string")

        blocks = extract_body(document.get("body"))

        self.logger.info("Normalized Google Doc", document_id=document_id, block_count=len(blocks))

        return NormalizedDocument(
            id=document_id,
            title=title or UNTITLED_DOCUMENT,
            content=join_blocks(blocks),
            url=f"{GOOGLE_DOCS_ROOT}/document/d/{document_id}",
        )

    @log_api_call("google_docs.documents.get")
    async def _fetch_document(self, document_id: str, token: str) -> dict[str, Any]:
        return await self._get_json(
            f"{self.api_url}/documents/{document_id}",
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
        )

    async def _authorize(self) -> str:
        """Return a bearer token for the Docs API, refreshing the service account token if needed."""
        if self._google_credentials is None:
            try:
                self._google_credentials = service_account.Credentials.from_service_account_info(
                    self._service_account_info, scopes=GOOGLE_DOCS_SCOPES
                )
            except ValueError as e:
                raise InvalidCredentialsError(self.platform, f"Invalid service account credentials: {e}") from e

        if not self._google_credentials.valid:
            try:
                # google-auth refreshes synchronously
                await asyncio.to_thread(self._google_credentials.refresh, Request())
            except google.auth.exceptions.GoogleAuthError as e:
                raise UpstreamApiError(self.platform, None, f"Token refresh failed: {e}") from e

        return self._google_credentials.token
