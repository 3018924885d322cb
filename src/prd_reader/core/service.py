# ABOUTME: High-level service API: read one document per call on any supported platform
# ABOUTME: Builds the right reader from explicit credentials or configuration defaults

from __future__ import annotations

from prd_reader.config import Config, get_config
from prd_reader.extraction.base import DocumentReaderError, NormalizedDocument
from prd_reader.extraction.confluence import ConfluenceReader
from prd_reader.extraction.google_docs import GoogleDocsReader
from prd_reader.extraction.notion import NotionReader
from prd_reader.extraction.resolver import Platform, detect_platform
from prd_reader.utils.logging import get_logger, with_document_context


class MissingCredentialsError(DocumentReaderError):
    """Raised when neither the caller nor the configuration supplies a platform secret."""


class DocumentService:
    """Reads documents from Confluence, Google Docs and Notion.

    Each call creates its own reader and HTTP client, so calls may run
    concurrently without sharing state.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or get_config()
        self.logger = get_logger(__name__)

    async def read_confluence_page(
        self, url: str, username: str | None = None, token: str | None = None
    ) -> NormalizedDocument:
        username = username or self.config.confluence_username
        token = token or self.config.confluence_token
        if not username or not token:
            raise MissingCredentialsError(
                Platform.CONFLUENCE.label,
                "Confluence username and token required - set PRD_READER_CONFLUENCE_USERNAME and "
                "PRD_READER_CONFLUENCE_TOKEN or pass them explicitly",
            )

        with with_document_context(url, Platform.CONFLUENCE.value) as logger:
            async with ConfluenceReader.for_url(url, username, token, timeout=self.config.request_timeout) as reader:
                document = await reader.get_document_by_url(url)
            logger.info("Read Confluence page", document_id=document.id, title=document.title)
            return document

    async def read_notion_page(self, url: str, token: str | None = None) -> NormalizedDocument:
        token = token or self.config.notion_token
        if not token:
            raise MissingCredentialsError(
                Platform.NOTION.label, "Notion token required - set PRD_READER_NOTION_TOKEN or pass it explicitly"
            )

        with with_document_context(url, Platform.NOTION.value) as logger:
            async with NotionReader(
                token,
                timeout=self.config.request_timeout,
                notion_version=self.config.notion_version,
                callout_emoji=self.config.default_callout_emoji,
            ) as reader:
                document = await reader.get_document_by_url(url)
            logger.info("Read Notion page", document_id=document.id, title=document.title)
            return document

    async def read_google_doc(self, url: str, credentials: str | None = None) -> NormalizedDocument:
        credentials = credentials or self.config.google_credentials
        if not credentials:
            raise MissingCredentialsError(
                Platform.GOOGLE_DOCS.label,
                "Google service account credentials required - set PRD_READER_GOOGLE_CREDENTIALS "
                "or pass them explicitly",
            )

        with with_document_context(url, Platform.GOOGLE_DOCS.value) as logger:
            async with GoogleDocsReader(credentials, timeout=self.config.request_timeout) as reader:
                document = await reader.get_document_by_url(url)
            logger.info("Read Google Doc", document_id=document.id, title=document.title)
            return document

    async def read(
        self,
        url: str,
        platform: Platform | None = None,
        username: str | None = None,
        token: str | None = None,
        credentials: str | None = None,
    ) -> NormalizedDocument:
        """Read a document on any platform, detecting the platform when not given.

        Secrets not passed explicitly come from configuration. `username` and `token`
        apply to Confluence, `token` to Notion and `credentials` to Google Docs.
        """
        platform = platform or detect_platform(url)
        self.logger.debug("Dispatching document read", url=url, platform=platform.value)

        match platform:
            case Platform.CONFLUENCE:
                return await self.read_confluence_page(url, username, token)
            case Platform.GOOGLE_DOCS:
                return await self.read_google_doc(url, credentials)
            case Platform.NOTION:
                return await self.read_notion_page(url, token)
        raise ValueError(f"Unknown platform: {platform!r}")
