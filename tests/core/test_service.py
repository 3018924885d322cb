# ABOUTME: Tests for DocumentService credential resolution and platform dispatch
# ABOUTME: Reader network calls are mocked with pytest-httpx or patched out entirely

from unittest.mock import AsyncMock, patch

import pytest

from prd_reader.config import Config
from prd_reader.core.service import DocumentService, MissingCredentialsError
from prd_reader.extraction.base import MalformedUrlError, NormalizedDocument
from prd_reader.extraction.resolver import Platform

CONFLUENCE_URL = "https://acme.atlassian.net/wiki/spaces/PROD/pages/777/Launch"
NOTION_URL = "https://www.notion.so/acme/Launch-0123456789abcdef0123456789abcdef"
GOOGLE_URL = "https://docs.google.com/document/d/abc123/edit"


@pytest.fixture
def empty_config():
    return Config(
        _env_file=None,
        confluence_username="",
        confluence_token="",
        notion_token="",
        google_credentials="",
    )


@pytest.fixture
def configured():
    return Config(
        _env_file=None,
        confluence_username="pm@acme.com",
        confluence_token="conf-token",
        notion_token="secret_notion",
        google_credentials='{"type": "service_account"}',
    )


def _document(doc_id: str = "1") -> NormalizedDocument:
    return NormalizedDocument(id=doc_id, title="Launch", content="body", url="https://x")


class TestMissingCredentials:
    @pytest.mark.asyncio
    async def test_confluence(self, empty_config):
        with pytest.raises(MissingCredentialsError, match="Confluence username and token required"):
            await DocumentService(empty_config).read_confluence_page(CONFLUENCE_URL)

    @pytest.mark.asyncio
    async def test_confluence_partial(self, empty_config):
        with pytest.raises(MissingCredentialsError):
            await DocumentService(empty_config).read_confluence_page(CONFLUENCE_URL, username="pm@acme.com")

    @pytest.mark.asyncio
    async def test_notion(self, empty_config):
        with pytest.raises(MissingCredentialsError, match="Notion token required"):
            await DocumentService(empty_config).read_notion_page(NOTION_URL)

    @pytest.mark.asyncio
    async def test_google(self, empty_config):
        with pytest.raises(MissingCredentialsError, match="Google service account credentials required"):
            await DocumentService(empty_config).read_google_doc(GOOGLE_URL)


class TestReads:
    @pytest.mark.asyncio
    async def test_confluence_uses_explicit_credentials(self, empty_config, httpx_mock):
        httpx_mock.add_response(
            url="https://acme.atlassian.net/rest/api/content/777?expand=body.storage,space",
            json={
                "id": "777",
                "title": "Launch",
                "body": {"storage": {"value": "<p>Go live</p>"}},
                "_links": {"webui": "/wiki/spaces/PROD/pages/777"},
            },
        )

        document = await DocumentService(empty_config).read_confluence_page(
            CONFLUENCE_URL, username="pm@acme.com", token="explicit"
        )

        assert document.content == "Go live"
        assert document.url == "https://acme.atlassian.net/wiki/spaces/PROD/pages/777"

    @pytest.mark.asyncio
    async def test_notion_uses_configured_defaults(self, httpx_mock):
        config = Config(
            _env_file=None, notion_token="secret_notion", default_callout_emoji="📌", notion_version="2025-01-01"
        )
        page_id = "0123456789abcdef0123456789abcdef"
        httpx_mock.add_response(
            url=f"https://api.notion.com/v1/pages/{page_id}",
            match_headers={"Notion-Version": "2025-01-01"},
            json={"properties": {}},
        )
        httpx_mock.add_response(
            url=f"https://api.notion.com/v1/blocks/{page_id}/children?page_size=100",
            json={
                "results": [{"type": "callout", "callout": {"rich_text": [{"text": {"content": "Note"}}]}}],
                "has_more": False,
            },
        )

        document = await DocumentService(config).read_notion_page(NOTION_URL)

        assert document.content == "📌 Note"

    @pytest.mark.asyncio
    async def test_malformed_url_propagates(self, configured):
        with pytest.raises(MalformedUrlError):
            await DocumentService(configured).read_notion_page("https://www.notion.so/acme/nothing")


class TestDispatch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("url", "method", "expected_args"),
        [
            (CONFLUENCE_URL, "read_confluence_page", (CONFLUENCE_URL, None, None)),
            (NOTION_URL, "read_notion_page", (NOTION_URL, None)),
            (GOOGLE_URL, "read_google_doc", (GOOGLE_URL, None)),
        ],
    )
    async def test_detects_platform(self, configured, url, method, expected_args):
        service = DocumentService(configured)

        with patch.object(service, method, AsyncMock(return_value=_document())) as reader:
            document = await service.read(url)

        reader.assert_awaited_once_with(*expected_args)
        assert document.title == "Launch"

    @pytest.mark.asyncio
    async def test_explicit_platform_overrides_detection(self, configured):
        service = DocumentService(configured)
        url = "https://wiki.internal.example/pages/42"

        with patch.object(service, "read_confluence_page", AsyncMock(return_value=_document("42"))) as reader:
            document = await service.read(url, Platform.CONFLUENCE)

        reader.assert_awaited_once_with(url, None, None)
        assert document.id == "42"

    @pytest.mark.asyncio
    async def test_passes_explicit_credentials(self, empty_config):
        service = DocumentService(empty_config)

        with (
            patch.object(service, "read_confluence_page", AsyncMock(return_value=_document())) as confluence,
            patch.object(service, "read_google_doc", AsyncMock(return_value=_document())) as google,
        ):
            await service.read(CONFLUENCE_URL, username="pm@acme.com", token="conf-token")
            await service.read(GOOGLE_URL, credentials="{}")

        confluence.assert_awaited_once_with(CONFLUENCE_URL, "pm@acme.com", "conf-token")
        google.assert_awaited_once_with(GOOGLE_URL, "{}")

    @pytest.mark.asyncio
    async def test_unknown_platform(self, configured):
        with pytest.raises(MalformedUrlError):
            await DocumentService(configured).read("https://example.com/doc")
