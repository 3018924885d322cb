# ABOUTME: Tests for the MCP tool surface: argument validation, routing and error results
# ABOUTME: The document service is mocked; handlers are invoked through the server's request table

from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.types import CallToolRequest, CallToolRequestParams, ListToolsRequest

from prd_reader.config import Config
from prd_reader.core.service import DocumentService
from prd_reader.extraction.base import MalformedUrlError, NormalizedDocument, UpstreamApiError
from prd_reader.server import TOOLS, ToolDispatcher, ToolError, build_server

NOTION_URL = "https://www.notion.so/acme/Launch-0123456789abcdef0123456789abcdef"

DOCUMENT = NormalizedDocument(id="42", title="Launch", content="## Goals\n\nShip it", url="https://x/42")


@pytest.fixture
def service():
    service = MagicMock(spec=DocumentService)
    service.read_confluence_page = AsyncMock(return_value=DOCUMENT)
    service.read_notion_page = AsyncMock(return_value=DOCUMENT)
    service.read_google_doc = AsyncMock(return_value=DOCUMENT)
    return service


@pytest.fixture
def dispatcher(service):
    return ToolDispatcher(service=service, config=Config(_env_file=None, anthropic_api_key=""))


def test_tool_names():
    assert [tool.name for tool in TOOLS] == [
        "read_confluence_page",
        "read_notion_page",
        "read_google_doc",
        "summarize_document",
    ]


class TestDispatch:
    @pytest.mark.asyncio
    async def test_read_confluence_page(self, dispatcher, service):
        text = await dispatcher.call(
            "read_confluence_page", {"url": "https://acme.atlassian.net/wiki/pages/42", "username": "u", "token": "t"}
        )

        assert text == "# Launch\n\n## Goals\n\nShip it\n\nSource: https://x/42"
        service.read_confluence_page.assert_awaited_once_with("https://acme.atlassian.net/wiki/pages/42", "u", "t")

    @pytest.mark.asyncio
    async def test_read_notion_page(self, dispatcher, service):
        await dispatcher.call("read_notion_page", {"url": NOTION_URL, "token": "secret"})
        service.read_notion_page.assert_awaited_once_with(NOTION_URL, "secret")

    @pytest.mark.asyncio
    async def test_read_google_doc(self, dispatcher, service):
        await dispatcher.call("read_google_doc", {"url": "https://docs.google.com/document/d/x", "credentials": "{}"})
        service.read_google_doc.assert_awaited_once_with("https://docs.google.com/document/d/x", "{}")

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher):
        with pytest.raises(ToolError, match="Unknown tool: delete_page"):
            await dispatcher.call("delete_page", {})

    @pytest.mark.asyncio
    async def test_missing_argument(self, dispatcher, service):
        with pytest.raises(ToolError, match="Invalid arguments for read_notion_page"):
            await dispatcher.call("read_notion_page", {"url": NOTION_URL})
        service.read_notion_page.assert_not_called()

    @pytest.mark.asyncio
    async def test_reader_error_names_the_platform(self, dispatcher, service):
        service.read_notion_page.side_effect = UpstreamApiError("Notion", 404, "Could not find page")

        with pytest.raises(ToolError) as exc_info:
            await dispatcher.call("read_notion_page", {"url": NOTION_URL, "token": "secret"})

        assert str(exc_info.value) == "Error reading Notion page: Notion API error: 404 - Could not find page"

    @pytest.mark.asyncio
    async def test_malformed_confluence_url(self, dispatcher, service):
        service.read_confluence_page.side_effect = MalformedUrlError("Confluence", "https://acme.atlassian.net")

        with pytest.raises(ToolError, match="Error reading Confluence page: Cannot extract page ID from URL"):
            await dispatcher.call(
                "read_confluence_page", {"url": "https://acme.atlassian.net", "username": "u", "token": "t"}
            )

    @pytest.mark.asyncio
    async def test_summarize_requires_api_key(self, dispatcher):
        with pytest.raises(ToolError, match="API key required"):
            await dispatcher.call("summarize_document", {"content": "text"})

    @pytest.mark.asyncio
    async def test_summarize(self, dispatcher):
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(return_value="Short summary")
        dispatcher._summarizer = summarizer

        assert await dispatcher.call("summarize_document", {"content": "text", "title": "Launch"}) == "Short summary"
        summarizer.summarize.assert_awaited_once_with("text", "Launch")


class TestServerHandlers:
    @pytest.mark.asyncio
    async def test_list_tools(self, dispatcher):
        server = build_server(dispatcher)

        result = await server.request_handlers[ListToolsRequest](ListToolsRequest(method="tools/list"))

        assert {tool.name for tool in result.root.tools} == {tool.name for tool in TOOLS}

    @pytest.mark.asyncio
    async def test_call_tool_returns_markdown(self, dispatcher):
        server = build_server(dispatcher)
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name="read_notion_page", arguments={"url": NOTION_URL, "token": "secret"}),
        )

        result = await server.request_handlers[CallToolRequest](request)

        assert not result.root.isError
        assert result.root.content[0].text.startswith("# Launch")

    @pytest.mark.asyncio
    async def test_call_tool_failure_is_an_error_result(self, dispatcher, service):
        service.read_notion_page.side_effect = UpstreamApiError("Notion", 401, "API token is invalid.")
        server = build_server(dispatcher)
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name="read_notion_page", arguments={"url": NOTION_URL, "token": "bad"}),
        )

        result = await server.request_handlers[CallToolRequest](request)

        assert result.root.isError
        assert "Error reading Notion page: Notion API error: 401 - API token is invalid." in result.root.content[0].text
