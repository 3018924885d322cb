# ABOUTME: MCP server exposing document reading (and summarization) as tools over stdio
# ABOUTME: Tool failures surface as error results for the client, never as a crashed server

from collections.abc import Awaitable
from typing import Any, TypeVar

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import TextContent, Tool
from pydantic import BaseModel, ValidationError

from prd_reader import __version__
from prd_reader.config import Config, get_config
from prd_reader.core.service import DocumentService
from prd_reader.extraction.base import DocumentReaderError, NormalizedDocument
from prd_reader.summarization import DocumentSummarizer, SummarizationError
from prd_reader.utils.logging import get_logger

SERVER_NAME = "prd-reader"

logger = get_logger(__name__)

Args = TypeVar("Args", bound=BaseModel)


class ToolError(Exception):
    """Raised for a tool call that cannot be served; reported to the client as an error result."""


class ConfluencePageArgs(BaseModel):
    url: str
    username: str
    token: str


class NotionPageArgs(BaseModel):
    url: str
    token: str


class GoogleDocArgs(BaseModel):
    url: str
    credentials: str


class SummarizeArgs(BaseModel):
    content: str
    title: str | None = None


TOOLS = [
    Tool(
        name="read_confluence_page",
        description="Read content from a Confluence page by URL",
        inputSchema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "The URL of the Confluence page to read"},
                "username": {"type": "string", "description": "Confluence username for authentication"},
                "token": {"type": "string", "description": "Confluence API token for authentication"},
            },
            "required": ["url", "username", "token"],
        },
    ),
    Tool(
        name="read_notion_page",
        description="Read content from a Notion page by URL",
        inputSchema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "The URL of the Notion page to read"},
                "token": {"type": "string", "description": "Notion integration token for authentication"},
            },
            "required": ["url", "token"],
        },
    ),
    Tool(
        name="read_google_doc",
        description="Read content from a Google Doc by URL",
        inputSchema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "The URL of the Google Doc to read"},
                "credentials": {"type": "string", "description": "Google service account credentials JSON"},
            },
            "required": ["url", "credentials"],
        },
    ),
    Tool(
        name="summarize_document",
        description="Summarize document text, e.g. the output of one of the read tools",
        inputSchema={
            "type": "object",
            "properties": {
                "content": {"type": "string", "description": "Document content to summarize"},
                "title": {"type": "string", "description": "Optional document title"},
            },
            "required": ["content"],
        },
    ),
]


class ToolDispatcher:
    """Validates tool arguments and routes calls to the document service."""

    def __init__(self, service: DocumentService | None = None, config: Config | None = None):
        self.config = config or get_config()
        self.service = service or DocumentService(self.config)
        self._summarizer: DocumentSummarizer | None = None

    async def call(self, name: str, arguments: dict[str, Any]) -> str:
        """Run a tool and return its text output.

        Raises:
            ToolError: For unknown tools, invalid arguments and failed reads
        """
        match name:
            case "read_confluence_page":
                args = _validate(ConfluencePageArgs, name, arguments)
                return await self._read(
                    "Confluence page", self.service.read_confluence_page(args.url, args.username, args.token)
                )
            case "read_notion_page":
                args = _validate(NotionPageArgs, name, arguments)
                return await self._read("Notion page", self.service.read_notion_page(args.url, args.token))
            case "read_google_doc":
                args = _validate(GoogleDocArgs, name, arguments)
                return await self._read("Google Doc", self.service.read_google_doc(args.url, args.credentials))
            case "summarize_document":
                args = _validate(SummarizeArgs, name, arguments)
                try:
                    return await self._get_summarizer().summarize(args.content, args.title)
                except SummarizationError as e:
                    raise ToolError(f"Error executing {name}: {e}") from e
            case _:
                raise ToolError(f"Unknown tool: {name}")

    async def _read(self, subject: str, pending: Awaitable[NormalizedDocument]) -> str:
        try:
            document = await pending
        except DocumentReaderError as e:
            logger.warning("Tool read failed", subject=subject, error=str(e), error_type=type(e).__name__)
            raise ToolError(f"Error reading {subject}: {e}") from e
        return document.to_markdown()

    def _get_summarizer(self) -> DocumentSummarizer:
        if self._summarizer is None:
            if not self.config.anthropic_api_key:
                raise ToolError("API key required - set PRD_READER_ANTHROPIC_API_KEY to enable summaries")
            self._summarizer = DocumentSummarizer(
                api_key=self.config.anthropic_api_key,
                model=self.config.summary_model,
                max_tokens=self.config.summary_max_tokens,
            )
        return self._summarizer


def _validate(model: type[Args], name: str, arguments: dict[str, Any]) -> Args:
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise ToolError(f"Invalid arguments for {name}") from e


def build_server(dispatcher: ToolDispatcher | None = None) -> Server:
    """Create the MCP server with its tool handlers registered."""
    dispatcher = dispatcher or ToolDispatcher()
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        return TOOLS

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        logger.info("Tool call", tool=name)
        text = await dispatcher.call(name, arguments or {})
        return [TextContent(type="text", text=text)]

    return server


async def serve(dispatcher: ToolDispatcher | None = None) -> None:
    """Serve tools over stdio until the client disconnects."""
    from mcp.server.stdio import stdio_server

    server = build_server(dispatcher)

    async with stdio_server() as (read_stream, write_stream):
        logger.info("PRD reader MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(), experimental_capabilities={}
                ),
            ),
        )
