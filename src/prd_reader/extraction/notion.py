# ABOUTME: Notion reader: fetches page metadata and paged child blocks, then flattens blocks to Markdown
# ABOUTME: Also resolves the page title from its properties with a fixed precedence

from typing import Any

import httpx

from prd_reader.extraction.base import BaseDocumentReader, NormalizedDocument, UpstreamApiError
from prd_reader.extraction.rendering import (
    DIVIDER,
    collect_blocks,
    join_blocks,
    render_bullet,
    render_callout,
    render_code,
    render_heading,
    render_numbered,
    render_quote,
    render_rich_text,
    render_todo,
)
from prd_reader.extraction.resolver import NOTION_ROOT, Platform, resolve
from prd_reader.utils.logging import log_api_call

NOTION_API_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_CALLOUT_EMOJI = "💡"
BLOCK_PAGE_SIZE = 100
UNTITLED = "Untitled"


def _text(block: dict[str, Any], kind: str) -> str:
    payload = block.get(kind)
    return render_rich_text(payload.get("rich_text") if isinstance(payload, dict) else None)


def extract_block(block: dict[str, Any], callout_emoji: str = DEFAULT_CALLOUT_EMOJI) -> list[str]:
    """Render one Notion block.

    Block types without a rendering (images, embeds, types added to the API
    later) produce an empty list so one odd block never fails the page.

    Args:
        block: Block object from the Notion API
        callout_emoji: Emoji for callouts whose icon is not an emoji

    Returns:
        Zero or one rendered blocks
    """
    kind = block.get("type")

    match kind:
        case "paragraph":
            return [_text(block, kind)]
        case "heading_1" | "heading_2" | "heading_3":
            return [render_heading(int(kind[-1]), _text(block, kind))]
        case "bulleted_list_item":
            return [render_bullet(_text(block, kind))]
        case "numbered_list_item":
            return [render_numbered(_text(block, kind))]
        case "to_do":
            return [render_todo(_text(block, kind), bool((block.get("to_do") or {}).get("checked")))]
        case "code":
            return [render_code(_text(block, kind), (block.get("code") or {}).get("language") or "")]
        case "quote":
            return [render_quote(_text(block, kind))]
        case "callout":
            icon = (block.get("callout") or {}).get("icon") or {}
            return [render_callout(_text(block, kind), icon.get("emoji") or callout_emoji)]
        case "divider":
            return [DIVIDER]
        case _:
            return []


def extract_blocks(blocks: list[dict[str, Any]], callout_emoji: str = DEFAULT_CALLOUT_EMOJI) -> list[str]:
    return collect_blocks(extract_block(block, callout_emoji) for block in blocks)


def resolve_title(page: dict[str, Any]) -> str:
    """Pick the page title: the "title" property, then "Name", then any title-typed property."""
    properties = page.get("properties")
    if not isinstance(properties, dict):
        return UNTITLED

    for name in ("title", "Name"):
        prop = properties.get(name)
        if isinstance(prop, dict) and isinstance(prop.get("title"), list):
            return render_rich_text(prop["title"])

    for prop in properties.values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return render_rich_text(prop.get("title") or [])

    return UNTITLED


class NotionReader(BaseDocumentReader):
    """Reads Notion pages with an integration token."""

    platform = Platform.NOTION.label

    def __init__(
        self,
        token: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        notion_version: str = DEFAULT_NOTION_VERSION,
        callout_emoji: str = DEFAULT_CALLOUT_EMOJI,
        api_url: str = NOTION_API_URL,
    ):
        """Initialize the reader.

        Args:
            token: Notion integration token
            client: HTTP client for Notion API calls (optional)
            timeout: Request timeout in seconds for the default client
            notion_version: Value of the Notion-Version header
            callout_emoji: Emoji for callouts without an emoji icon
            api_url: Notion API base URL
        """
        super().__init__(client=client, timeout=timeout)
        self.token = token
        self.notion_version = notion_version
        self.callout_emoji = callout_emoji
        self.api_url = api_url.rstrip("/")

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Notion-Version": self.notion_version}

    async def get_document_by_url(self, url: str) -> NormalizedDocument:
        location = resolve(Platform.NOTION, url)
        return await self.get_document_by_id(location.document_id)

    async def get_document_by_id(self, document_id: str) -> NormalizedDocument:
        page = await self._fetch_page(document_id)
        title = resolve_title(page)

        url = page.get("url")
        if not isinstance(url, str | None):
            raise UpstreamApiError(self.platform, None, "Page url is not a string")

        blocks = await self._fetch_all_blocks(document_id)
        rendered = extract_blocks(blocks, self.callout_emoji)

        self.logger.info(
            "Normalized Notion page", page_id=document_id, block_count=len(blocks), rendered_blocks=len(rendered)
        )

        return NormalizedDocument(
            id=document_id,
            title=title,
            content=join_blocks(rendered),
            url=url or f"{NOTION_ROOT}/{document_id}",
        )

    async def _fetch_all_blocks(self, page_id: str) -> list[dict[str, Any]]:
        """Follow the block children cursor until the last page."""
        blocks: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            data = await self._fetch_block_children(page_id, cursor)
            results = data.get("results")
            if not isinstance(results, list):
                raise UpstreamApiError(self.platform, None, "Block children response has no results list")

            blocks.extend(block for block in results if isinstance(block, dict))

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                return blocks

    @log_api_call("notion.pages.retrieve")
    async def _fetch_page(self, page_id: str) -> dict[str, Any]:
        return await self._get_json(f"{self.api_url}/pages/{page_id}", headers=self._headers)

    @log_api_call("notion.blocks.children.list")
    async def _fetch_block_children(self, page_id: str, cursor: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"page_size": BLOCK_PAGE_SIZE}
        if cursor:
            params["start_cursor"] = cursor
        return await self._get_json(f"{self.api_url}/blocks/{page_id}/children", headers=self._headers, params=params)
