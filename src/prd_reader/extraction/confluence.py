# ABOUTME: Confluence reader: fetches a page in storage format through the REST content API
# ABOUTME: Storage HTML is flattened to plain text; the canonical URL comes from the page's web UI link

from typing import Any

import httpx

from prd_reader.extraction.base import BaseDocumentReader, NormalizedDocument, UpstreamApiError
from prd_reader.extraction.rendering import strip_html
from prd_reader.extraction.resolver import Platform, resolve
from prd_reader.utils.logging import log_api_call


class ConfluenceReader(BaseDocumentReader):
    """Reads Confluence pages with basic auth (account name and API token)."""

    platform = Platform.CONFLUENCE.label

    def __init__(
        self,
        base_url: str,
        username: str,
        token: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        super().__init__(client=client, timeout=timeout)
        self.base_url = base_url.rstrip("/")
        self.auth = httpx.BasicAuth(username, token)

    @classmethod
    def for_url(cls, url: str, username: str, token: str, **kwargs: Any) -> "ConfluenceReader":
        """Build a reader rooted at the site the page URL points to."""
        location = resolve(Platform.CONFLUENCE, url)
        return cls(location.root_address, username, token, **kwargs)

    async def get_document_by_url(self, url: str) -> NormalizedDocument:
        location = resolve(Platform.CONFLUENCE, url)
        return await self.get_document_by_id(location.document_id)

    async def get_document_by_id(self, document_id: str) -> NormalizedDocument:
        page = await self._fetch_page(document_id)

        try:
            html = page["body"]["storage"]["value"]
            title = page["title"]
        except (KeyError, TypeError) as e:
            raise UpstreamApiError(self.platform, None, f"Page response is missing {e}") from e

        if not isinstance(html, str | None) or not isinstance(title, str | None):
            raise UpstreamApiError(self.platform, None, "Page body or title is not a string")

        links = page.get("_links")
        webui = links.get("webui") if isinstance(links, dict) else None
        if not isinstance(webui, str) or not webui:
            webui = f"/pages/viewpage.action?pageId={document_id}"

        content = strip_html(html or "")

        self.logger.info("Normalized Confluence page", page_id=document_id, content_length=len(content))

        return NormalizedDocument(
            id=str(page.get("id") or document_id),
            title=title or "",
            content=content,
            url=f"{self.base_url}{webui}",
        )

    @log_api_call("confluence.content.get")
    async def _fetch_page(self, page_id: str) -> dict[str, Any]:
        return await self._get_json(
            f"{self.base_url}/rest/api/content/{page_id}",
            auth=self.auth,
            headers={"Accept": "application/json"},
            params={"expand": "body.storage,space"},
        )
