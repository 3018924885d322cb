# ABOUTME: Resolves platform URLs to document identifiers and platform root addresses
# ABOUTME: Pure functions, no I/O: a URL that does not match raises MalformedUrlError

import re
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel

from prd_reader.extraction.base import MalformedUrlError

CONFLUENCE_PAGE_ID = re.compile(r"pages/(\d+)")
GOOGLE_DOC_ID = re.compile(r"/document/d/([a-zA-Z0-9\-_]+)")
NOTION_PAGE_ID = re.compile(
    r"([a-f0-9]{32}|[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12})", re.IGNORECASE
)

GOOGLE_DOCS_ROOT = "https://docs.google.com"
NOTION_ROOT = "https://www.notion.so"


class Platform(str, Enum):
    CONFLUENCE = "confluence"
    GOOGLE_DOCS = "google_docs"
    NOTION = "notion"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Platform.CONFLUENCE: "Confluence",
    Platform.GOOGLE_DOCS: "Google Docs",
    Platform.NOTION: "Notion",
}


class ResolvedLocation(BaseModel):
    """Where a document lives: the platform, its root address and the document identifier."""

    platform: Platform
    root_address: str
    document_id: str


def resolve(platform: Platform, url: str) -> ResolvedLocation:
    """Extract the document identifier and root address from a platform URL.

    When several identifier-shaped substrings occur, the leftmost one wins.

    Args:
        platform: Platform the URL belongs to
        url: User supplied document URL

    Returns:
        The resolved location

    Raises:
        MalformedUrlError: If the URL does not match the platform's addressing pattern
    """
    match platform:
        case Platform.CONFLUENCE:
            return _resolve_confluence(url)
        case Platform.GOOGLE_DOCS:
            return _resolve_google_doc(url)
        case Platform.NOTION:
            return _resolve_notion(url)
    raise ValueError(f"Unknown platform: {platform!r}")


def _resolve_confluence(url: str) -> ResolvedLocation:
    match = CONFLUENCE_PAGE_ID.search(url)
    parsed = urlparse(url)
    if not match or not parsed.scheme or not parsed.netloc:
        raise MalformedUrlError(Platform.CONFLUENCE.label, url)

    return ResolvedLocation(
        platform=Platform.CONFLUENCE,
        root_address=f"{parsed.scheme}://{parsed.netloc}",
        document_id=match.group(1),
    )


def _resolve_google_doc(url: str) -> ResolvedLocation:
    match = GOOGLE_DOC_ID.search(url)
    if not match:
        raise MalformedUrlError(Platform.GOOGLE_DOCS.label, url, subject="document")

    return ResolvedLocation(platform=Platform.GOOGLE_DOCS, root_address=GOOGLE_DOCS_ROOT, document_id=match.group(1))


def _resolve_notion(url: str) -> ResolvedLocation:
    match = NOTION_PAGE_ID.search(url)
    if not match:
        raise MalformedUrlError(Platform.NOTION.label, url)

    return ResolvedLocation(
        platform=Platform.NOTION, root_address=NOTION_ROOT, document_id=match.group(1).replace("-", "")
    )


def _on_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith(f".{domain}")


def detect_platform(url: str) -> Platform:
    """Guess the platform a URL belongs to from its host and path.

    Raises:
        MalformedUrlError: If the URL matches no known platform
    """
    host = (urlparse(url).hostname or "").lower()

    if host == "docs.google.com":
        return Platform.GOOGLE_DOCS
    if _on_domain(host, "notion.so") or _on_domain(host, "notion.site"):
        return Platform.NOTION
    if _on_domain(host, "atlassian.net") or CONFLUENCE_PAGE_ID.search(url):
        return Platform.CONFLUENCE

    raise MalformedUrlError("Document", url, subject="platform or document")
