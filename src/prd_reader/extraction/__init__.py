# ABOUTME: Content normalization engine: URL resolution, per-platform readers, shared renderers
# ABOUTME: Pipeline: URL -> resolver -> platform API -> node extractor -> NormalizedDocument

"""
Extraction Layer: turn platform documents into canonical Markdown text

This layer handles:
- Resolving document identifiers from Confluence, Google Docs and Notion URLs
- Fetching content trees from each platform API
- Flattening content nodes into ordered Markdown blocks

Data Flow: Document URL -> content tree -> NormalizedDocument
"""

from prd_reader.extraction.base import (
    DocumentReader,
    DocumentReaderError,
    InvalidCredentialsError,
    MalformedUrlError,
    NormalizedDocument,
    UpstreamApiError,
)
from prd_reader.extraction.confluence import ConfluenceReader
from prd_reader.extraction.google_docs import GoogleDocsReader
from prd_reader.extraction.notion import NotionReader
from prd_reader.extraction.resolver import Platform, ResolvedLocation, detect_platform, resolve

__all__ = [
    "ConfluenceReader",
    "DocumentReader",
    "DocumentReaderError",
    "GoogleDocsReader",
    "InvalidCredentialsError",
    "MalformedUrlError",
    "NormalizedDocument",
    "NotionReader",
    "Platform",
    "ResolvedLocation",
    "UpstreamApiError",
    "detect_platform",
    "resolve",
]
