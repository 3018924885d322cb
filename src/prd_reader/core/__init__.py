# ABOUTME: Orchestration layer tying URL resolution, platform readers and summarization together
# ABOUTME: Used by both the CLI and the MCP server

from prd_reader.core.service import DocumentService

__all__ = ["DocumentService"]
