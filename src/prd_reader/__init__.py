# ABOUTME: prd-reader package root
# ABOUTME: Reads Confluence, Google Docs and Notion documents into canonical Markdown text

__version__ = "0.1.0"
