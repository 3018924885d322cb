# ABOUTME: Summarization of normalized documents
# ABOUTME: Optional downstream step after a document has been read

from prd_reader.summarization.summarizer import DocumentSummarizer, SummarizationError

__all__ = ["DocumentSummarizer", "SummarizationError"]
