"""
pdfdigest — chunked PDF summarization against a local LLM endpoint.

Extracts text from a PDF (pypdf or docling), summarizes it chunk by chunk
through an Ollama-style generate endpoint, and combines the partial summaries
into one final summary, optionally structured as JSON.
"""

__version__ = "0.1.0"
