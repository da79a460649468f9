"""codedigest: flatten a project tree into LLM-ready text digests."""

__version__ = "1.0.0"
