"""Core components for codedigest."""

from .models import Config, FileEntry, OutputFormat, ProcessingState
from .classifier import ContentClassifier
from .tokenizer import TokenCounter

__all__ = [
    "Config",
    "FileEntry",
    "OutputFormat",
    "ProcessingState",
    "ContentClassifier",
    "TokenCounter",
]
