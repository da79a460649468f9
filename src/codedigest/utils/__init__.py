"""Utility modules for codedigest."""

from .encodings import EncodingDetector
from .ignore_rules import IgnoreRuleSet
from .tree_builder import TreeRenderer

__all__ = ["EncodingDetector", "IgnoreRuleSet", "TreeRenderer"]
