"""
This facade exposes the public API for the parser module.
"""
from .facade import SourceUnit, parse_source
from .config import language_for_path

__all__ = ["SourceUnit", "parse_source", "language_for_path"]
