"""Shared helpers."""

from squix.utils.json_extractor import JSONExtractionError, extract_json, strip_code_fence

__all__ = ["JSONExtractionError", "extract_json", "strip_code_fence"]
