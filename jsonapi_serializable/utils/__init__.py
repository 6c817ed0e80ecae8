"""Utilities for JSON:API query parameters."""

from .query_params import parse_fields, parse_include, parse_query_params

__all__ = ["parse_fields", "parse_include", "parse_query_params"]
