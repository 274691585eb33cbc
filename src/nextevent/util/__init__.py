"""Helpers for building API queries and widget embed codes"""

from .query import Filter, Query, with_query
from .widget import Widget

__all__ = ["Filter", "Query", "Widget", "with_query"]
