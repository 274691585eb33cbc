"""Query string building for list endpoints

Filters are sent as two parameters, the value under the field name and the
comparison operator under `<name>_op`.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from nextevent.shared.exceptions import QueryError

DEFAULT_PAGE_SIZE = 25
OPERATOR_SUFFIX = "_op"


class Filter:
    """Single field filter, e.g. Filter("created", "2024-01-01", ">=")"""

    def __init__(self, name: str, value: Any, operator: str = "=") -> None:
        self.name = name
        self.value = value
        self.operator = operator

    def to_dict(self) -> dict[str, Any]:
        return {self.name: self.value, f"{self.name}{OPERATOR_SUFFIX}": self.operator}

    def __repr__(self) -> str:
        return f"Filter({self.name!r} {self.operator} {self.value!r})"


class Query:
    """Mutable set of query parameters and filters

    Args:
        parts_or_query: Another Query or a mapping of parameters; pairs of
            `x` and `x_op` are turned into filters
    """

    def __init__(self, parts_or_query: "Query | Mapping[str, Any] | None" = None):
        self._filters: list[Filter] = []
        if isinstance(parts_or_query, Query):
            self._parts = parts_or_query.to_dict()
        elif isinstance(parts_or_query, Mapping):
            self._parts = dict(parts_or_query)
        else:
            self._parts = {}
        self._apply_filters_from(dict(self._parts))

    def _apply_filters_from(self, parts: dict[str, Any]) -> None:
        for key, operator in parts.items():
            if not key.endswith(OPERATOR_SUFFIX):
                continue
            name = key[: -len(OPERATOR_SUFFIX)]
            if name not in parts:
                continue
            self.remove(name)
            self.remove(key)
            self.add_filter(Filter(name, parts[name], operator))

    def set(self, name: str, value: Any) -> "Query":
        self._parts[name] = value
        return self

    def get(self, name: str) -> Any:
        return self._parts.get(name)

    def remove(self, name: str) -> "Query":
        self._parts.pop(name, None)
        return self

    def add_filter(self, filter: Filter) -> "Query":
        """Add a filter, only one filter per field is supported

        Raises:
            QueryError: If a filter for the same field exists
        """
        if self.get_filter(filter.name) is not None:
            raise QueryError(
                "Multiple filters for the same field are not supported. "
                f'A filter with name "{filter.name}" already exists in this query!'
            )
        self._filters.append(filter)
        return self

    def get_filter(self, name: str) -> Filter | None:
        return next((f for f in self._filters if f.name == name), None)

    def remove_filter(self, name_or_filter: "str | Filter") -> "Query":
        if isinstance(name_or_filter, Filter):
            found = name_or_filter
        else:
            found = self.get_filter(name_or_filter)
        if found in self._filters:
            self._filters.remove(found)
        return self

    @property
    def filters(self) -> list[Filter]:
        return list(self._filters)

    @property
    def page_size(self) -> int:
        return self.get("page_size") or DEFAULT_PAGE_SIZE

    @page_size.setter
    def page_size(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise QueryError("A page size has to be an integer and at least 1!")
        self.set("page_size", value)

    @property
    def page(self) -> int:
        return self.get("page") or 1

    @page.setter
    def page(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise QueryError("A page has to be an integer and at least 1!")
        self.set("page", value)

    def clear(self) -> "Query":
        self._parts = {}
        self._filters = []
        return self

    def to_dict(self) -> dict[str, Any]:
        result = dict(self._parts)
        for f in self._filters:
            result.update(f.to_dict())
        return result

    @staticmethod
    def to_string(parts_or_query: "Query | Mapping[str, Any] | None" = None) -> str:
        """Url-encode a query, None values are skipped and lists comma-joined"""
        if parts_or_query is None:
            return ""
        if isinstance(parts_or_query, Query):
            parts_or_query = parts_or_query.to_dict()

        encoded = []
        for key, value in parts_or_query.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                value = ",".join(_encode(v) for v in value)
            else:
                value = _encode(value)
            encoded.append(f"{quote_plus(str(key))}={value}")
        return "&".join(encoded)

    def __str__(self) -> str:
        return self.to_string(self)


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        value = int(value)
    return quote_plus(str(value))


def with_query(path: str, query: "Query | Mapping[str, Any] | None") -> str:
    """Append the encoded query to an endpoint path"""
    query_string = Query.to_string(query)
    if not query_string:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{query_string}"
