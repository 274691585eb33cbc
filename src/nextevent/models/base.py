"""Base classes for models wrapping NextEvent API data

Data retrieved from the API is kept as the raw dict and exposed through
properties. Required fields are checked on construction.
"""

import json
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from nextevent.shared.exceptions import InvalidModelDataError


def parse_datetime(value: Any) -> datetime | None:
    """Parse an API date or datetime string, None if it can't be parsed"""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


class Model:
    """Base class for models"""

    def __init__(self, source: dict[str, Any]) -> None:
        self._source = source
        if not isinstance(source, dict) or not self.is_valid():
            raise InvalidModelDataError(
                f"Given source for {type(self).__name__} creation is invalid"
            )

    def is_valid(self) -> bool:
        raise NotImplementedError

    def get(self, key: str, default: Any = None) -> Any:
        return self._source.get(key, default)

    def _date(self, key: str) -> datetime | None:
        return parse_datetime(self._source.get(key))

    def _has(self, *keys: str) -> bool:
        """Check that all keys are present and not None"""
        return all(self._source.get(key) is not None for key in keys)

    def to_dict(self) -> dict[str, Any]:
        return self._source

    def to_log_context(self) -> dict[str, Any]:
        return self.to_dict()

    def to_string(self) -> str:
        return json.dumps(self._source, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._source!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._source == other._source  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]


class MutableModel(Model):
    """Model whose source attributes can be changed"""

    def set(self, key: str, value: Any) -> "MutableModel":
        self._source[key] = value
        return self

    def set_source(self, source: dict[str, Any]) -> "MutableModel":
        """Replace the whole source, e.g. with the server's answer"""
        self._source = source
        return self


@runtime_checkable
class Spawnable(Protocol):
    """Models that can be created locally before they exist on the server"""

    def is_new(self) -> bool: ...
