"""Entrance check models: access codes, gates, devices and scan logs"""

from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from .base import Model, MutableModel

if TYPE_CHECKING:
    from nextevent.rest import RestClient


class AccessCodeState(IntEnum):
    VALID = 1
    CANCELLED = 2
    EXTERNAL = 3


class EntryState(IntEnum):
    IN = 1
    OUT = 2
    NONE = 3


class GateMode(IntEnum):
    IN = 1
    OUT = 2
    BOTH = 3


class Connection(IntEnum):
    ONLINE = 1
    OFFLINE = 2


_ACCESS_CODE_STATES = {
    "valid": AccessCodeState.VALID,
    "cancelled": AccessCodeState.CANCELLED,
    "extern": AccessCodeState.EXTERNAL,
}
_ENTRY_STATES = {"in": EntryState.IN, "out": EntryState.OUT}
_GATE_MODES = {"in": GateMode.IN, "out": GateMode.OUT, "both": GateMode.BOTH}
_CONNECTIONS = {"online": Connection.ONLINE, "offline": Connection.OFFLINE}


class AccessCode(MutableModel):
    """Barcode or QR code granting entrance"""

    def is_valid(self) -> bool:
        return (
            self._has("access_code_id", "code", "category_id", "state")
            and self._source["state"] in _ACCESS_CODE_STATES
        )

    @property
    def id(self) -> int:
        return self._source["access_code_id"]

    @property
    def code(self) -> str:
        return self._source["code"]

    @property
    def category_id(self) -> int:
        return self._source["category_id"]

    @property
    def price_id(self) -> int | None:
        return self._source.get("price_id")

    @property
    def state(self) -> AccessCodeState:
        return _ACCESS_CODE_STATES[self._source["state"]]

    @property
    def entry_state(self) -> EntryState:
        return _ENTRY_STATES.get(self._source.get("entry_state"), EntryState.NONE)

    @property
    def processed(self) -> datetime | None:
        return self._date("processed")

    @property
    def gate_id(self) -> int | None:
        return self._source.get("gate_id")

    @property
    def device_id(self) -> int | None:
        return self._source.get("device_id")

    @property
    def access_from(self) -> datetime | None:
        return self._date("access_from")

    @property
    def access_to(self) -> datetime | None:
        return self._date("access_to")

    @property
    def entries(self) -> int | None:
        return self._source.get("entries")

    @property
    def last_state_change(self) -> datetime | None:
        return self._date("last_state_change")

    @property
    def last_gate(self) -> Any:
        return self._source.get("last_gate_change")


class Gate(Model):
    """Entrance or exit checkpoint

    Replaced gates are loaded through the rest client on first access.
    """

    def __init__(
        self,
        source: dict[str, Any],
        rest_client: "RestClient | None" = None,
    ) -> None:
        super().__init__(source)
        self.rest_client = rest_client
        self._replaced_gate: Gate | None = None
        self._replaced_by: Gate | None = None

    def is_valid(self) -> bool:
        return self._has("gate_id", "hash", "mode", "name", "categories")

    @property
    def id(self) -> int:
        return self._source["gate_id"]

    @property
    def created_date(self) -> datetime | None:
        return self._date("created")

    @property
    def changed_date(self) -> datetime | None:
        return self._date("changed")

    @property
    def hash(self) -> str:
        return self._source["hash"]

    @property
    def categories(self) -> list[int]:
        return self._source["categories"]

    @property
    def mode(self) -> GateMode | None:
        return _GATE_MODES.get(self._source["mode"])

    @property
    def access_from(self) -> datetime | None:
        return self._date("access_from")

    @property
    def access_to(self) -> datetime | None:
        return self._date("access_to")

    @property
    def name(self) -> str:
        return self._source["name"]

    @property
    def deactivated(self) -> datetime | None:
        return self._date("deactivated")

    def is_transfer_allowed(self) -> bool:
        return bool(self._source.get("allow_transfer"))

    def _fetch_gate(self, gate_id: Any) -> dict[str, Any] | None:
        if self.rest_client is None:
            return None
        return self.rest_client.get(f"/gate/{int(gate_id)}").embedded

    @property
    def replaced_gate(self) -> "Gate | None":
        """Gate this gate replaces"""
        if self._source.get("replaced_gate_id") is None:
            return None
        if self._source.get("replaced_gate") is None:
            self._source["replaced_gate"] = self._fetch_gate(
                self._source["replaced_gate_id"]
            )
        if self._source.get("replaced_gate") is None:
            return None
        if self._replaced_gate is None:
            self._replaced_gate = Gate(
                self._source["replaced_gate"], self.rest_client
            )
        return self._replaced_gate

    @property
    def replaced_by(self) -> "Gate | None":
        """Gate replacing this gate"""
        replaced_by = self._source.get("replaced_by")
        if not replaced_by:
            return None
        if self._source.get("replaced_by_gate") is None:
            self._source["replaced_by_gate"] = self._fetch_gate(
                replaced_by["gate_id"]
            )
        if self._source.get("replaced_by_gate") is None:
            return None
        if self._replaced_by is None:
            self._replaced_by = Gate(
                self._source["replaced_by_gate"], self.rest_client
            )
        return self._replaced_by


class Device(Model):
    """Scanning device, logged in at a gate"""

    def __init__(self, source: dict[str, Any], gate: Gate | None = None) -> None:
        super().__init__(source)
        self.gate = gate

    def is_valid(self) -> bool:
        return self._has("device_id", "uuid")

    @property
    def id(self) -> int:
        return self._source["device_id"]

    @property
    def uuid(self) -> str:
        return self._source["uuid"]

    @property
    def platform(self) -> str | None:
        return self._source.get("platform")

    @property
    def version(self) -> str | None:
        return self._source.get("version")

    @property
    def gate_id(self) -> int | None:
        return self._source.get("gate_id")

    @property
    def last_login(self) -> datetime | None:
        return self._date("last_login")

    @property
    def name(self) -> str | None:
        return self._source.get("name")


class ScanLog(Model):
    def is_valid(self) -> bool:
        return (
            self._has(
                "scan_log_id",
                "code",
                "category_id",
                "entry_state",
                "processed",
                "gate_id",
                "device_id",
                "validation",
                "connection",
            )
            and self._source["entry_state"] in _ENTRY_STATES
            and self._source["connection"] in _CONNECTIONS
        )

    @property
    def id(self) -> int:
        return self._source["scan_log_id"]

    @property
    def code(self) -> str:
        return self._source["code"]

    @property
    def category_id(self) -> int:
        return self._source["category_id"]

    @property
    def price_id(self) -> int | None:
        return self._source.get("price_id")

    @property
    def entry_state(self) -> EntryState:
        return _ENTRY_STATES[self._source["entry_state"]]

    @property
    def processed(self) -> datetime | None:
        return self._date("processed")

    @property
    def gate_id(self) -> int:
        return self._source["gate_id"]

    @property
    def device_id(self) -> int:
        return self._source["device_id"]

    @property
    def validation(self) -> Any:
        return self._source["validation"]

    @property
    def connection(self) -> Connection:
        return _CONNECTIONS[self._source["connection"]]
