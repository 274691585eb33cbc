"""Tests for access codes, gates, devices and scan logs"""

import pytest

from nextevent.models import (
    AccessCode,
    AccessCodeState,
    Connection,
    Device,
    EntryState,
    Gate,
    GateMode,
    ScanLog,
)
from nextevent.shared.exceptions import InvalidModelDataError


@pytest.fixture
def login_data(fixture_loader):
    return fixture_loader("device_login")


@pytest.mark.unit
class TestAccessCode:
    def test_states(self):
        code = AccessCode(
            {
                "access_code_id": 1,
                "code": "AAA111",
                "category_id": 7,
                "state": "extern",
                "entry_state": "out",
                "processed": "2025-07-12T19:00:00+02:00",
            }
        )

        assert code.state is AccessCodeState.EXTERNAL
        assert code.entry_state is EntryState.OUT
        assert code.processed.hour == 19

    def test_entry_state_defaults_to_none(self):
        code = AccessCode(
            {"access_code_id": 1, "code": "A", "category_id": 7, "state": "valid"}
        )

        assert code.entry_state is EntryState.NONE
        assert code.price_id is None

    def test_unknown_state_is_invalid(self):
        with pytest.raises(InvalidModelDataError):
            AccessCode(
                {"access_code_id": 1, "code": "A", "category_id": 7, "state": "used"}
            )


@pytest.mark.unit
class TestGate:
    def test_properties(self, login_data):
        gate = Gate(login_data["gate"])

        assert gate.id == 5
        assert gate.mode is GateMode.IN
        assert gate.categories == [7, 8]
        assert not gate.is_transfer_allowed()
        assert gate.replaced_by is None

    def test_replaced_gate_fetched_lazily(
        self, fake_api, rest_client, login_data, fixture_loader
    ):
        fake_api.add("GET", "/gate/4", json=fixture_loader("gate_4"))
        gate = Gate(login_data["gate"], rest_client)

        replaced = gate.replaced_gate

        assert replaced.id == 4
        assert replaced.mode is GateMode.BOTH
        assert gate.replaced_gate is replaced
        assert len(fake_api.calls("GET", "/gate/4")) == 1

    def test_replaced_by(self, fake_api, rest_client, fixture_loader):
        fake_api.add("GET", "/gate/5", json=fixture_loader("device_login")["gate"])
        gate = Gate(
            {**fixture_loader("gate_4"), "replaced_by": {"gate_id": 5}}, rest_client
        )

        assert gate.replaced_by.id == 5

    def test_replaced_gate_without_client(self, login_data):
        assert Gate(login_data["gate"]).replaced_gate is None

    def test_requires_categories(self, login_data):
        data = login_data["gate"]
        del data["categories"]

        with pytest.raises(InvalidModelDataError):
            Gate(data)


@pytest.mark.unit
class TestDevice:
    def test_device_with_gate(self, login_data):
        gate = Gate(login_data["gate"])
        device = Device(login_data["device"], gate)

        assert device.uuid == "device-uuid-12"
        assert device.platform == "android"
        assert device.gate is gate
        assert Device(login_data["device"]).gate is None


@pytest.mark.unit
class TestScanLog:
    def test_properties(self):
        scan_log = ScanLog(
            {
                "scan_log_id": 1,
                "code": "AAA111",
                "category_id": 7,
                "entry_state": "in",
                "processed": "2025-07-12T19:00:00Z",
                "gate_id": 5,
                "device_id": 12,
                "validation": "success",
                "connection": "offline",
            }
        )

        assert scan_log.entry_state is EntryState.IN
        assert scan_log.connection is Connection.OFFLINE
        assert scan_log.validation == "success"

    def test_unknown_connection(self):
        with pytest.raises(InvalidModelDataError):
            ScanLog(
                {
                    "scan_log_id": 1,
                    "code": "A",
                    "category_id": 7,
                    "entry_state": "in",
                    "processed": "2025-07-12T19:00:00Z",
                    "gate_id": 5,
                    "device_id": 12,
                    "validation": "success",
                    "connection": "bluetooth",
                }
            )
