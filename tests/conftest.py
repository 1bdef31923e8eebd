"""
Shared pytest fixtures for Cockpit-Uplink tests
"""
import json
import os
import tempfile

import pytest

from cockpit_uplink.devices import Device, DeviceRegistry


UFC_DEVICE_ID = 17

# Keypad key -> clickable cockpit code
UFC_KEYS = {str(n): 3000 + n for n in range(10)}
UFC_KEYS.update({"RTN": 3032, "LIST": 3014, "ENTR": 3016, "SEQ": 3033})


@pytest.fixture
def temp_config_file():
    """Create a temporary config file for testing"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        f.write('{}')
        temp_path = f.name

    yield temp_path

    # Cleanup
    if os.path.exists(temp_path):
        os.remove(temp_path)


@pytest.fixture
def ufc_device():
    """Unregistered UFC keypad with digit, RTN, LIST, ENTR and SEQ keys"""
    device = Device(UFC_DEVICE_ID, "UFC")
    for name, code in UFC_KEYS.items():
        device.add_action(code, name, 40, 1)
    return device


@pytest.fixture
def registry(ufc_device):
    """F-16C registry holding the UFC and a two-position switch panel"""
    panel = Device(22, "MISC")
    panel.add_action(3001, "ALT_REL_ON", 0, 1, 0)
    panel.add_action(3002, "LASER_ARM", 0, 1.0, -1.0)
    return DeviceRegistry("F-16C", [ufc_device, panel])


@pytest.fixture
def ufc(registry):
    """Registered (sealed) UFC device"""
    return registry.get_device("UFC")


@pytest.fixture
def catalog_data():
    """Plain data device catalog"""
    return {
        "airframe": "A-10C",
        "devices": [
            {"name": "CDU", "id": 9, "actions": [
                {"name": "1", "code": 3015, "delay": 30, "dn": 1},
                {"name": "CLR", "code": 3057, "delay": 30, "dn": 1, "up": 0},
            ]},
            {"name": "HSI", "id": 45, "actions": [
                {"name": "CRS_KNOB", "code": 3001, "delay": 0, "dn": 0.1, "up": 0},
            ]},
        ],
    }


@pytest.fixture
def telemetry_packet():
    """Telemetry packet carrying a query response"""
    return json.dumps({
        "Model": "F-16C_50",
        "Marker": "<upload_prog>",
        "Latitude": "41.1017",
        "Longitude": "-115.6732",
        "Elevation": "1370.2",
        "Upload": "0",
        "Increment": "0",
        "Decrement": "0",
        "Show": "0",
        "Hide": "0",
        "Toggle": "0",
        "Response": "CNI",
    })


class RecordingSender:
    """Outbound transport double that records every payload"""

    def __init__(self, result=True):
        self.result = result
        self.payloads = []

    def __call__(self, payload):
        self.payloads.append(payload)
        return self.result


@pytest.fixture
def sender():
    """Sender that accepts everything"""
    return RecordingSender()


@pytest.fixture
def failing_sender():
    """Sender whose transport rejects every payload"""
    return RecordingSender(result=False)
