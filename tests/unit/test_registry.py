"""
Unit tests for DeviceRegistry
"""
import pytest

from cockpit_uplink.devices import Device, DeviceRegistry
from cockpit_uplink.errors import DeviceSealedError, DuplicateDeviceError, UnknownDeviceError


class TestDeviceRegistry:
    """Tests for DeviceRegistry class"""

    def test_lookup_by_name(self, registry):
        """Test devices are found by name"""
        assert registry.airframe == "F-16C"
        assert registry.get_device("UFC").device_id == 17
        assert "MISC" in registry
        assert registry.device_names == ["UFC", "MISC"]
        assert len(registry) == 2

    def test_unknown_device(self, registry):
        """Test an unknown device raises a KeyError subclass"""
        with pytest.raises(UnknownDeviceError):
            registry.get_device("HUD")
        with pytest.raises(KeyError):
            registry.get_device("HUD")

    def test_duplicate_device(self, registry):
        """Test a device name can only be registered once"""
        with pytest.raises(DuplicateDeviceError):
            registry.add_device(Device(99, "UFC"))

    def test_registration_seals_device(self, registry):
        """Test registered devices become read-only"""
        ufc = registry.get_device("UFC")
        assert ufc.sealed
        with pytest.raises(DeviceSealedError):
            ufc.add_action(4000, "NEW", 0, 1)

    def test_iteration(self, registry):
        """Test iterating yields the devices"""
        assert [device.name for device in registry] == ["UFC", "MISC"]

    def test_from_dict(self, catalog_data):
        """Test building a registry from plain data"""
        registry = DeviceRegistry.from_dict(catalog_data)
        assert registry.airframe == "A-10C"
        assert registry.device_names == ["CDU", "HSI"]

        cdu = registry.get_device("CDU")
        assert cdu.device_id == 9
        assert cdu.get_action("CLR").code == 3057
        assert cdu.get_action("1").delay == 30

        knob = registry.get_device("HSI").get_action("CRS_KNOB")
        assert knob.value_dn == 0.1
        assert knob.value_up == 0
        assert knob.delay == 0

    def test_from_dict_strict(self, catalog_data):
        """Test strict catalogs create strict devices"""
        registry = DeviceRegistry.from_dict(catalog_data, strict=True)
        assert registry.get_device("CDU").strict

    def test_from_dict_duplicate_action(self):
        """Test duplicate actions in a catalog are rejected"""
        data = {"airframe": "X", "devices": [{"name": "D", "id": 1, "actions": [
            {"name": "A", "code": 1},
            {"name": "A", "code": 2},
        ]}]}
        with pytest.raises(ValueError):
            DeviceRegistry.from_dict(data)
