"""
Tests for the roller shutter and sensor accessories.
"""

from unittest.mock import AsyncMock, patch

import pytest
from pyhap.const import CATEGORY_SENSOR, CATEGORY_WINDOW_COVERING

from shellybridge.accessories import Shelly2RollerShutterAccessory, ShellyHTAccessory
from shellybridge.accessories.rollers import DECREASING, INCREASING, STOPPED
from shellybridge.homekit import client_write, find_characteristic
from shellybridge.shellies import Shelly2, ShellyHT


@pytest.fixture
def roller_device():
    device = Shelly2("ROLL01", "192.168.1.30")
    device.mode = "roller"
    device.roller_position = 60
    return device


@pytest.fixture
def roller(roller_device):
    return Shelly2RollerShutterAccessory(roller_device)


def covering_of(accessory):
    return accessory.platform_accessory.get_service("WindowCovering")


class TestShelly2RollerShutterAccessory:
    """Tests for the roller shutter adapter."""

    def test_representation(self, roller):
        """Test the window covering is seeded from the device."""
        pa = roller.platform_accessory
        covering = covering_of(roller)

        assert pa.category == CATEGORY_WINDOW_COVERING
        assert pa.context["mode"] == "roller"
        assert roller.name == "Shelly 2 ROLL01"
        assert find_characteristic(covering, "CurrentPosition").value == 60
        assert find_characteristic(covering, "TargetPosition").value == 60
        assert find_characteristic(covering, "PositionState").value == STOPPED
        assert find_characteristic(covering, "Consumption") is not None

    @pytest.mark.asyncio
    async def test_set_target_position(self, roller_device, roller):
        """Test a target write moves the roller."""
        target = find_characteristic(covering_of(roller), "TargetPosition")
        with patch.object(roller_device, "set_roller_position", new_callable=AsyncMock) as move:
            await client_write(target, 25)

        move.assert_awaited_once_with(25)
        assert target.value == 25

    @pytest.mark.asyncio
    async def test_set_target_failure(self, roller_device, roller):
        """Test a failed move keeps the old target."""
        target = find_characteristic(covering_of(roller), "TargetPosition")
        with patch.object(roller_device, "set_roller_position", new_callable=AsyncMock,
                          side_effect=RuntimeError("stuck")):
            with pytest.raises(RuntimeError):
                await client_write(target, 25)

        assert target.value == 60

    def test_state_changes(self, roller_device, roller):
        """Test roller states map onto position states."""
        state = find_characteristic(covering_of(roller), "PositionState")

        roller_device.roller_state = "open"
        assert state.value == INCREASING

        roller_device.roller_state = "close"
        assert state.value == DECREASING

        roller_device.roller_state = "stop"
        assert state.value == STOPPED

    def test_position_while_moving(self, roller_device, roller):
        """Test the target is left alone while the roller moves."""
        covering = covering_of(roller)
        roller_device.roller_state = "close"
        roller_device.roller_position = 30

        assert find_characteristic(covering, "CurrentPosition").value == 30
        assert find_characteristic(covering, "TargetPosition").value == 60

        roller_device.roller_state = "stop"
        assert find_characteristic(covering, "TargetPosition").value == 30

    def test_position_while_stopped(self, roller_device, roller):
        """Test a position change while stopped moves the target too."""
        roller_device.roller_position = 10
        assert find_characteristic(covering_of(roller), "TargetPosition").value == 10

    def test_power_meter(self, roller_device, roller):
        """Test roller consumption follows the power meter."""
        roller_device.power_meter0 = 41.0
        consumption = find_characteristic(covering_of(roller), "Consumption")
        assert consumption.value == 41.0

    def test_detach(self, roller_device, roller):
        """Test detaching removes every device listener."""
        roller.detach()
        assert roller_device.listener_count() == 0

    def test_device_name(self, roller_device):
        """Test the configured device name is used without a channel suffix."""
        roller_device.name = "Living room blinds"
        assert Shelly2RollerShutterAccessory(roller_device).name == "Living room blinds"


class TestShellyHTAccessory:
    """Tests for the humidity and temperature adapter."""

    def test_representation(self):
        """Test both sensor services are seeded from the device."""
        device = ShellyHT("HT0001", "192.168.1.40")
        device.humidity = 48.0
        device.temperature = 21.5
        accessory = ShellyHTAccessory(device)
        pa = accessory.platform_accessory

        assert pa.category == CATEGORY_SENSOR
        assert accessory.name == "Shelly H&T HT0001"
        assert pa.get_service("HumiditySensor").get_characteristic("CurrentRelativeHumidity").value == 48.0
        assert pa.get_service("TemperatureSensor").get_characteristic("CurrentTemperature").value == 21.5

    def test_updates(self):
        """Test readings are pushed to the sensors."""
        device = ShellyHT("HT0001", "192.168.1.40")
        accessory = ShellyHTAccessory(device)
        pa = accessory.platform_accessory

        device.humidity = 55.0
        device.temperature = -3.5

        assert pa.get_service("HumiditySensor").get_characteristic("CurrentRelativeHumidity").value == 55.0
        assert pa.get_service("TemperatureSensor").get_characteristic("CurrentTemperature").value == -3.5

        accessory.detach()
        assert device.listener_count() == 0

    def test_device_name(self):
        """Test the configured device name is used without a channel suffix."""
        device = ShellyHT("HT0001", "192.168.1.40")
        device.name = "Bathroom"

        accessory = ShellyHTAccessory(device)

        assert accessory.name == "Bathroom"
        humidity = accessory.platform_accessory.get_service("HumiditySensor")
        assert humidity.get_characteristic("Name").value == "Bathroom"
