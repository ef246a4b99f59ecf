"""
Tests for the HomeKit accessory model and bridge host.
"""

from unittest.mock import MagicMock

import pytest
from pyhap.characteristic import (
    HAP_FORMAT_FLOAT,
    PROP_FORMAT,
    PROP_MAX_VALUE,
    PROP_MIN_STEP,
    PROP_MIN_VALUE,
    PROP_PERMISSIONS,
    PROP_UNIT,
)
from pyhap.const import (
    CATEGORY_SWITCH,
    CATEGORY_WINDOW_COVERING,
    HAP_PERMISSION_NOTIFY,
    HAP_PERMISSION_READ,
    HAP_REPR_VALUE,
)

from shellybridge.characteristics import CONSUMPTION_UUID, consumption_characteristic
from shellybridge.homekit import (
    BridgeHost,
    LocalDriver,
    PlatformAccessory,
    client_write,
    find_characteristic,
    generate_uuid,
    get_driver,
)


@pytest.fixture
def lamp(driver):
    pa = PlatformAccessory("Lamp", generate_uuid("lamp"), CATEGORY_SWITCH, driver=driver)
    pa.add_named_service("Switch", "Lamp")
    return pa


def on_char(pa):
    return find_characteristic(pa.get_service("Switch"), "On")


class TestLocalDriver:
    """Tests for the in-process driver."""

    def test_publish(self, driver, lamp):
        """Test value changes are published once per change."""
        published = []
        driver.subscribe("publish", published.append)

        on_char(lamp).set_value(True)
        on_char(lamp).set_value(True)

        assert len(published) == 1
        assert published[0][HAP_REPR_VALUE] is True

    def test_silent_update(self, driver, lamp):
        """Test seeding a value does not publish."""
        published = []
        driver.subscribe("publish", published.append)

        on_char(lamp).set_value(True, should_notify=False)

        assert published == []
        assert on_char(lamp).value is True

    def test_config_changed(self):
        """Test the configuration version counts up."""
        driver = LocalDriver()
        driver.config_changed()
        assert driver.config_version == 2

    def test_shared_driver(self):
        """Test accessories created without a driver share one."""
        assert get_driver() is get_driver()
        pa = PlatformAccessory("A", generate_uuid("a"))
        assert pa.driver is get_driver()


class TestClientWrite:
    """Tests for controller writes."""

    @pytest.mark.asyncio
    async def test_without_setter(self, lamp):
        """Test a write with no setter just stores the value."""
        await client_write(on_char(lamp), True)
        assert on_char(lamp).value is True

    @pytest.mark.asyncio
    async def test_stores_after_setter(self, lamp):
        """Test the setter runs before the value is stored."""
        char = on_char(lamp)
        seen = []

        async def setter(value):
            seen.append((value, char.value))

        char.setter_callback = setter
        await client_write(char, True)

        assert seen == [(True, False)]
        assert char.value is True

    @pytest.mark.asyncio
    async def test_plain_setter(self, lamp):
        """Test a synchronous setter is called too."""
        char = on_char(lamp)
        setter = MagicMock(return_value=None)
        char.setter_callback = setter

        await client_write(char, True)

        setter.assert_called_once_with(True)
        assert char.value is True

    @pytest.mark.asyncio
    async def test_failure(self, lamp):
        """Test a failing setter leaves the value alone."""
        char = on_char(lamp)
        error = RuntimeError("device offline")

        async def setter(value):
            raise error

        char.setter_callback = setter
        with pytest.raises(RuntimeError) as exc_info:
            await client_write(char, True)

        assert exc_info.value is error
        assert char.value is False


class TestConsumption:
    """Tests for the custom consumption characteristic."""

    def test_properties(self):
        """Test the characteristic matches what the Eve app expects."""
        consumption = consumption_characteristic()

        assert consumption.type_id == CONSUMPTION_UUID
        assert str(consumption.type_id).upper() == "E863F10D-079E-48FF-8F27-9C2605A29F52"
        assert consumption.display_name == "Consumption"
        assert consumption.properties[PROP_FORMAT] == HAP_FORMAT_FLOAT
        assert consumption.properties[PROP_UNIT] == "W"
        assert consumption.properties[PROP_MIN_VALUE] == 0
        assert consumption.properties[PROP_MAX_VALUE] == 65535
        assert consumption.properties[PROP_MIN_STEP] == 0.1
        assert consumption.properties[PROP_PERMISSIONS] == [HAP_PERMISSION_READ, HAP_PERMISSION_NOTIFY]
        assert consumption.value == 0.0

    def test_initial_value(self):
        """Test the seeded reading."""
        assert consumption_characteristic(12.5).value == 12.5

    def test_independent_properties(self):
        """Test instances do not share their property dicts."""
        a = consumption_characteristic()
        b = consumption_characteristic()
        assert a.properties is not b.properties


class TestPlatformAccessory:
    """Tests for platform accessories."""

    def test_information_service(self, driver):
        """Test every accessory carries accessory information."""
        pa = PlatformAccessory("Lamp", generate_uuid("lamp"), CATEGORY_SWITCH, driver=driver)
        pa.set_info_service(manufacturer="Allterco Robotics", model="SHSW-1", serial_number="ABC123")

        info = pa.get_service("AccessoryInformation")
        assert info.get_characteristic("Name").value == "Lamp"
        assert info.get_characteristic("Manufacturer").value == "Allterco Robotics"
        assert info.get_characteristic("SerialNumber").value == "ABC123"
        assert pa.category == CATEGORY_SWITCH
        assert pa.category_name == "SWITCH"
        assert pa.context == {}

    def test_add_named_service(self, driver):
        """Test loader services get a Name and any extra characteristics."""
        pa = PlatformAccessory("Blinds", generate_uuid("blinds"), CATEGORY_WINDOW_COVERING, driver=driver)
        covering = pa.add_named_service("WindowCovering", "Blinds", consumption_characteristic())

        assert pa.get_service("WindowCovering") is covering
        assert find_characteristic(covering, "Name").value == "Blinds"
        assert find_characteristic(covering, "PositionState") is not None
        assert find_characteristic(covering, "Consumption") is not None
        assert pa.get_service("Switch") is None

    def test_add_characteristic(self, lamp):
        """Test characteristics added later publish through the accessory."""
        consumption = lamp.add_characteristic(lamp.get_service("Switch"), consumption_characteristic())

        assert consumption.broker is lamp
        assert lamp.iid_manager.get_iid(consumption) is not None
        assert find_characteristic(lamp.get_service("Switch"), "Consumption") is consumption

    def test_find_characteristic_missing(self, lamp):
        """Test a missing characteristic is None rather than an error."""
        assert find_characteristic(lamp.get_service("Switch"), "Consumption") is None

    def test_generate_uuid(self):
        """Test UUIDs are stable per seed."""
        assert generate_uuid("SHSW-1:ABC123:0") == generate_uuid("SHSW-1:ABC123:0")
        assert generate_uuid("SHSW-1:ABC123:0") != generate_uuid("SHSW-1:ABC123:1")


class TestBridgeHost:
    """Tests for the bridge host."""

    def test_register_unregister(self, bridge, driver):
        """Test registering and unregistering accessories."""
        a = PlatformAccessory("A", generate_uuid("a"), driver=driver)
        b = PlatformAccessory("B", generate_uuid("b"), driver=driver)

        bridge.register_platform_accessories("shellybridge", "Shelly", [a, b])
        assert bridge.accessories == [a, b]
        assert set(bridge.bridge.accessories.values()) == {a, b}

        bridge.unregister_platform_accessories("shellybridge", "Shelly", [a])
        assert bridge.accessories == [b]
        assert list(bridge.bridge.accessories.values()) == [b]

    def test_register_bumps_config(self, bridge, driver):
        """Test every registration change bumps the configuration version."""
        version = driver.config_version

        bridge.register_platform_accessories("shellybridge", "Shelly", [
            PlatformAccessory("A", generate_uuid("a"), driver=driver),
        ])

        assert driver.config_version == version + 1

    def test_register_replaces_same_uuid(self, bridge, driver):
        """Test a second accessory with the same UUID replaces the first."""
        old = PlatformAccessory("A", generate_uuid("a"), driver=driver)
        new = PlatformAccessory("A", generate_uuid("a"), driver=driver)

        bridge.register_platform_accessories("shellybridge", "Shelly", [old])
        bridge.register_platform_accessories("shellybridge", "Shelly", [new])

        assert bridge.accessories == [new]
        assert list(bridge.bridge.accessories.values()) == [new]

    def test_reregister_after_unregister(self, bridge, driver):
        """Test an accessory can come back after its aid was reused."""
        a = PlatformAccessory("A", generate_uuid("a"), driver=driver)
        b = PlatformAccessory("B", generate_uuid("b"), driver=driver)

        bridge.register_platform_accessories("shellybridge", "Shelly", [a])
        bridge.unregister_platform_accessories("shellybridge", "Shelly", [a])
        bridge.register_platform_accessories("shellybridge", "Shelly", [b])
        bridge.register_platform_accessories("shellybridge", "Shelly", [a])

        assert bridge.accessories == [b, a]
        assert a.aid != b.aid

    def test_unregister_other_object(self, bridge, driver):
        """Test unregistering a stale object leaves the live one alone."""
        live = PlatformAccessory("A", generate_uuid("a"), driver=driver)
        stale = PlatformAccessory("A", generate_uuid("a"), driver=driver)
        bridge.register_platform_accessories("shellybridge", "Shelly", [live])

        bridge.unregister_platform_accessories("shellybridge", "Shelly", [stale])

        assert bridge.accessories == [live]

    def test_configure_platform_once(self, driver):
        """Test cached accessories are handed over once."""
        cached = PlatformAccessory("A", generate_uuid("a"), driver=driver)
        bridge = BridgeHost(cached_accessories=[cached], driver=driver)
        platform = MagicMock()

        bridge.configure_platform(platform)
        bridge.configure_platform(platform)

        platform.configure_accessory.assert_called_once_with(cached)
        assert bridge.accessories == [cached]

    def test_finish_launching_once(self, bridge):
        """Test did_finish_launching fires a single time."""
        handler = MagicMock()
        bridge.subscribe("did_finish_launching", handler)

        bridge.finish_launching()
        bridge.finish_launching()

        handler.assert_called_once_with()
        assert bridge.launched
