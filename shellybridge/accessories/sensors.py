"""Humidity and temperature accessory for the Shelly H&T."""

from pyhap.characteristic import PROP_MIN_VALUE
from pyhap.const import CATEGORY_SENSOR

from ..homekit import PlatformAccessory
from .base import ShellyAccessory

# Lower end of the H&T measuring range, in degrees Celsius
MIN_TEMPERATURE = -40


class ShellyHTAccessory(ShellyAccessory):
    category = CATEGORY_SENSOR

    def add_services(self, pa: PlatformAccessory) -> None:
        humidity = pa.add_named_service("HumiditySensor", self.name)
        humidity.get_characteristic("CurrentRelativeHumidity").set_value(
            self.device.humidity, should_notify=False
        )

        temperature = pa.add_named_service("TemperatureSensor", self.name)
        current = temperature.get_characteristic("CurrentTemperature")
        current.override_properties(properties={PROP_MIN_VALUE: MIN_TEMPERATURE})
        current.set_value(self.device.temperature, should_notify=False)

    def setup_event_handlers(self) -> None:
        self.listen("humidity", self.humidity_changed)
        self.listen("temperature", self.temperature_changed)

    def humidity_changed(self, value: float, old: float) -> None:
        self.characteristic("HumiditySensor", "CurrentRelativeHumidity").set_value(value)

    def temperature_changed(self, value: float, old: float) -> None:
        self.characteristic("TemperatureSensor", "CurrentTemperature").set_value(value)
