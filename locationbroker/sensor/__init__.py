"""Location sensors the broker can drive."""

from locationbroker.sensor.abstract_sensor_port import AbstractSensorPort, SensorConfiguration
from locationbroker.sensor.dummy_sensor import DummySensorPort
from locationbroker.sensor.gpsd_sensor import GpsdSensorPort

__all__ = ["AbstractSensorPort", "DummySensorPort", "GpsdSensorPort", "SensorConfiguration"]
