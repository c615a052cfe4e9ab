from locationbroker.errors import SensorError, SensorFailure
from locationbroker.position import Position
from locationbroker.sensor.abstract_sensor_port import AbstractSensorPort


class FakeSensorPort(AbstractSensorPort):
    """Sensor that records calls and lets tests deliver callbacks by hand."""

    def __init__(self, configuration=None):
        super().__init__(configuration)
        self.permission_requests = []
        self.start_calls = 0
        self.stop_calls = 0

    def request_permission(self, level):
        self.permission_requests.append(level)

    def start_updates(self):
        self.start_calls += 1

    def stop_updates(self):
        self.stop_calls += 1

    def report_permission(self, status):
        self._emit_permission(status)

    def report_position(self, position):
        self._emit_position(position)

    def report_failure(self, kind: SensorFailure):
        self._emit_failure(SensorError(kind))


def make_position(latitude=40.0, longitude=-74.0, timestamp=1_700_000_000.0, **kwargs):
    return Position(latitude=latitude, longitude=longitude, timestamp=timestamp, **kwargs)
