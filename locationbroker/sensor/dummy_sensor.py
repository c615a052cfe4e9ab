"""Dummy sensor for running the broker without location hardware."""

import math
import random
import threading
import time
from typing import Any, Optional

from locationbroker.authorization import AuthorizationRequestLevel, AuthorizationStatus
from locationbroker.errors import SensorError, SensorFailure
from locationbroker.logging import LOCATIONBROKER_LOGGER
from locationbroker.position import Position
from locationbroker.sensor.abstract_sensor_port import AbstractSensorPort, SensorConfiguration

# Default start point - Pikes Peak summit
_DEFAULT_LAT = 38.8409
_DEFAULT_LON = -105.0423
_DEFAULT_ALT = 4302.0

_METERS_PER_DEG_LAT = 111_320.0


class DummySensorPort(AbstractSensorPort):
    """
    Simulated sensor emitting a slow random walk.

    Permission requests are answered immediately with ``granted_status``.
    ``simulate_permission_change`` and ``simulate_failure`` script the
    platform events a real sensor would deliver.
    """

    def __init__(
        self,
        configuration: Optional[SensorConfiguration] = None,
        granted_status: Any = AuthorizationStatus.AUTHORIZED_FULL,
        interval_seconds: float = 1.0,
        step_m: float = 15.0,
        seed: Optional[int] = None,
    ):
        super().__init__(configuration)
        self.granted_status = granted_status
        self.interval_seconds = interval_seconds
        self.step_m = step_m
        self._rng = random.Random(seed)

        self._latitude = _DEFAULT_LAT
        self._longitude = _DEFAULT_LON

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def request_permission(self, level: AuthorizationRequestLevel) -> None:
        LOCATIONBROKER_LOGGER.debug(f"Dummy sensor granting {level.value} request")
        self._emit_permission(self.granted_status)

    def start_updates(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._walk_loop, daemon=True, name="dummy-sensor")
        self._thread.start()

    def stop_updates(self) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval_seconds + 2)
        self._thread = None

    def simulate_permission_change(self, status: Any) -> None:
        self._emit_permission(status)

    def simulate_failure(self, kind: SensorFailure, message: str = "") -> None:
        self._emit_failure(SensorError(kind, message))

    def next_position(self) -> Position:
        """Advance the random walk by one step."""
        heading = self._rng.uniform(0.0, 2 * math.pi)
        self._latitude += self.step_m * math.cos(heading) / _METERS_PER_DEG_LAT
        self._longitude += (
            self.step_m * math.sin(heading) / (_METERS_PER_DEG_LAT * math.cos(math.radians(self._latitude)))
        )
        return Position(
            latitude=self._latitude,
            longitude=self._longitude,
            altitude=_DEFAULT_ALT,
            horizontal_accuracy=5.0,
            timestamp=time.time(),
        )

    def _walk_loop(self) -> None:
        while not self._stop_event.is_set():
            self._emit_position(self.next_position())
            if self._stop_event.wait(timeout=self.interval_seconds):
                break
