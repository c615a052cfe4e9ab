"""Location sensor backed by gpsd.

Polls the GPS receiver via gpspipe on a background thread and reports
positions to the broker, applying the configured distance filter.
"""

import json
import subprocess
import threading
import time
from typing import Optional

from locationbroker.authorization import AuthorizationRequestLevel, AuthorizationStatus
from locationbroker.errors import SensorError, SensorFailure
from locationbroker.logging import LOCATIONBROKER_LOGGER
from locationbroker.position import Position
from locationbroker.sensor.abstract_sensor_port import AbstractSensorPort, SensorConfiguration


class GpsdSensorPort(AbstractSensorPort):
    """
    Sensor that queries gpsd with ``gpspipe``.

    gpsd has no permission model: access counts as fully authorized when the
    ``gpspipe`` command is available and as restricted otherwise. The answer
    is delivered through the permission callback like any other platform.
    """

    def __init__(
        self,
        configuration: Optional[SensorConfiguration] = None,
        check_interval_seconds: float = 5.0,
    ):
        """
        Initialize gpsd sensor.

        Args:
            configuration: Sensor configuration; only the distance filter applies to gpsd
            check_interval_seconds: Seconds between gpsd queries
        """
        super().__init__(configuration)
        self.check_interval_seconds = check_interval_seconds

        # Thread control
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self._last_reported: Optional[Position] = None

    def is_available(self) -> bool:
        """
        Check if gpsd is reachable (gpspipe command exists).

        Returns:
            True if gpspipe command is available, False otherwise.
        """
        try:
            result = subprocess.run(
                ["which", "gpspipe"],
                capture_output=True,
                timeout=2,
            )
            return result.returncode == 0
        except Exception:
            return False

    def request_permission(self, level: AuthorizationRequestLevel) -> None:
        if self.is_available():
            self._emit_permission(AuthorizationStatus.AUTHORIZED_FULL)
        else:
            LOCATIONBROKER_LOGGER.warning("gpspipe not found - gpsd location access unavailable")
            self._emit_permission(AuthorizationStatus.RESTRICTED)

    def start_updates(self) -> None:
        """Start the gpsd polling thread."""
        if self._thread is not None and self._thread.is_alive():
            LOCATIONBROKER_LOGGER.warning("gpsd sensor already running")
            return

        self._stop_event.clear()
        self._last_reported = None
        self._thread = threading.Thread(target=self._poll_loop, daemon=True, name="gpsd-sensor")
        self._thread.start()
        LOCATIONBROKER_LOGGER.info(f"gpsd sensor started (check interval: {self.check_interval_seconds}s)")

    def stop_updates(self) -> None:
        """Stop the gpsd polling thread."""
        if self._thread is None:
            return

        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
        self._thread = None
        LOCATIONBROKER_LOGGER.info("gpsd sensor stopped")

    def _poll_loop(self) -> None:
        """Main polling loop (runs in background thread)."""
        self._check_gps()

        while not self._stop_event.is_set():
            if self._stop_event.wait(timeout=self.check_interval_seconds):
                break
            self._check_gps()

    def _check_gps(self) -> None:
        """Perform a single gpsd query and report the outcome."""
        try:
            position = self._query_gpsd()
        except Exception as e:
            self._emit_failure(SensorError(SensorFailure.UNKNOWN, f"gpsd query failed: {e}"))
            return

        if position is None:
            self._emit_failure(SensorError(SensorFailure.POSITION_UNAVAILABLE, "gpsd returned no position"))
            return

        if not self._passes_distance_filter(position):
            return

        self._last_reported = position
        self._emit_position(position)

    def _passes_distance_filter(self, position: Position) -> bool:
        if self._last_reported is None:
            return True
        return position.distance_to(self._last_reported) >= self.configuration.distance_filter_m

    def _query_gpsd(self) -> Optional[Position]:
        """
        Query gpsd for a position using gpspipe.

        Returns:
            Position with coordinates and accuracy, or None if no fix is available.
        """
        try:
            result = subprocess.run(
                ["gpspipe", "-w", "-n", "10"],
                capture_output=True,
                timeout=5,
                text=True,
            )
        except (FileNotFoundError, OSError, subprocess.TimeoutExpired) as e:
            LOCATIONBROKER_LOGGER.debug(f"Could not query gpsd: {e}")
            return None

        if result.returncode != 0:
            return None

        latitude = longitude = altitude = accuracy = None
        for line in result.stdout.strip().split("\n"):
            if not line:
                continue

            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                continue

            # Position comes from TPV reports with at least a 2D fix
            if data.get("class") != "TPV" or data.get("mode", 0) < 2:
                continue
            latitude = data.get("lat", latitude)
            longitude = data.get("lon", longitude)
            altitude = data.get("alt", altitude)
            # eph: estimated horizontal position error in meters
            accuracy = data.get("eph", accuracy)

        if latitude is None or longitude is None:
            return None

        return Position(
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            horizontal_accuracy=accuracy,
            timestamp=time.time(),
        )
