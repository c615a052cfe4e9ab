"""Permission-gated location broker.

Wraps a sensor, gates ``start()`` on the authorization state and republishes
accepted positions on two channels:

* ``location_will_change`` (event channel) receives each incoming position
  *before* it is committed, so a subscriber reading ``broker.location`` from
  its callback still sees the previous fix.
* ``location_channel`` (latest-value channel) receives the committed position
  and replays it to late subscribers.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Optional

from locationbroker.authorization import AuthorizationRequestLevel, AuthorizationState, AuthorizationStatus
from locationbroker.channels import EventChannel, LatestValueChannel, Subscription
from locationbroker.denial import DeniedAuthorizationHandler, invoke_denied_handler
from locationbroker.errors import NotAuthorizedError, SensorFailure, classify_failure
from locationbroker.logging import LOCATIONBROKER_LOGGER
from locationbroker.platform_profiles import PlatformProfile
from locationbroker.position import Position
from locationbroker.sensor.abstract_sensor_port import AbstractSensorPort


class LocationBroker:
    """
    Orchestrates a sensor, the authorization state and the position channels.

    The sensor is held by reference; its lifetime belongs to the caller.
    ``start()``, ``stop()`` and ``request_authorization()`` may be called from
    any thread and never wait on the sensor. Sensor callbacks are expected
    from one serialized context.
    """

    def __init__(
        self,
        sensor: AbstractSensorPort,
        denied_handler: DeniedAuthorizationHandler,
        profile: PlatformProfile,
    ):
        """
        Initialize the broker and register for sensor callbacks.

        Args:
            sensor: Sensor delivering permission, position and failure callbacks
            denied_handler: Called with no arguments whenever access is denied
            profile: Default request level and statuses sufficient to operate
        """
        self.sensor = sensor
        self.denied_handler = denied_handler
        self.default_level = profile.default_level
        self.authorization = AuthorizationState(profile.allowed_statuses)

        self.location_channel: LatestValueChannel[Position] = LatestValueChannel("location")
        self.location_will_change: EventChannel[Position] = EventChannel("location-will-change")

        # _lock guards the active flag only and is never held across callbacks.
        # _lifecycle_lock makes the flag change and the sensor call one step.
        self._lock = threading.Lock()
        self._lifecycle_lock = threading.RLock()
        self._active = False

        self.sensor.set_callbacks(
            on_permission_changed=self.on_permission_changed,
            on_position_received=self.on_position_received,
            on_failure=self.on_sensor_failure,
        )

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    @property
    def location(self) -> Optional[Position]:
        """Latest committed position, or None before the first fix."""
        return self.location_channel.value

    @property
    def authorization_status(self) -> Optional[AuthorizationStatus]:
        """Latest reported status, or None until the sensor has reported one."""
        if not self.authorization.is_known:
            return None
        return self.authorization.status

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def subscribe_location(
        self, callback: Callable[[Optional[Position]], None], *, threaded: bool = False
    ) -> Subscription:
        """Receive the current position immediately, then every committed change.

        Inline callbacks run on the sensor thread and delay ingestion while they
        run; slow callbacks should pass ``threaded=True``.
        """
        return self.location_channel.subscribe(callback, threaded=threaded)

    def subscribe_location_will_change(
        self, callback: Callable[[Position], None], *, threaded: bool = False
    ) -> Subscription:
        """Receive each new position just before it becomes ``location``.

        Only inline callbacks are guaranteed to observe the previous ``location``;
        ``threaded=True`` callbacks never block ingestion but run after the commit.
        """
        return self.location_will_change.subscribe(callback, threaded=threaded)

    def subscribe_authorization_status(
        self, callback: Callable[[Optional[AuthorizationStatus]], None], *, threaded: bool = False
    ) -> Subscription:
        return self.authorization.subscribe(callback, threaded=threaded)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def request_authorization(self, level: Any = None) -> None:
        """
        Request location access from the user.

        If access has already been denied the platform will not prompt again,
        so the denied handler runs instead of asking the sensor.

        Args:
            level: ``AuthorizationRequestLevel`` to request; defaults to the
                platform profile's level
        """
        if level is None:
            level = self.default_level

        if self.authorization.is_denied():
            invoke_denied_handler(self.denied_handler)
            return

        if not isinstance(level, AuthorizationRequestLevel):
            LOCATIONBROKER_LOGGER.warning(
                f"Only 'when in use' and 'always' authorization can be requested, got {level!r}"
            )
            return

        self.sensor.request_permission(level)

    def start(self) -> None:
        """
        Start location updates.

        Raises:
            NotAuthorizedError: if the sensor has reported a status that is
                not sufficient to operate
        """
        self.request_authorization()

        with self._lifecycle_lock:
            if self.authorization.is_known:
                if not self.authorization.is_sufficient():
                    raise NotAuthorizedError(self.authorization.status)
            else:
                # The first permission callback usually lands shortly after
                # construction; arm anyway and let the sensor refuse if needed.
                LOCATIONBROKER_LOGGER.warning(
                    "No location authorization status reported yet, starting updates anyway"
                )

            with self._lock:
                if self._active:
                    LOCATIONBROKER_LOGGER.debug("Location updates already running")
                    return
                self._active = True

            self.sensor.start_updates()
            LOCATIONBROKER_LOGGER.info("Location updates started")

    def stop(self) -> None:
        """Stop location updates."""
        with self._lifecycle_lock:
            with self._lock:
                if not self._active:
                    return
                self._active = False

            self.sensor.stop_updates()
            LOCATIONBROKER_LOGGER.info("Location updates stopped")

    # ------------------------------------------------------------------
    # Sensor callbacks
    # ------------------------------------------------------------------

    def on_permission_changed(self, raw_status: Any) -> None:
        status = AuthorizationStatus.from_platform(raw_status)
        self.authorization.update(status)

        if status is AuthorizationStatus.DENIED:
            LOCATIONBROKER_LOGGER.warning("Location access denied, halting updates")
            self._halt_and_notify()

    def on_position_received(self, position: Position) -> None:
        if not self.is_active:
            LOCATIONBROKER_LOGGER.debug("Ignoring position received while updates are stopped")
            return

        # Sensor callbacks are serialized, so publishing outside the lock keeps
        # per-position ordering without blocking readers of broker state.
        self.location_will_change.publish(position)
        self.location_channel.set(position)

    def on_sensor_failure(self, error: BaseException) -> None:
        kind = classify_failure(error)
        if kind is SensorFailure.PERMISSION_REVOKED:
            LOCATIONBROKER_LOGGER.warning("Location access revoked by the user while running")
            self._halt_and_notify()
        elif kind is SensorFailure.POSITION_UNAVAILABLE:
            LOCATIONBROKER_LOGGER.warning(f"Location sensor is unable to retrieve a location: {error}")
        else:
            LOCATIONBROKER_LOGGER.error(f"Location sensor failed with unknown error: {error}")

    def _halt_and_notify(self) -> None:
        self.stop()
        invoke_denied_handler(self.denied_handler)
