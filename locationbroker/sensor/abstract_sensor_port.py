"""Abstract interface to a platform location sensor."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from locationbroker.authorization import AuthorizationRequestLevel
from locationbroker.errors import SensorError
from locationbroker.position import Position

PermissionCallback = Callable[[Any], None]
PositionCallback = Callable[[Position], None]
FailureCallback = Callable[[BaseException], None]


@dataclass(frozen=True)
class SensorConfiguration:
    """Settings handed to a sensor at construction and consumed as-is."""

    desired_accuracy: str = "best"
    activity_type: str = "fitness"
    distance_filter_m: float = 10.0  # minimum movement between reported positions
    allows_background_updates: bool = True
    pauses_updates_automatically: bool = False
    shows_background_indicator: bool = True


class AbstractSensorPort(ABC):
    """
    Base class for location sensors driven by the broker.

    The broker registers three callbacks and never polls. Implementations
    deliver callbacks from a single serialized context, one at a time.
    Permission callbacks may carry raw platform values; the broker maps them
    onto ``AuthorizationStatus``.
    """

    def __init__(self, configuration: Optional[SensorConfiguration] = None):
        self.configuration = configuration or SensorConfiguration()
        self._on_permission_changed: Optional[PermissionCallback] = None
        self._on_position_received: Optional[PositionCallback] = None
        self._on_failure: Optional[FailureCallback] = None

    def set_callbacks(
        self,
        on_permission_changed: PermissionCallback,
        on_position_received: PositionCallback,
        on_failure: FailureCallback,
    ) -> None:
        self._on_permission_changed = on_permission_changed
        self._on_position_received = on_position_received
        self._on_failure = on_failure

    @abstractmethod
    def request_permission(self, level: AuthorizationRequestLevel) -> None:
        """Ask the platform for location access; the answer arrives via the permission callback."""
        pass

    @abstractmethod
    def start_updates(self) -> None:
        """Begin delivering positions through the position callback."""
        pass

    @abstractmethod
    def stop_updates(self) -> None:
        """Stop delivering positions."""
        pass

    # ------------------------------------------------------------------
    # Callback delivery helpers for implementations
    # ------------------------------------------------------------------

    def _emit_permission(self, status: Any) -> None:
        if self._on_permission_changed:
            self._on_permission_changed(status)

    def _emit_position(self, position: Position) -> None:
        if self._on_position_received:
            self._on_position_received(position)

    def _emit_failure(self, error: SensorError) -> None:
        if self._on_failure:
            self._on_failure(error)
