"""Error taxonomy for the location broker."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from locationbroker.authorization import AuthorizationStatus


class LocationBrokerError(RuntimeError):
    """Base class for errors raised by the location broker."""


class NotAuthorizedError(LocationBrokerError):
    """Raised by ``start()`` when the known authorization status does not permit updates."""

    def __init__(self, status: AuthorizationStatus) -> None:
        self.status = status
        super().__init__(f"Location updates are not authorized (status: {status.display_name})")


class SensorFailure(Enum):
    """Classification of failures reported by a sensor."""

    PERMISSION_REVOKED = "permission_revoked"
    POSITION_UNAVAILABLE = "position_unavailable"
    UNKNOWN = "unknown"


class SensorError(LocationBrokerError):
    """Failure reported by a sensor through its failure callback.

    Sensors hand these to the broker; they are never raised across the
    callback boundary.
    """

    def __init__(self, kind: SensorFailure, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or kind.value)


def classify_failure(error: BaseException) -> SensorFailure:
    """Map an arbitrary sensor error onto a ``SensorFailure``."""
    if isinstance(error, SensorError):
        return error.kind
    if isinstance(error, PermissionError):
        return SensorFailure.PERMISSION_REVOKED
    return SensorFailure.UNKNOWN
