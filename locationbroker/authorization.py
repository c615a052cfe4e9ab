"""Authorization status model and the state cell the broker gates on."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from enum import Enum

from locationbroker.channels import LatestValueChannel, Subscription
from locationbroker.logging import LOCATIONBROKER_LOGGER


class AuthorizationStatus(Enum):
    """Permission state reported by the platform for location access."""

    NOT_DETERMINED = "notDetermined"
    AUTHORIZED_LIMITED = "authorizedWhenInUse"
    AUTHORIZED_FULL = "authorizedAlways"
    RESTRICTED = "restricted"
    DENIED = "denied"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_platform(cls, raw) -> AuthorizationStatus:
        """Translate a raw platform value; anything unrecognised becomes ``UNKNOWN``.

        Accepts members of this enum, CoreLocation integer codes, or status
        names (``"denied"``, ``"AUTHORIZED_FULL"``, ``"authorizedWhenInUse"``).
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, bool):
            return cls.UNKNOWN
        if isinstance(raw, int):
            return _PLATFORM_CODES.get(raw, cls.UNKNOWN)
        if isinstance(raw, str):
            key = raw.strip()
            for status in cls:
                if key == status.value or key.upper() == status.name:
                    return status
        return cls.UNKNOWN


# CLAuthorizationStatus raw values
_PLATFORM_CODES = {
    0: AuthorizationStatus.NOT_DETERMINED,
    1: AuthorizationStatus.RESTRICTED,
    2: AuthorizationStatus.DENIED,
    3: AuthorizationStatus.AUTHORIZED_FULL,
    4: AuthorizationStatus.AUTHORIZED_LIMITED,
}


class AuthorizationRequestLevel(Enum):
    """Level of access that can be requested from the platform."""

    WHEN_IN_USE = "whenInUse"
    ALWAYS = "always"


NEVER_SUFFICIENT = frozenset(
    {
        AuthorizationStatus.DENIED,
        AuthorizationStatus.RESTRICTED,
        AuthorizationStatus.NOT_DETERMINED,
        AuthorizationStatus.UNKNOWN,
    }
)


class AuthorizationState:
    """
    Current authorization status plus the set of statuses sufficient to operate.

    The status is only changed through ``update()``, which the broker calls
    from the sensor's permission-change callback. Incoming values are stored
    as-is. Every update is published on ``changes``; a failing subscriber is
    logged and does not affect the stored status.
    """

    def __init__(self, allowed_statuses: Iterable[AuthorizationStatus]):
        allowed = frozenset(allowed_statuses)
        forbidden = allowed & NEVER_SUFFICIENT
        if forbidden:
            names = ", ".join(sorted(s.display_name for s in forbidden))
            raise ValueError(f"Statuses can never be sufficient to operate: {names}")

        self.allowed_statuses = allowed
        self._lock = threading.Lock()
        self._status = AuthorizationStatus.NOT_DETERMINED
        self._known = False
        self.changes: LatestValueChannel[AuthorizationStatus] = LatestValueChannel("authorization-status")

    @property
    def status(self) -> AuthorizationStatus:
        with self._lock:
            return self._status

    @property
    def is_known(self) -> bool:
        """True once the platform has reported a status at least once."""
        with self._lock:
            return self._known

    def is_sufficient(self) -> bool:
        return self.status in self.allowed_statuses

    def is_denied(self) -> bool:
        return self.status is AuthorizationStatus.DENIED

    def update(self, status: AuthorizationStatus) -> None:
        with self._lock:
            self._status = status
            self._known = True
        LOCATIONBROKER_LOGGER.info(f"Location authorization status changed: {status.display_name}")
        self.changes.set(status)

    def subscribe(self, callback: Callable[[AuthorizationStatus], None], *, threaded: bool = False) -> Subscription:
        return self.changes.subscribe(callback, threaded=threaded)
