"""Per-platform authorization defaults, resolved once at startup."""

import sys
from dataclasses import dataclass
from typing import Optional

from locationbroker.authorization import AuthorizationRequestLevel, AuthorizationStatus


@dataclass(frozen=True)
class PlatformProfile:
    """Authorization defaults handed to the broker at construction."""

    name: str
    default_level: AuthorizationRequestLevel
    allowed_statuses: frozenset


IOS = PlatformProfile(
    name="ios",
    default_level=AuthorizationRequestLevel.WHEN_IN_USE,
    allowed_statuses=frozenset({AuthorizationStatus.AUTHORIZED_LIMITED, AuthorizationStatus.AUTHORIZED_FULL}),
)

# macOS only grants full ("authorized") access to location services
MACOS = PlatformProfile(
    name="macos",
    default_level=AuthorizationRequestLevel.ALWAYS,
    allowed_statuses=frozenset({AuthorizationStatus.AUTHORIZED_FULL}),
)

LINUX = PlatformProfile(
    name="linux",
    default_level=AuthorizationRequestLevel.ALWAYS,
    allowed_statuses=frozenset({AuthorizationStatus.AUTHORIZED_LIMITED, AuthorizationStatus.AUTHORIZED_FULL}),
)

PROFILES = {profile.name: profile for profile in (IOS, MACOS, LINUX)}


def resolve_platform_profile(name: Optional[str] = None) -> PlatformProfile:
    """
    Pick the profile for an explicit platform name, or detect it from ``sys.platform``.

    Raises:
        ValueError: if ``name`` is not a known profile.
    """
    if name is not None:
        try:
            return PROFILES[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown platform {name!r}; expected one of {sorted(PROFILES)}") from None

    if sys.platform == "darwin":
        return MACOS
    if sys.platform == "ios":
        return IOS
    return LINUX
