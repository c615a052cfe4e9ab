"""Permission-gated location broker."""

from locationbroker.authorization import AuthorizationRequestLevel, AuthorizationState, AuthorizationStatus
from locationbroker.broker import LocationBroker
from locationbroker.channels import EventChannel, LatestValueChannel, Subscription
from locationbroker.denial import SettingsPromptHandler, SettingsPromptRequest
from locationbroker.errors import LocationBrokerError, NotAuthorizedError, SensorError, SensorFailure
from locationbroker.platform_profiles import PlatformProfile, resolve_platform_profile
from locationbroker.position import Position

__all__ = [
    "AuthorizationRequestLevel",
    "AuthorizationState",
    "AuthorizationStatus",
    "EventChannel",
    "LatestValueChannel",
    "LocationBroker",
    "LocationBrokerError",
    "NotAuthorizedError",
    "PlatformProfile",
    "Position",
    "SensorError",
    "SensorFailure",
    "SettingsPromptHandler",
    "SettingsPromptRequest",
    "Subscription",
    "resolve_platform_profile",
]
