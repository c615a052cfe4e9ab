"""Configuration for locationbroker."""

from locationbroker.settings._locationbroker_settings import LocationBrokerSettings
from locationbroker.settings.config_manager import ConfigManager

__all__ = ["ConfigManager", "LocationBrokerSettings"]
