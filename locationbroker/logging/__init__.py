"""Logging setup for locationbroker."""

from locationbroker.logging._locationbroker_logger import LOCATIONBROKER_LOGGER, ColoredFormatter, set_log_level

__all__ = ["LOCATIONBROKER_LOGGER", "ColoredFormatter", "set_log_level"]
