import logging


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[94m",  # Blue
        "INFO": "\033[92m",  # Green
        "WARNING": "\033[93m",  # Yellow
        "ERROR": "\033[91m",  # Red
        "CRITICAL": "\033[95m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        # Restore the plain level name afterwards for any other handler
        original_levelname = record.levelname
        color = self.COLORS.get(original_levelname, self.RESET)
        record.levelname = f"{color}{original_levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


LOCATIONBROKER_LOGGER = logging.getLogger("locationbroker")
LOCATIONBROKER_LOGGER.setLevel(logging.INFO)

handler = logging.StreamHandler()
log_format = "%(asctime)s %(levelname)s %(message)s"
date_format = "%Y-%m-%d %H:%M:%S"
formatter = ColoredFormatter(fmt=log_format, datefmt=date_format)
handler.setFormatter(formatter)
LOCATIONBROKER_LOGGER.handlers.clear()
LOCATIONBROKER_LOGGER.addHandler(handler)


def set_log_level(level: str) -> None:
    """Apply a level name such as ``"DEBUG"`` to the broker logger."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        LOCATIONBROKER_LOGGER.warning(f"Unknown log level {level!r}, keeping INFO")
        numeric = logging.INFO
    LOCATIONBROKER_LOGGER.setLevel(numeric)
