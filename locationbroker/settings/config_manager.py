"""Persistent broker options stored as JSON in the user config directory."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from locationbroker.logging import LOCATIONBROKER_LOGGER

_APP_NAME = "locationbroker"
_CONFIG_FILE = "config.json"


class ConfigManager:
    """
    Reads and updates the broker's JSON config file.

    Values stored here seed ``LocationBrokerSettings``; the CLI writes the
    options it was given back with ``--save-config``.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir or platformdirs.user_config_dir(_APP_NAME, appauthor=_APP_NAME))

    @property
    def config_file(self) -> Path:
        return self.config_dir / _CONFIG_FILE

    def config_exists(self) -> bool:
        return self.config_file.exists()

    def load_config(self) -> Dict[str, Any]:
        """Return the stored options, or an empty dict if there are none or they cannot be read."""
        if not self.config_exists():
            return {}

        try:
            config = json.loads(self.config_file.read_text())
        except (json.JSONDecodeError, OSError) as e:
            LOCATIONBROKER_LOGGER.error(f"Ignoring unreadable config file {self.config_file}: {e}")
            return {}

        if not isinstance(config, dict):
            LOCATIONBROKER_LOGGER.error(f"Ignoring config file {self.config_file}: expected a JSON object")
            return {}
        return config

    def update_config(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge ``changes`` into the stored options and write them back.

        The file is replaced atomically and is readable by the owner only.

        Returns:
            The merged options now on disk.
        """
        config = self.load_config()
        config.update(changes)

        self.config_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        temp_file = self.config_file.with_suffix(".json.tmp")
        try:
            temp_file.write_text(json.dumps(config, indent=2, sort_keys=True))
            os.chmod(temp_file, 0o600)
            temp_file.replace(self.config_file)
        except OSError:
            temp_file.unlink(missing_ok=True)
            raise

        LOCATIONBROKER_LOGGER.info(f"Saved options {sorted(changes)} to {self.config_file}")
        return config
