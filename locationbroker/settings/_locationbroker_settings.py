from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from locationbroker.logging import LOCATIONBROKER_LOGGER
from locationbroker.sensor.abstract_sensor_port import SensorConfiguration


class LocationBrokerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOCATIONBROKER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Platform profile name ("ios", "macos", "linux"); detected when unset
    platform: Optional[str] = None

    # Sensor selection
    sensor: Literal["gpsd", "dummy"] = "gpsd"

    # Sensor configuration, handed to the sensor untouched
    desired_accuracy: str = "best"
    activity_type: str = "fitness"
    distance_filter_m: float = 10.0
    allows_background_updates: bool = True
    pauses_updates_automatically: bool = False

    # gpsd sensor settings
    gps_check_interval_seconds: float = 5.0

    # Overrides the default "go to settings" prompt text
    denied_prompt_message: Optional[str] = None

    log_level: str = "INFO"

    def model_post_init(self, __context) -> None:
        if self.distance_filter_m < 0:
            LOCATIONBROKER_LOGGER.warning(
                f"{self.__class__.__name__} distance_filter_m is negative, using 0 (report every fix)"
            )
            self.distance_filter_m = 0.0

    def sensor_configuration(self) -> SensorConfiguration:
        return SensorConfiguration(
            desired_accuracy=self.desired_accuracy,
            activity_type=self.activity_type,
            distance_filter_m=self.distance_filter_m,
            allows_background_updates=self.allows_background_updates,
            pauses_updates_automatically=self.pauses_updates_automatically,
        )
