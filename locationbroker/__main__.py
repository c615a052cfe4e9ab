import time

import click

from locationbroker.broker import LocationBroker
from locationbroker.denial import SettingsPromptHandler, log_settings_prompt
from locationbroker.errors import NotAuthorizedError
from locationbroker.logging import LOCATIONBROKER_LOGGER, set_log_level
from locationbroker.platform_profiles import resolve_platform_profile
from locationbroker.sensor import DummySensorPort, GpsdSensorPort
from locationbroker.settings import ConfigManager, LocationBrokerSettings


def build_sensor(settings: LocationBrokerSettings):
    configuration = settings.sensor_configuration()
    if settings.sensor == "dummy":
        return DummySensorPort(configuration)
    return GpsdSensorPort(configuration, check_interval_seconds=settings.gps_check_interval_seconds)


def _log_position(position) -> None:
    if position is None:
        return
    accuracy = f" ±{position.horizontal_accuracy:.1f}m" if position.horizontal_accuracy is not None else ""
    LOCATIONBROKER_LOGGER.info(f"Location: lat={position.latitude:.6f}, lon={position.longitude:.6f}{accuracy}")


@click.command()
@click.option("--sensor", type=click.Choice(["gpsd", "dummy"]), default=None, help="Location sensor to use")
@click.option("--platform", "platform_name", default=None, help="Platform profile (ios, macos, linux)")
@click.option("--log-level", default=None, help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
@click.option("--duration", default=0.0, type=float, help="Seconds to run before stopping (0 = until interrupted)")
@click.option("--save-config", is_flag=True, default=False, help="Remember the given options for later runs")
def cli(sensor, platform_name, log_level, duration, save_config):
    config_manager = ConfigManager()
    given = {
        key: value
        for key, value in (("sensor", sensor), ("platform", platform_name), ("log_level", log_level))
        if value is not None
    }
    settings = LocationBrokerSettings(**{**config_manager.load_config(), **given})
    set_log_level(settings.log_level)

    try:
        profile = resolve_platform_profile(settings.platform)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--platform") from e

    if save_config and given:
        config_manager.update_config(given)

    broker = LocationBroker(
        build_sensor(settings),
        SettingsPromptHandler(log_settings_prompt, message=settings.denied_prompt_message),
        profile,
    )
    broker.subscribe_location(_log_position)

    try:
        broker.start()
    except NotAuthorizedError as e:
        LOCATIONBROKER_LOGGER.error(str(e))
        raise SystemExit(1)

    try:
        deadline = time.monotonic() + duration if duration > 0 else None
        while deadline is None or time.monotonic() < deadline:
            time.sleep(0.1)
    except KeyboardInterrupt:
        LOCATIONBROKER_LOGGER.info("Interrupted")
    finally:
        broker.stop()


if __name__ == "__main__":
    cli()
