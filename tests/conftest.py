from unittest.mock import MagicMock

import pytest

from locationbroker.broker import LocationBroker
from locationbroker.platform_profiles import IOS
from tests.utils import FakeSensorPort


@pytest.fixture
def sensor():
    return FakeSensorPort()


@pytest.fixture
def denied_handler():
    return MagicMock()


@pytest.fixture
def broker(sensor, denied_handler):
    return LocationBroker(sensor, denied_handler, IOS)
