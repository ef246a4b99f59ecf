"""
Shared fixtures for shellybridge tests.
"""

import pytest

from shellybridge.homekit import BridgeHost, LocalDriver
from shellybridge.platform import ShellyPlatform
from shellybridge.shellies import DeviceDirectory


class FakeTransport:
    """Records requests and answers them from a canned table."""

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.error = None

    async def request(self, host, path, params=None, auth=None):
        self.calls.append((host, path, params, auth))
        if self.error is not None:
            raise self.error
        return self.responses.get(path, {})


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def directory(transport):
    return DeviceDirectory(transport=transport)


@pytest.fixture
def driver():
    return LocalDriver()


@pytest.fixture
def bridge(driver):
    return BridgeHost(driver=driver)


@pytest.fixture
def platform(bridge, directory):
    return ShellyPlatform(None, bridge, directory)
