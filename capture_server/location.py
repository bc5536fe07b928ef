"""Mock-location detection for the capture app's native location channel.

The capture app asks the host platform whether the device's current position
is real before it submits a capture. The platform side is reached through a
``LocationManager`` that exposes the last known fix per provider, and the
answer is served over a method channel named :data:`CHANNEL_NAME`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

__all__ = [
    "ANDROID_S",
    "CHANNEL_NAME",
    "GPS_PROVIDER",
    "Location",
    "LocationChannel",
    "LocationManager",
    "MethodNotImplemented",
    "is_mock_location",
]


LOGGER = logging.getLogger("capture_server.location")

CHANNEL_NAME = "com.spectralens.dev/location"
GPS_PROVIDER = "gps"

# API level 31: from here on the fix itself reports ``isMock``.
ANDROID_S = 31


@dataclass(frozen=True)
class Location:
    """A location fix as reported by the platform."""

    latitude: float
    longitude: float
    is_mock: bool = False
    is_from_mock_provider: bool = False


class LocationManager(Protocol):
    def get_last_known_location(self, provider: str) -> Optional[Location]:
        """Return the last fix from ``provider``.

        Raises :class:`PermissionError` when location access is denied.
        """


class MethodNotImplemented(Exception):
    """Raised when the channel receives a method it does not serve."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Method {method!r} is not implemented on {CHANNEL_NAME}")
        self.method = method


def is_mock_location(manager: LocationManager, sdk_int: int) -> bool:
    """Return ``True`` when the last GPS fix comes from a mock provider.

    No fix at all, or no permission to read one, counts as not mocked.
    """

    try:
        location = manager.get_last_known_location(GPS_PROVIDER)
    except PermissionError as exc:
        LOGGER.warning("Location permission denied; treating location as real: %s", exc)
        return False

    if location is None:
        return False

    if sdk_int >= ANDROID_S:
        return bool(location.is_mock)
    return bool(location.is_from_mock_provider)


class LocationChannel:
    """Dispatches method calls arriving on the location channel."""

    name = CHANNEL_NAME

    def __init__(self, manager: LocationManager, sdk_int: int) -> None:
        self._manager = manager
        self._sdk_int = sdk_int
        self._methods: Dict[str, Callable[[], bool]] = {
            "isMockLocation": self._is_mock_location,
        }

    def _is_mock_location(self) -> bool:
        return is_mock_location(self._manager, self._sdk_int)

    def handle(self, method: str) -> bool:
        try:
            handler = self._methods[method]
        except KeyError:
            raise MethodNotImplemented(method) from None
        return handler()
