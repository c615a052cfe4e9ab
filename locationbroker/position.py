"""Position value reported by a location sensor."""

import math
from dataclasses import dataclass
from typing import Optional

_EARTH_RADIUS_M = 6_371_008.8


@dataclass(frozen=True)
class Position:
    """A single location fix."""

    latitude: float  # degrees
    longitude: float  # degrees
    timestamp: float  # time.time() when the fix was obtained
    altitude: Optional[float] = None  # meters
    horizontal_accuracy: Optional[float] = None  # meters, radius of uncertainty

    def distance_to(self, other: "Position") -> float:
        """Great-circle distance in meters (haversine)."""
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dlat = lat2 - lat1
        dlon = math.radians(other.longitude - self.longitude)
        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * _EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))
