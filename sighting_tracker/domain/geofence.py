"""Geofence: circular admission boundary around a configured center.

Distances use the Haversine great-circle formula on a spherical Earth of
radius 3959 miles.  Coordinates are not range-checked here.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

EARTH_RADIUS_MILES = 3959.0


class GeofenceConfig(BaseModel):
    """Process-wide geofence settings, loaded once at startup."""

    center_lat: float = Field(..., description="Center latitude in decimal degrees")
    center_lon: float = Field(..., description="Center longitude in decimal degrees")
    radius_miles: float = Field(..., gt=0.0, description="Admission radius in miles")
    geoname: str = Field(..., min_length=1, description="Display name of the area")

    model_config = {"frozen": True}

    def to_public_dict(self) -> dict:
        return {
            "centerLat": self.center_lat,
            "centerLon": self.center_lon,
            "radiusMiles": self.radius_miles,
            "geoname": self.geoname,
        }


def distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within(lat: float, lon: float, config: GeofenceConfig) -> bool:
    """True if the point lies within the geofence radius (boundary inclusive)."""
    return distance_miles(lat, lon, config.center_lat, config.center_lon) <= config.radius_miles
