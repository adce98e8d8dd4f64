"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from sighting_tracker.domain.geofence import GeofenceConfig


class Settings(BaseSettings):
    app_name: str = "sighting-tracker"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Storage
    database_url: str = "sqlite:///./sightings.db"

    # Queries
    default_timezone: str = "America/Chicago"
    lookback_hours: float = 24.0

    # Geofence
    geofence_center_lat: float = 38.5
    geofence_center_lon: float = -117.0
    geofence_radius_miles: float = 3.0
    geofence_geoname: str = "Springfield"

    # Admin access for moderation endpoints; unset disables them
    admin_token: str | None = None

    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    model_config = {"env_prefix": "SIGHTINGS_", "env_file": ".env", "extra": "ignore"}

    def geofence(self) -> GeofenceConfig:
        return GeofenceConfig(
            center_lat=self.geofence_center_lat,
            center_lon=self.geofence_center_lon,
            radius_miles=self.geofence_radius_miles,
            geoname=self.geofence_geoname,
        )
