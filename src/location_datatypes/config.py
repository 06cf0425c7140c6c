"""Conversion defaults using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library defaults, overridable from LOCATION_DATATYPES_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOCATION_DATATYPES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Decimal places kept for GPX / KML / NMEA / flexible polyline positions
    coordinate_precision: int = 6
    # Decimal places kept for speeds derived from m/s or knots
    speed_precision: int = 2

    # NMEA two-digit years below the pivot are 20xx, the rest 19xx
    nmea_pivot_year: int = 80

    # Vertices used when approximating a circular geofence as a polygon
    circle_steps: int = 64

    # GeoRoutes converters flatten nested properties unless told otherwise
    flatten_properties: bool = True


settings = Settings()
