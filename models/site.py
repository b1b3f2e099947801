import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Defines the Structure of a Site Document and the Coordinates Compared Against It

DEFAULT_GEOFENCE_RADIUS_METERS = 150.0


def _is_finite_number(value: Any) -> bool:
    # bool is an int subclass; a True latitude is not a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# A Point on the Globe (Degrees)
class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @field_validator("latitude", "longitude")
    @classmethod
    def must_be_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("coordinate must be a finite number")
        return value


# Site w/ Circular Geofence, As Stored In Firestore
class SiteRecord(BaseModel):
    """
    A site document as it was read from the store.

    Coordinate and radius values are kept raw so a badly edited document can
    still be represented and reported as misconfigured instead of failing to
    load.
    """

    model_config = ConfigDict(frozen=True)

    site_id: str
    name: Optional[str] = None
    latitude: Any = None
    longitude: Any = None
    geofence_radius_meters: Any = None

    @classmethod
    def from_document(cls, site_id: str, data: Optional[dict]) -> "SiteRecord":
        """Build from a `sites/{siteId}` document: `{name, location: {lat, lng}, geofenceRadiusMeters}`."""
        data = data or {}
        location = data.get("location")
        if not isinstance(location, dict):
            location = {}

        name = data.get("name")
        return cls(
            site_id=site_id,
            name=name if isinstance(name, str) else None,
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            geofence_radius_meters=data.get("geofenceRadiusMeters"),
        )

    @property
    def coordinate(self) -> Optional[Coordinate]:
        """The registered coordinate, or None when the site is misconfigured."""
        if not (_is_finite_number(self.latitude) and _is_finite_number(self.longitude)):
            return None
        if not (-90 <= self.latitude <= 90 and -180 <= self.longitude <= 180):
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @property
    def effective_radius_meters(self) -> float:
        radius = self.geofence_radius_meters
        if _is_finite_number(radius) and radius > 0:
            return float(radius)
        return DEFAULT_GEOFENCE_RADIUS_METERS
