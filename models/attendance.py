import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from models.site import Coordinate
from utils.datetime_helpers import format_utc_datetime


# Defines the Structure of Data for a Check-In Call
class CheckInRequest(BaseModel):
    payload: str = Field(..., description="Raw string decoded from the site's QR code")
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    @property
    def position(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


# Enum Limiting an Admission Decision to Five Outcomes
class DecisionStatus(str, Enum):
    ADMITTED = "admitted"
    OUT_OF_RANGE = "out_of_range"
    INVALID_PAYLOAD = "invalid_payload"
    SITE_NOT_FOUND = "site_not_found"
    SITE_MISCONFIGURED = "site_misconfigured"


class Decision(BaseModel):
    """Outcome of a geofence admission check for one scan."""

    model_config = ConfigDict(frozen=True)

    status: DecisionStatus
    site_id: Optional[str] = None
    distance_meters: Optional[float] = None
    radius_meters: Optional[float] = None

    @classmethod
    def admitted(cls, site_id: str, distance_meters: float, radius_meters: float) -> "Decision":
        return cls(
            status=DecisionStatus.ADMITTED,
            site_id=site_id,
            distance_meters=distance_meters,
            radius_meters=radius_meters,
        )

    @classmethod
    def out_of_range(cls, site_id: str, distance_meters: float, radius_meters: float) -> "Decision":
        return cls(
            status=DecisionStatus.OUT_OF_RANGE,
            site_id=site_id,
            distance_meters=distance_meters,
            radius_meters=radius_meters,
        )

    @classmethod
    def invalid_payload(cls) -> "Decision":
        return cls(status=DecisionStatus.INVALID_PAYLOAD)

    @classmethod
    def site_not_found(cls, site_id: str) -> "Decision":
        return cls(status=DecisionStatus.SITE_NOT_FOUND, site_id=site_id)

    @classmethod
    def site_misconfigured(cls, site_id: str) -> "Decision":
        return cls(status=DecisionStatus.SITE_MISCONFIGURED, site_id=site_id)

    @property
    def is_admitted(self) -> bool:
        return self.status == DecisionStatus.ADMITTED

    @property
    def message(self) -> str:
        """User-facing text for this outcome."""
        if self.status == DecisionStatus.ADMITTED:
            return "Attendance recorded"
        if self.status == DecisionStatus.OUT_OF_RANGE:
            return f"You are too far from this site. ({round(self.distance_meters)}m away)"
        if self.status == DecisionStatus.SITE_NOT_FOUND:
            return "No site found for this QR."
        if self.status == DecisionStatus.SITE_MISCONFIGURED:
            return "Site is misconfigured: missing location."
        return "This QR code is not recognized."


# Check-In Record Written to the `attendance` Collection
class AttendanceEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    user_email: Optional[str] = None
    site_id: str
    status: str = "check-in"
    device: str = "mobile"
    latitude: float
    longitude: float
    distance_meters: float
    client_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_decision(
        cls,
        decision: Decision,
        user: dict,
        position: Coordinate,
    ) -> "AttendanceEvent":
        """Build the record for an admitted decision; any other outcome is a caller bug."""
        if not decision.is_admitted:
            raise ValueError(
                f"Attendance event requires an admitted decision, got '{decision.status.value}'"
            )
        return cls(
            user_id=user["uid"],
            user_email=user.get("email") or None,
            site_id=decision.site_id,
            latitude=position.latitude,
            longitude=position.longitude,
            distance_meters=decision.distance_meters,
        )

    def to_document(self) -> dict:
        """Firestore field layout; the server timestamp is added by the store."""
        return {
            "userId": self.user_id,
            "userEmail": self.user_email,
            "siteId": self.site_id,
            "status": self.status,
            "device": self.device,
            "clientTimestamp": format_utc_datetime(self.client_timestamp),
            "coords": {"lat": self.latitude, "lng": self.longitude},
            "distanceMeters": self.distance_meters,
        }


# Return Model For Check-In / History Endpoints
class AttendanceRecordResponse(BaseModel):
    id: str
    siteId: str
    siteName: Optional[str] = None
    status: str
    userEmail: Optional[str] = None
    distanceMeters: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timestamp: Optional[datetime] = None
    clientTimestamp: Optional[str] = None

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: Optional[datetime]) -> Optional[str]:
        """Ensure timestamp is formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)

    @classmethod
    def from_document(cls, doc_id: str, data: dict, site_name: Optional[str] = None) -> "AttendanceRecordResponse":
        """Build from a stored document; fields of the wrong type are dropped rather than failing the listing."""
        coords = data.get("coords")
        if not isinstance(coords, dict):
            coords = {}
        timestamp = data.get("timestamp")
        return cls(
            id=doc_id,
            siteId=_text(data.get("siteId")) or "",
            siteName=site_name,
            status=_text(data.get("status")) or "check-in",
            userEmail=_text(data.get("userEmail")),
            distanceMeters=_number(data.get("distanceMeters")),
            latitude=_number(coords.get("lat")),
            longitude=_number(coords.get("lng")),
            timestamp=timestamp if isinstance(timestamp, datetime) else None,
            clientTimestamp=_text(data.get("clientTimestamp")),
        )


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


def _number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)
