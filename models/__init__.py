from .attendance import (
    AttendanceEvent,
    AttendanceRecordResponse,
    CheckInRequest,
    Decision,
    DecisionStatus,
)
from .site import DEFAULT_GEOFENCE_RADIUS_METERS, Coordinate, SiteRecord
