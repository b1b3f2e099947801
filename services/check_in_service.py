import logging
import threading
from typing import List

from fastapi import HTTPException, status
from google.api_core import exceptions as google_exceptions

from models.attendance import AttendanceEvent, AttendanceRecordResponse, Decision, DecisionStatus
from models.site import Coordinate
from services.admission import SiteLookup, evaluate_scan
from services.firestore_store import AttendanceStore
from utils.datetime_helpers import format_utc_datetime

logger = logging.getLogger(__name__)

# Rejected decisions -> HTTP status returned to the scanner
REJECTION_STATUS_CODES = {
    DecisionStatus.INVALID_PAYLOAD: status.HTTP_400_BAD_REQUEST,
    DecisionStatus.SITE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    DecisionStatus.SITE_MISCONFIGURED: status.HTTP_400_BAD_REQUEST,
    DecisionStatus.OUT_OF_RANGE: status.HTTP_400_BAD_REQUEST,
}


def rejection_detail(decision: Decision) -> dict:
    detail = {"code": decision.status.value, "message": decision.message}
    if decision.site_id is not None:
        detail["siteId"] = decision.site_id
    if decision.status == DecisionStatus.OUT_OF_RANGE:
        detail["distanceMeters"] = round(decision.distance_meters, 1)
        detail["radiusMeters"] = decision.radius_meters
    return detail


def _site_id(data: dict):
    site_id = data.get("siteId")
    return site_id if isinstance(site_id, str) and site_id else None


class CheckInService:

    # Users with a check-in currently being processed
    _in_flight: set = set()
    _in_flight_lock = threading.Lock()

    @classmethod
    def _acquire(cls, user_id: str) -> bool:
        with cls._in_flight_lock:
            if user_id in cls._in_flight:
                return False
            cls._in_flight.add(user_id)
            return True

    @classmethod
    def _release(cls, user_id: str) -> None:
        with cls._in_flight_lock:
            cls._in_flight.discard(user_id)

    @classmethod
    def check_in(
        cls,
        user: dict,
        payload: str,
        position: Coordinate,
        sites: SiteLookup,
        attendance: AttendanceStore,
    ) -> dict:

        user_id = user["uid"]

        # Only one admission per user at a time; a double scan gets a 409
        if not cls._acquire(user_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "code": "in_flight",
                    "message": "A check-in is already being processed for this user.",
                },
            )

        try:
            # 1) Parse the QR payload, fetch the site and run the geofence check
            try:
                decision = evaluate_scan(payload, sites, position)
            except google_exceptions.GoogleAPIError:
                logger.exception("Site lookup failed for payload %r", payload)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail={"code": "unavailable", "message": "Could not look up site. Please try again."},
                )

            if not decision.is_admitted:
                logger.warning(
                    "Check-in rejected for user %s: %s (site=%s, distance=%s, radius=%s)",
                    user_id,
                    decision.status.value,
                    decision.site_id,
                    decision.distance_meters,
                    decision.radius_meters,
                )
                raise HTTPException(
                    status_code=REJECTION_STATUS_CODES[decision.status],
                    detail=rejection_detail(decision),
                )

            # 2) Write attendance
            event = AttendanceEvent.from_decision(decision, user, position)
            try:
                event_id = attendance.add(event)
            except google_exceptions.GoogleAPIError:
                logger.exception("Failed to store check-in for user %s at site %s", user_id, event.site_id)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail={"code": "unavailable", "message": "Could not record attendance. Please try again."},
                )

            logger.info(
                "Check-in admitted for user %s at site %s (%.1fm of %.0fm)",
                user_id,
                event.site_id,
                decision.distance_meters,
                decision.radius_meters,
            )

            return {
                "status": "success",
                "message": decision.message,
                "data": {
                    "id": event_id,
                    "siteId": event.site_id,
                    "status": event.status,
                    "distanceMeters": round(decision.distance_meters, 1),
                    "radiusMeters": decision.radius_meters,
                    "clientTimestamp": format_utc_datetime(event.client_timestamp),
                },
            }
        finally:
            cls._release(user_id)

    @staticmethod
    def history(
        user: dict,
        limit: int,
        sites: SiteLookup,
        attendance: AttendanceStore,
    ) -> List[AttendanceRecordResponse]:
        """Recent check-ins for the user, each tagged with its site's name."""
        try:
            records = attendance.list_for_user(user["uid"], limit)

            # Fetch each referenced site once
            site_names = {}
            for site_id in {_site_id(data) for _, data in records} - {None}:
                site = sites.get_site(site_id)
                if site is not None:
                    site_names[site_id] = site.name
        except google_exceptions.GoogleAPIError:
            logger.exception("Failed to load attendance history for user %s", user["uid"])
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={"code": "unavailable", "message": "Failed to load attendance history."},
            )

        return [
            AttendanceRecordResponse.from_document(
                doc_id,
                data,
                site_name=site_names.get(_site_id(data)) or "Unknown Site",
            )
            for doc_id, data in records
        ]
