from typing import Annotated, List

from fastapi import APIRouter, Depends, Query

from core.config import HISTORY_LIMIT, HISTORY_LIMIT_MAX
from core.deps import get_attendance_store, get_current_user, get_site_lookup
from models.attendance import AttendanceRecordResponse, CheckInRequest
from services.check_in_service import CheckInService

# Defines API Endpoints
router = APIRouter()


# Check In Endpoint (QR payload + current position)
@router.post("/check-in")
def check_in(
    data: CheckInRequest,
    user: Annotated[dict, Depends(get_current_user)],
    sites=Depends(get_site_lookup),
    attendance=Depends(get_attendance_store),
):
    return CheckInService.check_in(
        user=user,
        payload=data.payload,
        position=data.position,
        sites=sites,
        attendance=attendance,
    )


# Get Recent Check-Ins
@router.get("/history", response_model=List[AttendanceRecordResponse])
def get_history(
    user: Annotated[dict, Depends(get_current_user)],
    limit: Annotated[int, Query(ge=1, le=HISTORY_LIMIT_MAX)] = HISTORY_LIMIT,
    sites=Depends(get_site_lookup),
    attendance=Depends(get_attendance_store),
):
    """
    Retrieves the most recent check-ins made by the authenticated user, newest first.
    """
    return CheckInService.history(user=user, limit=limit, sites=sites, attendance=attendance)
