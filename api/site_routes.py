import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel

from core.deps import get_current_user, get_site_lookup

logger = logging.getLogger(__name__)

router = APIRouter()

# --- Pydantic Models for Response ---

class SiteGeofenceResponse(BaseModel):
    siteId: str
    name: Optional[str] = None
    latitude: float
    longitude: float
    radiusMeters: float

# --- API Endpoints ---

@router.get("/{site_id}/geofence", response_model=SiteGeofenceResponse)
def get_site_geofence(
    site_id: str,
    current_user: Annotated[dict, Depends(get_current_user)],
    sites=Depends(get_site_lookup),
):
    """
    Retrieve the geofence information (latitude, longitude, radius) for a specific site.
    """
    try:
        site = sites.get_site(site_id)
    except google_exceptions.GoogleAPIError:
        logger.exception("Could not fetch site %s", site_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not retrieve site.",
        )

    if site is None:
        raise HTTPException(status_code=404, detail=f"Site with ID {site_id} not found.")

    center = site.coordinate
    if center is None:
        raise HTTPException(status_code=409, detail=f"Site {site_id} is misconfigured: missing location.")

    return SiteGeofenceResponse(
        siteId=site.site_id,
        name=site.name,
        latitude=center.latitude,
        longitude=center.longitude,
        radiusMeters=site.effective_radius_meters,
    )
