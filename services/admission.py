"""
Geofence admission for scanned site QR codes.

Everything here is pure: the caller resolves the site document and the user's
position beforehand and hands over plain values. Expected failures come back
as a `Decision`, never as an exception.
"""

import json
from typing import Optional, Protocol

from models.attendance import Decision
from models.site import Coordinate, SiteRecord
from utils.geofence import great_circle_distance_meters, is_within_radius

SITE_ID_PREFIX = "site:"


class SiteLookup(Protocol):
    def get_site(self, site_id: str) -> Optional[SiteRecord]:
        """Return the site, or None when no such site exists."""
        ...


def parse_site_id(payload: str) -> Optional[str]:
    """
    Extract a site identifier from a scanned payload.

    JSON is tried first: `{"siteId": "abc"}` yields "abc". The `site:abc`
    form is only considered when the payload is not JSON at all, so a JSON
    document without a usable `siteId` is rejected outright.

    Returns None when the payload is not a recognised site code.
    """
    if not isinstance(payload, str):
        return None

    try:
        parsed = json.loads(payload)
    except (ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder can follow
        if payload.startswith(SITE_ID_PREFIX):
            return payload[len(SITE_ID_PREFIX):] or None
        return None

    if not isinstance(parsed, dict):
        return None
    site_id = parsed.get("siteId")
    if isinstance(site_id, str) and site_id:
        return site_id
    return None


def decide(site_id: str, site: Optional[SiteRecord], position: Coordinate) -> Decision:
    if site is None:
        return Decision.site_not_found(site_id)

    center = site.coordinate
    if center is None:
        return Decision.site_misconfigured(site_id)

    radius = site.effective_radius_meters
    distance = great_circle_distance_meters(position, center)

    if is_within_radius(distance, radius):
        return Decision.admitted(site_id, distance, radius)
    return Decision.out_of_range(site_id, distance, radius)


def evaluate_scan(payload: str, lookup: SiteLookup, position: Coordinate) -> Decision:
    """Parse, look up and decide in one go; the lookup is skipped for unusable payloads."""
    site_id = parse_site_id(payload)
    if site_id is None:
        return Decision.invalid_payload()

    return decide(site_id, lookup.get_site(site_id), position)
