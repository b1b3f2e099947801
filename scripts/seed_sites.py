#!/usr/bin/env python3
"""
Insert sample sites into Firestore and print the QR payload for each.

Usage:
    python scripts/seed_sites.py
"""

import json
import os
import sys

# Add the project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core import config
from core.firebase import get_db

SAMPLE_SITES = {
    "HQ": {
        "name": "Head Office",
        "location": {"lat": 38.9931538759034, "lng": -76.9428334513501},
        "geofenceRadiusMeters": 100.0,
    },
    "YARD": {
        "name": "Construction Yard",
        "location": {"lat": 38.9951, "lng": -76.9401},
        # No radius: the 150 m default applies
    },
}


def seed_sites():
    sites_ref = get_db().collection(config.SITES_COLLECTION)

    for site_id, data in SAMPLE_SITES.items():
        doc_ref = sites_ref.document(site_id)
        if doc_ref.get().exists:
            print(f"{site_id} site already exists")
        else:
            doc_ref.set(data)
            print(f"Added {site_id} site")

        print(f"  QR payload: {json.dumps({'siteId': site_id})}  (or 'site:{site_id}')")


if __name__ == "__main__":
    seed_sites()
