import logging

from fastapi import HTTPException, Request, status
from firebase_admin import auth as firebase_auth

from core.firebase import get_db, verify_id_token
from services.firestore_store import FirestoreAttendanceStore, FirestoreSiteLookup

logger = logging.getLogger(__name__)

# Standard credentials exception
CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


# Resolves the Signed-In Firebase User From the Bearer Token
async def get_current_user(request: Request) -> dict:

    # 1) Extract & Analyze Authorization Header
    auth_header = request.headers.get("Authorization", "")

    # Make Sure Formatting Valid
    if not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_header.split(" ", 1)[1]

    # 2) Verify This Points to a Real User Account
    try:
        decoded = verify_id_token(token)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.CertificateFetchError) as e:
        logger.warning("Rejected ID token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    uid = decoded.get("uid")
    if not uid:
        raise CREDENTIALS_EXCEPTION

    # 3) Identity Is Taken As-Is From the Verified Claims
    return {
        "uid": uid,
        "email": decoded.get("email"),
        "name": decoded.get("name", ""),
    }


# Firestore-Backed Collaborators, Overridable In Tests
def get_site_lookup() -> FirestoreSiteLookup:
    return FirestoreSiteLookup(get_db())


def get_attendance_store() -> FirestoreAttendanceStore:
    return FirestoreAttendanceStore(get_db())
