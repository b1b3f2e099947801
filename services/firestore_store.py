import logging
from typing import List, Optional, Protocol, Tuple

from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.transforms import SERVER_TIMESTAMP

from core import config
from models.attendance import AttendanceEvent
from models.site import SiteRecord

logger = logging.getLogger(__name__)


class AttendanceStore(Protocol):
    def add(self, event: AttendanceEvent) -> str:
        """Persist the event and return its document id."""
        ...

    def list_for_user(self, user_id: str, limit: int) -> List[Tuple[str, dict]]:
        """Most recent check-ins for the user as (document id, data), newest first."""
        ...


# Reads `sites/{siteId}` Documents
class FirestoreSiteLookup:
    def __init__(self, db, collection: str = config.SITES_COLLECTION):
        self._collection = db.collection(collection)

    def get_site(self, site_id: str) -> Optional[SiteRecord]:
        snapshot = self._collection.document(site_id).get()
        if not snapshot.exists:
            return None
        return SiteRecord.from_document(site_id, snapshot.to_dict())


# Writes / Reads the `attendance` Collection
class FirestoreAttendanceStore:
    def __init__(self, db, collection: str = config.ATTENDANCE_COLLECTION):
        self._collection = db.collection(collection)

    def add(self, event: AttendanceEvent) -> str:
        document = event.to_document()
        document["timestamp"] = SERVER_TIMESTAMP

        _, doc_ref = self._collection.add(document)
        logger.info("Stored check-in %s for user %s at site %s", doc_ref.id, event.user_id, event.site_id)
        return doc_ref.id

    def list_for_user(self, user_id: str, limit: int) -> List[Tuple[str, dict]]:
        query = (
            self._collection.where(filter=FieldFilter("userId", "==", user_id))
            .order_by("timestamp", direction="DESCENDING")
            .limit(limit)
        )
        return [(doc.id, doc.to_dict()) for doc in query.stream()]
