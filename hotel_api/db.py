# hotel_api/db.py
import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from tenacity import retry, stop_after_attempt, wait_fixed

from .errors import ServiceUnavailable

log = logging.getLogger(__name__)

BOOKINGS = "bookings"
VISITOR_SESSIONS = "visitor_sessions"

# fields that identify a booking for de-duplication
DUPLICATE_KEY = ("guest_name", "contact", "check_in", "check_out", "room_type")


@retry(wait=wait_fixed(2), stop=stop_after_attempt(3), reraise=True)
def _ping(client: MongoClient) -> None:
    client.admin.command("ping")


class StoreHandle:
    """One shared Mongo database handle, ready once a database is attached."""

    def __init__(self, db: Optional[Database] = None):
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = db

    @property
    def ready(self) -> bool:
        return self._db is not None

    def connect(self, uri: str, db_name: str, tls: bool = False) -> None:
        client = MongoClient(uri, tls=tls)
        _ping(client)
        self._client = client
        self._db = client[db_name]
        log.info("Connected to MongoDB database %s", db_name)

    def ensure_unique_index(self) -> None:
        self.collection(BOOKINGS).create_index(
            [(f, ASCENDING) for f in DUPLICATE_KEY],
            unique=True,
            name="booking_duplicate_key",
        )

    def collection(self, name: str, not_ready: str = "DB not ready") -> Collection:
        if self._db is None:
            raise ServiceUnavailable(not_ready)
        return self._db[name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
