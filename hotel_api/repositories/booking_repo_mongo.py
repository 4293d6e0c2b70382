from typing import Any, Dict, List, Optional

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from ..utils.schemas import BookingRecord


def _serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out


class BookingsRepo:
    def __init__(self, collection: Collection):
        self.collection = collection

    def all(self) -> List[Dict[str, Any]]:
        # natural order == insertion order for a plain collection
        return [_serialize(d) for d in self.collection.find()]

    def find_duplicate(self, record: BookingRecord) -> Optional[Dict[str, Any]]:
        return self.collection.find_one(record.duplicate_filter())

    def insert(self, record: BookingRecord) -> str:
        result = self.collection.insert_one(record.to_document())
        return str(result.inserted_id)

    def insert_unique(self, record: BookingRecord) -> Optional[str]:
        """Insert relying on the unique duplicate-key index; None when it already exists."""
        try:
            return self.insert(record)
        except DuplicateKeyError:
            return None
