from typing import Any, Dict

from pymongo.collection import Collection


class VisitorSessionsRepo:
    def __init__(self, collection: Collection):
        self.collection = collection

    def append(self, event: Dict[str, Any]) -> str:
        result = self.collection.insert_one(dict(event))
        return str(result.inserted_id)
