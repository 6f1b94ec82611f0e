# contacts_server/api/db/store.py
"""
DirectoryStore: CRUD access to the two directory collections over pymongo.

- persons: name, phone (absent when unset), street, city
- users: username, friends (list of person ObjectIds), optional password_hash
Filters are plain MongoDB filter documents. Insert/update validate required
fields, minimum lengths and unique fields and raise ValidationError.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.errors import DuplicateKeyError

from contacts_server.api.utils.logger import write_log

PERSONS = "persons"
USERS = "users"

REQUIRED_FIELDS = {
    PERSONS: ("name", "street", "city"),
    USERS: ("username",),
}
MIN_LENGTHS = {
    PERSONS: {"name": 3, "phone": 3, "street": 3, "city": 3},
    USERS: {"username": 3},
}
UNIQUE_FIELDS = {
    PERSONS: ("name",),
    USERS: ("username",),
}


class ValidationError(Exception):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def to_object_id(value) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class DirectoryStore:
    def __init__(self, db):
        self._db = db

    def _collection(self, name: str):
        if name not in REQUIRED_FIELDS:
            raise ValueError(f"unknown collection: {name}")
        return self._db[name]

    def ensure_indexes(self):
        for name, fields in UNIQUE_FIELDS.items():
            for field in fields:
                self._collection(name).create_index(field, unique=True)

    # ---------- reads ----------
    def count(self, collection: str) -> int:
        return self._collection(collection).count_documents({})

    def find(self, collection: str, filter: Optional[Dict[str, Any]] = None) -> List[dict]:
        return list(self._collection(collection).find(filter or {}))

    def find_one(self, collection: str, filter: Dict[str, Any]) -> Optional[dict]:
        return self._collection(collection).find_one(filter)

    def find_by_id(self, collection: str, entity_id) -> Optional[dict]:
        oid = to_object_id(entity_id)
        if oid is None:
            return None
        return self.find_one(collection, {"_id": oid})

    # ---------- writes ----------
    def insert(self, collection: str, entity: Dict[str, Any]) -> dict:
        doc = self._to_document(collection, entity)
        doc.pop("_id", None)
        self._validate(collection, doc)
        try:
            result = self._collection(collection).insert_one(doc)
        except DuplicateKeyError as e:
            raise ValidationError(f"duplicate key in {collection}: {e}") from e
        doc["_id"] = result.inserted_id
        return doc

    def update(self, collection: str, entity: Dict[str, Any]) -> dict:
        doc = self._to_document(collection, entity)
        oid = to_object_id(doc.get("_id"))
        if oid is None:
            raise ValidationError(f"{collection} entity has no valid _id", field="_id")
        doc["_id"] = oid
        self._validate(collection, doc)
        try:
            result = self._collection(collection).replace_one({"_id": oid}, doc)
        except DuplicateKeyError as e:
            raise ValidationError(f"duplicate key in {collection}: {e}") from e
        if result.matched_count == 0:
            raise ValidationError(f"{collection} entity {oid} does not exist", field="_id")
        return doc

    def remove_matching(self, collection: str, filter: Dict[str, Any]) -> Optional[dict]:
        """Destructive find: deletes and returns the first matching entity."""
        removed = self._collection(collection).find_one_and_delete(filter)
        if removed is not None:
            write_log({"event": "store_remove", "collection": collection, "id": removed["_id"]})
        return removed

    # ---------- friends ----------
    def populate_friends(self, account: dict) -> dict:
        """
        Return a copy of the account with friends replaced by person documents.
        References to persons that no longer exist are dropped.
        """
        populated = dict(account)
        friends = []
        for ref in account.get("friends", []):
            ref_id = ref["_id"] if isinstance(ref, dict) else ref
            person = self.find_by_id(PERSONS, ref_id)
            if person is None:
                write_log({"event": "dangling_friend_reference", "user_id": account.get("_id"), "person_id": ref_id})
                continue
            friends.append(person)
        populated["friends"] = friends
        return populated

    # ---------- helpers ----------
    def _to_document(self, collection: str, entity: Dict[str, Any]) -> dict:
        # None means "field not set"; persons without a phone carry no phone key
        doc = {k: v for k, v in dict(entity).items() if v is not None}
        if collection == USERS:
            doc["friends"] = [f["_id"] if isinstance(f, dict) else f for f in doc.get("friends", [])]
        return doc

    def _validate(self, collection: str, doc: dict):
        for field in REQUIRED_FIELDS[collection]:
            if not doc.get(field):
                raise ValidationError(f"{collection}.{field} is required", field=field)
        for field, min_len in MIN_LENGTHS[collection].items():
            if field in doc and len(str(doc[field])) < min_len:
                raise ValidationError(
                    f"{collection}.{field} must be at least {min_len} characters", field=field
                )
        for field in UNIQUE_FIELDS[collection]:
            clash = self.find_one(collection, {field: doc[field], "_id": {"$ne": doc.get("_id")}})
            if clash is not None:
                raise ValidationError(f"{collection}.{field} '{doc[field]}' already exists", field=field)


def connect(settings) -> DirectoryStore:
    write_log({"event": "store_connecting", "db": settings.mongodb_db}, stream="system")
    client = MongoClient(settings.mongodb_uri)
    store = DirectoryStore(client[settings.mongodb_db])
    return store
