"""
MongoDB access helpers.

Collections: product, order, contact, news, plus ``counters`` which hands out
monotonically increasing integer ids per collection.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument

import settings
from errors import StorageFailure

# Largest integer BSON can store (int64)
MAX_DOCUMENT_ID = 2 ** 63 - 1

db = None
if settings.DATABASE_URL and settings.DATABASE_NAME:
    client = MongoClient(settings.DATABASE_URL)
    db = client[settings.DATABASE_NAME]


def get_db():
    if db is None:
        raise StorageFailure("Database not configured")
    return db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_id(database, collection_name: str) -> int:
    counter = database["counters"].find_one_and_update(
        {"_id": collection_name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(counter["seq"])


def reserve_id(database, collection_name: str, used_id: int) -> None:
    """Keep the counter ahead of an id that was assigned explicitly."""
    database["counters"].update_one(
        {"_id": collection_name},
        {"$max": {"seq": int(used_id)}},
        upsert=True,
    )


def create_document(database, collection_name: str, data: Any) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        doc = data.model_dump()
    else:
        doc = dict(data)
    doc.pop("id", None)

    if doc.get("_id") is None:
        doc["_id"] = next_id(database, collection_name)
    else:
        reserve_id(database, collection_name, doc["_id"])

    now = utcnow()
    doc.setdefault("created_at", now)
    doc["updated_at"] = now
    database[collection_name].insert_one(doc)
    return doc


def get_documents(
    database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[tuple]] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def doc_to_dict(doc: dict) -> dict:
    out = {}
    for k, v in doc.items():
        if isinstance(v, datetime):
            out[k] = v.isoformat()
        else:
            out[k] = v
    if "_id" in out:
        out["id"] = out.pop("_id")
    return out
