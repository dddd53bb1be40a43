"""
Product persistence (MongoDB `products` collection).

Every function takes the database handle explicitly; see `core.db.get_database`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument

COLLECTION = "products"


def _collection(db: Any) -> Any:
    return db[COLLECTION]


async def list_products(db: Any, *, limit: int = 100, offset: int = 0) -> list[dict]:
    cursor = _collection(db).find({}).sort("_id", 1).skip(offset).limit(limit)
    return await cursor.to_list(length=limit)


async def get_product(db: Any, product_id: ObjectId) -> dict | None:
    return await _collection(db).find_one({"_id": product_id})


async def insert_product(db: Any, fields: dict[str, Any]) -> dict:
    now = datetime.now(timezone.utc)
    doc = {**fields, "created_at": now, "updated_at": now}
    result = await _collection(db).insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


async def update_product(db: Any, product_id: ObjectId, fields: dict[str, Any]) -> dict | None:
    return await _collection(db).find_one_and_update(
        {"_id": product_id},
        {"$set": {**fields, "updated_at": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )


async def delete_product(db: Any, product_id: ObjectId) -> bool:
    result = await _collection(db).delete_one({"_id": product_id})
    return result.deleted_count > 0
