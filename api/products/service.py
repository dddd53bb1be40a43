"""
Product business logic.

Scope:
- id parsing and response shaping (`_id` as a hex string)
- mapping driver failures to HTTP errors
"""

from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, status
from pymongo.errors import PyMongoError

from . import repository, schemas

logger = logging.getLogger(__name__)


def _parse_id(product_id: str) -> ObjectId:
    try:
        return ObjectId(product_id)
    except (InvalidId, TypeError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.") from exc


def _serialize(doc: dict[str, Any]) -> dict:
    return {
        "_id": str(doc["_id"]),
        "name": doc.get("name"),
        "description": doc.get("description", ""),
        "price": doc.get("price"),
        "quantity": doc.get("quantity", 0),
        "photo": doc.get("photo"),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }


def _unavailable(action: str, exc: PyMongoError) -> HTTPException:
    logger.error("product_%s_failed error=%s", action, exc)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable.")


async def list_products(db: Any, *, limit: int, offset: int) -> list[dict]:
    try:
        rows = await repository.list_products(db, limit=limit, offset=offset)
    except PyMongoError as exc:
        raise _unavailable("list", exc) from exc
    return [_serialize(row) for row in rows]


async def get_product(db: Any, product_id: str) -> dict:
    oid = _parse_id(product_id)
    try:
        row = await repository.get_product(db, oid)
    except PyMongoError as exc:
        raise _unavailable("get", exc) from exc
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    return _serialize(row)


async def create_product(db: Any, payload: schemas.ProductCreate) -> dict:
    try:
        row = await repository.insert_product(db, payload.model_dump())
    except PyMongoError as exc:
        raise _unavailable("create", exc) from exc
    logger.info("product_created product_id=%s", row["_id"])
    return _serialize(row)


async def update_product(db: Any, product_id: str, payload: schemas.ProductUpdate) -> dict:
    oid = _parse_id(product_id)
    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    try:
        row = await repository.update_product(db, oid, fields)
    except PyMongoError as exc:
        raise _unavailable("update", exc) from exc
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    return _serialize(row)


async def delete_product(db: Any, product_id: str) -> dict:
    oid = _parse_id(product_id)
    try:
        deleted = await repository.delete_product(db, oid)
    except PyMongoError as exc:
        raise _unavailable("delete", exc) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    logger.info("product_deleted product_id=%s", product_id)
    return {"ok": True, "_id": product_id}
