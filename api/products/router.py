"""
FastAPI router for product endpoints. Mounted under `/api/products` in `main.py`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from core import db as core_db

from . import schemas, service

router = APIRouter()


@router.get("")
async def list_products(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Any = Depends(core_db.get_database),
) -> dict:
    products = await service.list_products(db, limit=limit, offset=offset)
    return {
        "products": products,
        "limit": limit,
        "offset": offset,
        "count": len(products),
    }


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    db: Any = Depends(core_db.get_database),
) -> dict:
    return await service.get_product(db, product_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    request: schemas.ProductCreate,
    db: Any = Depends(core_db.get_database),
) -> dict:
    return await service.create_product(db, request)


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    request: schemas.ProductUpdate,
    db: Any = Depends(core_db.get_database),
) -> dict:
    return await service.update_product(db, product_id, request)


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    db: Any = Depends(core_db.get_database),
) -> dict:
    return await service.delete_product(db, product_id)
