"""
Pydantic schemas for product endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    price: float = Field(..., ge=0)
    quantity: int = Field(default=0, ge=0)
    photo: str | None = Field(default=None, max_length=2000)


class ProductUpdate(BaseModel):
    """
    Partial update: only fields present in the request body are written.

    `photo` may be cleared with an explicit null; the other fields may not.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    price: float | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    photo: str | None = Field(default=None, max_length=2000)

    @field_validator("name", "description", "price", "quantity", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value
