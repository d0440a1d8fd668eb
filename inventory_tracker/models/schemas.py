"""Pydantic schemas for validating item payloads.

Payloads use the camelCase keys of the stored document. Unknown keys,
including ``id`` and ``lastUpdated``, are dropped.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemCreate(BaseModel):
    """Fields accepted when creating an item."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)

    product_name: str = Field(..., alias="productName", min_length=1)
    sku: str = Field(..., min_length=1)
    quantity: int
    price: float
    category: Optional[str] = None
    supplier: Optional[str] = None
    location: Optional[str] = None


class ItemUpdate(BaseModel):
    """Fields accepted when updating an item. All fields are optional."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)

    product_name: Optional[str] = Field(default=None, alias="productName", min_length=1)
    sku: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = None
    price: Optional[float] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    location: Optional[str] = None

    @field_validator("product_name", "sku", "quantity", "price")
    @classmethod
    def reject_null(cls, value):
        """Required fields may be left out of an update but not cleared."""
        if value is None:
            raise ValueError("field cannot be null")
        return value
