"""
Domain models for the Storefront product listing.

Defines the product record aligned with `storefront/sql/init.sql`. The model is
used for validation, serialization and type hints across repositories, the web
layer and the CLI.
"""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class Product(BaseModel):
    """
    Representation of a single row in the `products` table.

    Instances are frozen: the identifier is assigned by the database and never
    changes afterwards. Price is carried exactly as stored (no rounding).
    """

    id: int = Field(..., description="Primary key (BIGSERIAL).")
    name: str = Field(..., description="Display name of the product.")
    price: Decimal = Field(..., description="Unit price as stored (NUMERIC).")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }


__all__ = ["Product"]
