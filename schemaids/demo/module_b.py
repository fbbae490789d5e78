"""Sample module B: same-named nested response with a value-like enum field."""

from __future__ import annotations

import enum
import uuid

from pydantic import BaseModel


class Availability(str, enum.Enum):
    IN_STOCK = "in_stock"
    BACKORDER = "backorder"


class ModuleB:
    class Response(BaseModel):
        id: uuid.UUID
        description: str
        price: float
        availability: Availability = Availability.IN_STOCK

    @staticmethod
    async def execute(id: int) -> ModuleB.Response:
        return ModuleB.Response(id=uuid.uuid4(), description="Thing from Module B", price=200.0)
