"""Sample module C: a POST operation with nested request and response models."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class ModuleC:
    class Request(BaseModel):
        description: str
        price: float

    class Response(BaseModel):
        id: uuid.UUID
        description: str
        price: float

    @staticmethod
    async def execute(request: ModuleC.Request) -> ModuleC.Response:
        return ModuleC.Response(
            id=uuid.uuid4(), description=request.description, price=request.price
        )
