"""Sample module A: a GET operation returning a nested response model."""

from __future__ import annotations

from pydantic import BaseModel


class ModuleA:
    class Response(BaseModel):
        id: int
        description: str
        price: float

    @staticmethod
    async def execute(id: int) -> ModuleA.Response:
        return ModuleA.Response(id=1, description="Thing from Module A", price=100.0)
