"""
Repository base

Async, session-scoped access shared by the catalog repositories. A
repository never commits; the caller's Database.session() block does.
"""
from typing import TypeVar, Generic, Optional, Type

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.base import Base


ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Lookups and inserts for one mapped model.

    Example:
        class AppRepository(BaseRepository[AIApp]):
            model = AIApp

        async with database.session() as session:
            app = await AppRepository(session).get(42)
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, entity_id: int) -> Optional[ModelT]:
        """Row by primary key, or None."""
        return await self.session.get(self.model, entity_id)

    async def count(self) -> int:
        """Total rows in the model's table, unfiltered."""
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def add(self, entity: ModelT) -> ModelT:
        """Stage a new row and flush so its id is assigned."""
        self.session.add(entity)
        await self.session.flush()
        return entity
