"""SQLAlchemy implementation of UnitOfWork

Wraps the request-scoped AsyncSession shared with the repositories, so a
service commits or rolls back everything the repositories flushed.
"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        # Safe to call with nothing pending
        await self.session.rollback()
