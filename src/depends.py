from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.cache_manager import CacheSettings, InMemoryCacheManager
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.cache_manager import CacheManager
from src.app.use_cases.transactions import TransactionService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Process-wide: shared by every request
transaction_cache_manager = InMemoryCacheManager(CacheSettings.from_config(ApplicationConfig))


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_cache_manager() -> CacheManager:
    return transaction_cache_manager


def get_transaction_service(
    session: AsyncSession = Depends(get_session),
    cache_manager: CacheManager = Depends(get_cache_manager),
) -> TransactionService:
    return TransactionService(
        uow=SqlAlchemyUnitOfWork(session),
        transaction_repo=SqlAlchemyTransactionRepository(session),
        cache_manager=cache_manager,
        max_page_size=ApplicationConfig.PAGE_SIZE_MAX,
    )
