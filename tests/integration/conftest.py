import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import get_session, get_cache_manager
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.cache_manager import InMemoryCacheManager
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.transactions import TransactionService


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create test database engine on a private in-memory SQLite database"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def cache_manager():
    """Fresh cache per test so no state leaks between tests"""
    return InMemoryCacheManager()


@pytest_asyncio.fixture
async def transaction_repo(db_session):
    return SqlAlchemyTransactionRepository(db_session)


@pytest_asyncio.fixture
async def service(db_session, transaction_repo, cache_manager):
    return TransactionService(
        uow=SqlAlchemyUnitOfWork(db_session),
        transaction_repo=transaction_repo,
        cache_manager=cache_manager,
    )


@pytest_asyncio.fixture
async def app(db_session, cache_manager):
    """Create the application with database session and cache overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_cache_manager] = lambda: cache_manager
    return app


@pytest_asyncio.fixture
async def client(app):
    """Create test client against the app"""
    # Unhandled errors are rendered by the app; do not re-raise them in tests
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
