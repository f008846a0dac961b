"""
Configurações de teste compartilhadas.

- SQLite em memória (aiosqlite + StaticPool) no lugar do Postgres.
- `get_db` substituída via app.dependency_overrides.
- bcrypt com custo mínimo para os testes rodarem rápido.
"""

import os

os.environ["ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "segredo-de-teste-com-pelo-menos-32-bytes"
os.environ["TRACING_ENABLED"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import minimal_api.models  # noqa: F401
from minimal_api.db.base import Base
from minimal_api.db.session import get_db
from minimal_api.core.tracing import configure_tracing
from minimal_api.main import app
from minimal_api.services.identity import IdentityService
from tests.helpers import bearer, login, registrar


@pytest.fixture(scope="session")
def span_exporter():
    """Provider global com exportador em memória (instalado uma vez por processo)."""
    exporter = InMemorySpanExporter()
    configure_tracing(service_name="minimal-api-test", exporter=exporter)
    return exporter


@pytest.fixture
def spans(span_exporter):
    span_exporter.clear()
    yield span_exporter
    span_exporter.clear()


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_headers(client):
    """Usuário comum (sem claims) autenticado."""
    resp = await registrar(client, "usuario@teste.com")
    assert resp.status_code == 200
    return bearer(resp.json()["access_token"])


@pytest_asyncio.fixture
async def admin_headers(client, session_factory):
    """Usuário com o claim ExcluirFornecedor (token emitido após a concessão)."""
    resp = await registrar(client, "admin@teste.com")
    assert resp.status_code == 200

    async with session_factory() as session:
        identity = IdentityService(session)
        usuario = await identity.find_by_email("admin@teste.com")
        await identity.add_claim(usuario, "ExcluirFornecedor", "ExcluirFornecedor")

    resp = await login(client, "admin@teste.com")
    assert resp.status_code == 200
    return bearer(resp.json()["access_token"])
