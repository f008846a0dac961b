from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from minimal_api.core.settings import settings

"""
DB Session.

Papel (funcional) :
- Inicializa o engine SQLAlchemy em modo async (runtime FastAPI).
- Fornece uma factory de sessões AsyncSession (AsyncSessionLocal).
- Expõe `get_db()` como dependência FastAPI (Depends(get_db)) : uma sessão por requisição.

Notas :
- expire_on_commit=False : permite reutilizar os objetos após o commit sem recarga automática.
- echo=False : desativa o log SQL bruto (preferimos os logs de aplicação em JSON).
- Nos testes, `get_db` é substituída via app.dependency_overrides (SQLite em memória).
"""

engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    """Dependência FastAPI : fornece uma sessão DB e garante o seu fechamento."""
    async with AsyncSessionLocal() as session:
        yield session
