from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from minimal_api.core.settings import settings
from minimal_api.db.session import get_db

"""
API Health.

Papel (funcional) :
- Endpoint simples para verificar que a API responde e que a base está acessível.
"""

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        db_ok = False

    return {
        "status": "ok" if db_ok else "degraded",
        "env": settings.ENV,
        "db": {"ok": db_ok},
        "tracing": settings.TRACING_ENABLED,
        "ts": datetime.now(timezone.utc).isoformat(),
    }
