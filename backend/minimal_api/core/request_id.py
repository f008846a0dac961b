from __future__ import annotations

import uuid
from contextvars import ContextVar

"""
Core Request ID.

Papel (funcional) :
- Gerencia um identificador de requisição (request_id) guardado num ContextVar.
- Permite correlacionar logs, erros e spans de uma mesma requisição.
- O request_id pode ser :
  - fornecido por um header de entrada (X-Request-Id),
  - ou gerado automaticamente se ausente.
"""

REQUEST_ID_HEADER = "X-Request-Id"

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str | None) -> None:
    _request_id.set(rid)


def get_request_id() -> str | None:
    return _request_id.get()


def ensure_request_id(incoming: str | None = None) -> str:
    """
    Garante um request_id para o contexto corrente.

    - Se um request_id de entrada for fornecido (e não for absurdamente longo), é reutilizado.
    - Senão, gera-se um UUID.
    """
    rid = (incoming or "").strip()
    if not rid or len(rid) > 128:
        rid = str(uuid.uuid4())
    set_request_id(rid)
    return rid
