from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from minimal_api.core.errors import AppHTTPException
from minimal_api.core.security import Principal, decode_token, principal_from_payload
from minimal_api.db.context import ContextoDb
from minimal_api.db.session import get_db
from minimal_api.services.identity import IdentityService
from minimal_api.services.tokens import TokenService

"""
Dependências da API.

Papel (funcional) :
- Centraliza as dependências reutilizáveis das rotas :
  - ContextoDb (persistência de fornecedores) e IdentityService/TokenService (identidade),
    todos sobre a mesma sessão da requisição ;
  - autenticação Bearer (JWT) -> Principal ;
  - autorização por claim (require_claim) antes de qualquer acesso à base.
"""

log = logging.getLogger("minimal_api.auth")

# auto_error=False : a mensagem/401 padronizados são nossos (e o esquema aparece no OpenAPI)
bearer_scheme = HTTPBearer(auto_error=False, description="Insira o token JWT")

CLAIM_EXCLUIR_FORNECEDOR = "ExcluirFornecedor"


async def get_contexto(db: AsyncSession = Depends(get_db)) -> ContextoDb:
    return ContextoDb(db)


async def get_identity(db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(db)


async def get_token_service(identity: IdentityService = Depends(get_identity)) -> TokenService:
    return TokenService(identity)


async def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AppHTTPException(
            401,
            "UNAUTHORIZED",
            "Token de acesso ausente",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal_from_payload(decode_token(credentials.credentials))


def require_claim(tipo: str, valor: Optional[str] = None) -> Callable:
    """Fábrica de dependência : exige um claim (tipo e, opcionalmente, valor) no token."""

    async def _checker(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.has_claim(tipo, valor):
            log.warning("claim_missing", extra={"user_id": principal.user_id, "claim": tipo})
            raise AppHTTPException(403, "FORBIDDEN", "Acesso negado")
        return principal

    return _checker


# Dependências prontas para uso nas rotas
AuthDep = Depends(get_principal)
ExcluirFornecedorDep = Depends(require_claim(CLAIM_EXCLUIR_FORNECEDOR))
