from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import bcrypt
import jwt

from minimal_api.core.errors import AppHTTPException
from minimal_api.core.settings import settings

"""
Core Security (JWT + senhas).

Papel (funcional) :
- Hash/verificação de senhas com bcrypt.
- Codificação/decodificação de JWT (PyJWT, HS256) com validação de emissor e audiência.
- Conversão do payload de um token em `Principal` (id, email, claims, papéis).

Convenção dos claims no token :
- claims registrados : sub, email, jti, nbf, iat, exp, iss, aud
- papéis : "role" (string ou lista)
- claims do usuário : chave = tipo do claim, valor = string ou lista (tipo repetido)
"""

log = logging.getLogger("minimal_api.security")

RESERVED_CLAIMS = frozenset({"sub", "email", "jti", "nbf", "iat", "exp", "iss", "aud", "role"})

# bcrypt só considera os 72 primeiros bytes
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # hash corrompido/inválido em base
        log.warning("invalid password hash")
        return False


def encode_token(payload: Dict[str, Any]) -> str:
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decodifica e valida (assinatura, exp, nbf, iss, aud). Levanta 401 se inválido."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_VALIDO_EM,
            issuer=settings.JWT_EMISSOR,
        )
    except jwt.ExpiredSignatureError:
        log.debug("token expired")
        raise AppHTTPException(401, "UNAUTHORIZED", "Token expirado", headers={"WWW-Authenticate": "Bearer"})
    except jwt.InvalidTokenError as exc:
        log.debug("invalid token: %s", exc)
        raise AppHTTPException(401, "UNAUTHORIZED", "Token inválido", headers={"WWW-Authenticate": "Bearer"})


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


@dataclass(frozen=True)
class Principal:
    """Usuário autenticado, reconstruído a partir do token."""

    user_id: str
    email: Optional[str]
    claims: Dict[str, List[str]] = field(default_factory=dict)
    roles: List[str] = field(default_factory=list)

    def has_claim(self, tipo: str, valor: Optional[str] = None) -> bool:
        values = self.claims.get(tipo)
        if values is None:
            return False
        return valor is None or valor in values


def principal_from_payload(payload: Dict[str, Any]) -> Principal:
    claims = {k: _as_list(v) for k, v in payload.items() if k not in RESERVED_CLAIMS}
    return Principal(
        user_id=str(payload.get("sub", "")),
        email=payload.get("email"),
        claims=claims,
        roles=_as_list(payload.get("role")),
    )
