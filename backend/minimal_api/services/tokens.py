from __future__ import annotations

import time
import uuid
from typing import Any, Dict, List, Optional

from minimal_api.core.security import RESERVED_CLAIMS, encode_token
from minimal_api.core.settings import Settings, settings
from minimal_api.models.usuario import Usuario
from minimal_api.schemas.usuario import UserClaim, UserResponse, UserToken
from minimal_api.services.identity import IdentityService

"""
Token Service (emissor de JWT).

Papel (funcional) :
- Monta o JWT de um usuário : claims registrados (sub, email, jti, nbf, iat, exp, iss, aud),
  claims do usuário (tipo -> valor) e papéis ("role").
- Devolve a resposta de autenticação (UserResponse) : token + validade + visão do usuário.

Nota :
- Tipos de claim repetidos viram lista no JWT (ex : {"Permissao": ["a", "b"]}).
"""


def _merge_claim(payload: Dict[str, Any], tipo: str, valor: str) -> None:
    current = payload.get(tipo)
    if current is None:
        payload[tipo] = valor
    elif isinstance(current, list):
        current.append(valor)
    else:
        payload[tipo] = [current, valor]


def build_payload(
    usuario: Usuario,
    claims: List[UserClaim],
    roles: List[str],
    cfg: Settings = settings,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    issued = int(now if now is not None else time.time())
    payload: Dict[str, Any] = {
        "sub": str(usuario.id),
        "email": usuario.email,
        "jti": str(uuid.uuid4()),
        "nbf": issued,
        "iat": issued,
        "exp": issued + cfg.JWT_EXPIRACAO_HORAS * 3600,
        "iss": cfg.JWT_EMISSOR,
        "aud": cfg.JWT_VALIDO_EM,
    }
    for claim in claims:
        # claims registrados e "role" não podem ser sobrescritos por claims do usuário
        if claim.type in RESERVED_CLAIMS:
            continue
        _merge_claim(payload, claim.type, claim.value)
    if roles:
        payload["role"] = roles if len(roles) > 1 else roles[0]
    return payload


def _token_claims(payload: Dict[str, Any]) -> List[UserClaim]:
    out: List[UserClaim] = []
    for key, value in payload.items():
        if key in ("exp", "iss", "aud"):
            continue
        for v in value if isinstance(value, list) else [value]:
            out.append(UserClaim(type=key, value=str(v)))
    return out


class TokenService:
    def __init__(self, identity: IdentityService, cfg: Settings = settings) -> None:
        self.identity = identity
        self.cfg = cfg

    async def build_user_response(self, usuario: Usuario) -> UserResponse:
        user_claims = [UserClaim(type=c.tipo, value=c.valor) for c in await self.identity.get_claims(usuario)]
        roles = await self.identity.get_roles(usuario)

        payload = build_payload(usuario, user_claims, roles, cfg=self.cfg)
        return UserResponse(
            access_token=encode_token(payload),
            expires_in=float(self.cfg.JWT_EXPIRACAO_HORAS * 3600),
            user_token=UserToken(
                id=str(usuario.id),
                email=usuario.email,
                claims=_token_claims(payload),
            ),
        )
