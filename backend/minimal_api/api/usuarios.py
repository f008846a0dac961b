from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from minimal_api.api.deps import get_identity, get_token_service
from minimal_api.core.errors import AppHTTPException, validation_problem
from minimal_api.core.tracing import set_tag, traced
from minimal_api.schemas.usuario import IdentityErrorOut, LoginUsuario, RegistroUsuario, UserResponse
from minimal_api.services.identity import IdentityService
from minimal_api.services.tokens import TokenService
from minimal_api.services.validation import validar_login, validar_registro

"""
API Usuário.

Papel (funcional) :
- POST /registro : cria a conta (email já confirmado) e devolve um JWT.
- POST /login : verifica credenciais com lockout e devolve um JWT.

Respostas de erro (400) :
- corpo ausente, mapa de validação por campo, erros do provedor de identidade,
  "Usuário bloqueado", "Usuário ou senha inválidos".
"""

router = APIRouter(tags=["Usuario"])
log = logging.getLogger("minimal_api.usuarios")


@router.post("/registro", response_model=UserResponse, name="RegistroUsuario")
async def registrar_usuario(
    registro: Optional[RegistroUsuario] = Body(None),
    identity: IdentityService = Depends(get_identity),
    tokens: TokenService = Depends(get_token_service),
):
    with traced("usuario.registrar") as span:
        if registro is None:
            raise AppHTTPException(400, "BAD_REQUEST", "O Usuário não foi informado")

        set_tag(span, "usuario.email", registro.email)

        errors = validar_registro(registro)
        if errors:
            set_tag(span, "resultado", "validacao")
            raise validation_problem(errors)

        result = await identity.create_user(registro.email, registro.password, email_confirmado=True)
        if not result.succeeded:
            set_tag(span, "resultado", "rejeitado")
            raise AppHTTPException(
                400,
                "IDENTITY_ERROR",
                "Não foi possível registrar o usuário",
                details=[IdentityErrorOut(code=e.code, description=e.description).model_dump() for e in result.errors],
            )

        set_tag(span, "usuario.id", result.usuario.id)
        set_tag(span, "resultado", "ok")
        return await tokens.build_user_response(result.usuario)


@router.post("/login", response_model=UserResponse, name="LoginUsuario")
async def login_usuario(
    login: Optional[LoginUsuario] = Body(None),
    identity: IdentityService = Depends(get_identity),
    tokens: TokenService = Depends(get_token_service),
):
    with traced("usuario.login") as span:
        if login is None:
            raise AppHTTPException(400, "BAD_REQUEST", "Usuário não informado")

        set_tag(span, "usuario.email", login.email)

        errors = validar_login(login)
        if errors:
            set_tag(span, "resultado", "validacao")
            raise validation_problem(errors)

        result = await identity.password_sign_in(login.email, login.password, lockout_on_failure=True)

        if result.is_locked_out or result.is_not_allowed:
            set_tag(span, "resultado", "bloqueado")
            log.warning("login_blocked", extra={"email": login.email})
            raise AppHTTPException(400, "USER_LOCKED_OUT", "Usuário bloqueado")

        if not result.succeeded:
            set_tag(span, "resultado", "invalido")
            log.info("login_failed", extra={"email": login.email})
            raise AppHTTPException(400, "INVALID_CREDENTIALS", "Usuário ou senha inválidos")

        set_tag(span, "usuario.id", result.usuario.id)
        set_tag(span, "resultado", "ok")
        return await tokens.build_user_response(result.usuario)
