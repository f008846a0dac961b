from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

"""
Schemas Usuário (Pydantic).

Papel (funcional) :
- DTOs transitórios de registro e login (nunca persistidos tal qual).
- Resposta de autenticação : token de acesso + validade + visão do usuário (claims).

Notas :
- Como em FornecedorIn, a validação de negócio (email, tamanho da senha, confirmação)
  fica em services.validation.
- confirm_password aceita também "confirmPassword" (clientes legados).
"""


class _Credenciais(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class RegistroUsuario(_Credenciais):
    """Payload de registro (email + senha + confirmação)."""
    confirm_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("confirm_password", "confirmPassword"),
    )


class LoginUsuario(_Credenciais):
    """Payload de login (email + senha)."""
    pass


class UserClaim(BaseModel):
    type: str
    value: str


class UserToken(BaseModel):
    id: str
    email: str
    claims: List[UserClaim]


class UserResponse(BaseModel):
    """Resposta de registro/login."""
    access_token: str
    expires_in: float
    user_token: UserToken


class IdentityErrorOut(BaseModel):
    code: str
    description: str
