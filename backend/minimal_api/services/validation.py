from __future__ import annotations

from typing import Optional

from email_validator import EmailNotValidError, validate_email

from minimal_api.core.errors import ValidationErrors
from minimal_api.models.fornecedor import DOCUMENTO_MAX, NOME_MAX
from minimal_api.schemas.fornecedor import FornecedorIn
from minimal_api.schemas.usuario import LoginUsuario, RegistroUsuario

"""
Validation Service.

Papel (funcional) :
- Uma função explícita por DTO, devolvendo o mapa campo -> [mensagens].
- Mapa vazio = payload válido.
- As chaves são os nomes dos campos JSON ; as mensagens usam o nome de exibição.
"""

SENHA_MIN = 6
SENHA_MAX = 100


def _add(errors: ValidationErrors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _required(errors: ValidationErrors, field: str, label: str, value: Optional[str]) -> bool:
    if value is None or not value.strip():
        _add(errors, field, f"O campo {label} é obrigatório.")
        return False
    return True


def _max_length(errors: ValidationErrors, field: str, label: str, value: str, maximum: int) -> None:
    if len(value) > maximum:
        _add(errors, field, f"O campo {label} precisa ter no máximo {maximum} caracteres.")


def is_email(value: str) -> bool:
    # Só sintaxe : sem consulta DNS
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _email(errors: ValidationErrors, value: Optional[str]) -> None:
    if _required(errors, "email", "Email", value) and not is_email(value):
        _add(errors, "email", "O campo Email está em formato inválido.")


def _senha(errors: ValidationErrors, value: Optional[str]) -> None:
    if _required(errors, "password", "Senha", value) and not (SENHA_MIN <= len(value) <= SENHA_MAX):
        _add(errors, "password", f"O campo Senha precisa ter entre {SENHA_MIN} e {SENHA_MAX} caracteres.")


def validar_fornecedor(payload: FornecedorIn) -> ValidationErrors:
    errors: ValidationErrors = {}
    if _required(errors, "nome", "Nome", payload.nome):
        _max_length(errors, "nome", "Nome", payload.nome, NOME_MAX)
    if _required(errors, "documento", "Documento", payload.documento):
        _max_length(errors, "documento", "Documento", payload.documento, DOCUMENTO_MAX)
    return errors


def validar_registro(payload: RegistroUsuario) -> ValidationErrors:
    errors: ValidationErrors = {}
    _email(errors, payload.email)
    _senha(errors, payload.password)
    if payload.confirm_password != payload.password:
        _add(errors, "confirm_password", "As senhas não conferem.")
    return errors


def validar_login(payload: LoginUsuario) -> ValidationErrors:
    errors: ValidationErrors = {}
    _email(errors, payload.email)
    _senha(errors, payload.password)
    return errors
