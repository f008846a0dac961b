from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from minimal_api.core.security import hash_password, verify_password
from minimal_api.core.settings import Settings, settings
from minimal_api.models.usuario import Usuario, UsuarioClaim, UsuarioPapel

"""
Identity Service (provedor de identidade).

Papel (funcional) :
- Cria contas (validação do login + política de senha + unicidade do email).
- Verifica credenciais com política de lockout :
  - N falhas consecutivas -> conta bloqueada por X minutos,
  - sucesso -> zera o contador de falhas.
- Lê/atribui claims e papéis (embutidos depois no JWT pelo TokenService).

Ordem do sign-in (password_sign_in) :
1) usuário inexistente -> falha
2) pré-checagem : email não confirmado (se exigido) -> not allowed ; bloqueado -> locked out
3) senha correta -> sucesso (zera falhas) ; senha errada -> conta falha (+ lockout eventual)

Notas :
- bcrypt é CPU-bound : hash/verificação rodam num thread pool para não bloquear o event loop.
- Os códigos de erro seguem os nomes clássicos (DuplicateUserName, PasswordTooShort...).
"""

log = logging.getLogger("minimal_api.identity")

_USERNAME_CHARS = frozenset(string.ascii_letters + string.digits + "-._@+")


@dataclass(frozen=True)
class IdentityError:
    code: str
    description: str


@dataclass(frozen=True)
class IdentityResult:
    succeeded: bool
    errors: List[IdentityError] = field(default_factory=list)
    usuario: Optional[Usuario] = None

    @classmethod
    def success(cls, usuario: Optional[Usuario] = None) -> "IdentityResult":
        return cls(succeeded=True, usuario=usuario)

    @classmethod
    def failed(cls, errors: List[IdentityError]) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))


@dataclass(frozen=True)
class SignInResult:
    succeeded: bool = False
    is_locked_out: bool = False
    is_not_allowed: bool = False
    usuario: Optional[Usuario] = None


@dataclass(frozen=True)
class IdentityOptions:
    senha_tamanho_minimo: int = 6
    senha_exige_digito: bool = True
    senha_exige_minuscula: bool = True
    senha_exige_maiuscula: bool = True
    senha_exige_nao_alfanumerico: bool = True
    lockout_max_tentativas: int = 5
    lockout_minutos: int = 5
    exige_email_confirmado: bool = False

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "IdentityOptions":
        return cls(
            senha_tamanho_minimo=s.SENHA_TAMANHO_MINIMO,
            senha_exige_digito=s.SENHA_EXIGE_DIGITO,
            senha_exige_minuscula=s.SENHA_EXIGE_MINUSCULA,
            senha_exige_maiuscula=s.SENHA_EXIGE_MAIUSCULA,
            senha_exige_nao_alfanumerico=s.SENHA_EXIGE_NAO_ALFANUMERICO,
            lockout_max_tentativas=s.LOCKOUT_MAX_TENTATIVAS,
            lockout_minutos=s.LOCKOUT_MINUTOS,
            exige_email_confirmado=s.EXIGE_EMAIL_CONFIRMADO,
        )


def normalizar_email(email: str) -> str:
    return email.strip().upper()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    # SQLite devolve datetimes "naive" : considerar UTC
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _duplicate(email: str) -> IdentityError:
    return IdentityError("DuplicateUserName", f"O login '{email}' já está sendo utilizado.")


class IdentityService:
    def __init__(self, session: AsyncSession, options: Optional[IdentityOptions] = None) -> None:
        self.session = session
        self.options = options or IdentityOptions.from_settings()

    # --- Consulta ---

    async def find_by_email(self, email: str) -> Optional[Usuario]:
        stmt = select(Usuario).where(Usuario.email_normalizado == normalizar_email(email))
        return (await self.session.execute(stmt)).scalars().first()

    async def get_claims(self, usuario: Usuario) -> List[UsuarioClaim]:
        stmt = select(UsuarioClaim).where(UsuarioClaim.usuario_id == usuario.id).order_by(UsuarioClaim.id)
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_roles(self, usuario: Usuario) -> List[str]:
        stmt = select(UsuarioPapel.nome).where(UsuarioPapel.usuario_id == usuario.id).order_by(UsuarioPapel.nome)
        return list((await self.session.execute(stmt)).scalars().all())

    def is_locked_out(self, usuario: Usuario) -> bool:
        if not usuario.lockout_habilitado:
            return False
        end = _aware(usuario.bloqueado_ate)
        return end is not None and end > _utcnow()

    # --- Validação ---

    def validate_user_name(self, email: str) -> List[IdentityError]:
        if not email or any(ch not in _USERNAME_CHARS for ch in email):
            return [IdentityError("InvalidUserName", f"O login '{email}' é inválido, pode conter apenas letras ou dígitos.")]
        return []

    def validate_password(self, password: str) -> List[IdentityError]:
        opts = self.options
        errors: List[IdentityError] = []
        if len(password or "") < opts.senha_tamanho_minimo:
            errors.append(
                IdentityError(
                    "PasswordTooShort",
                    f"As senhas devem conter ao menos {opts.senha_tamanho_minimo} caracteres.",
                )
            )
        password = password or ""
        if opts.senha_exige_nao_alfanumerico and all(ch in string.ascii_letters + string.digits for ch in password):
            errors.append(
                IdentityError(
                    "PasswordRequiresNonAlphanumeric",
                    "As senhas devem conter ao menos um caracter não alfanumérico.",
                )
            )
        if opts.senha_exige_digito and not any(ch in string.digits for ch in password):
            errors.append(IdentityError("PasswordRequiresDigit", "As senhas devem conter ao menos um digito ('0'-'9')."))
        if opts.senha_exige_minuscula and not any(ch in string.ascii_lowercase for ch in password):
            errors.append(
                IdentityError("PasswordRequiresLower", "As senhas devem conter ao menos um caracter em caixa baixa ('a'-'z').")
            )
        if opts.senha_exige_maiuscula and not any(ch in string.ascii_uppercase for ch in password):
            errors.append(
                IdentityError("PasswordRequiresUpper", "As senhas devem conter ao menos um caracter em caixa alta ('A'-'Z').")
            )
        return errors

    # --- Escrita ---

    async def create_user(self, email: str, password: str, email_confirmado: bool = True) -> IdentityResult:
        errors = self.validate_user_name(email)
        if not errors and await self.find_by_email(email) is not None:
            errors.append(_duplicate(email))
        errors.extend(self.validate_password(password))
        if errors:
            log.info("user_create_rejected", extra={"email": email})
            return IdentityResult.failed(errors)

        usuario = Usuario(
            email=email,
            email_normalizado=normalizar_email(email),
            email_confirmado=email_confirmado,
            senha_hash=await run_in_threadpool(hash_password, password),
            lockout_habilitado=True,
            tentativas_falhas=0,
            claims=[],
            papeis=[],
        )
        self.session.add(usuario)
        try:
            await self.session.commit()
        except IntegrityError:
            # registro concorrente com o mesmo email
            await self.session.rollback()
            return IdentityResult.failed([_duplicate(email)])

        log.info("user_created", extra={"user_id": str(usuario.id), "email": email})
        return IdentityResult.success(usuario)

    async def add_claim(self, usuario: Usuario, tipo: str, valor: str) -> IdentityResult:
        for existing in await self.get_claims(usuario):
            if existing.tipo == tipo and existing.valor == valor:
                return IdentityResult.success(usuario)
        self.session.add(UsuarioClaim(usuario_id=usuario.id, tipo=tipo, valor=valor))
        await self.session.commit()
        log.info("claim_added", extra={"user_id": str(usuario.id), "claim": tipo})
        return IdentityResult.success(usuario)

    async def add_to_role(self, usuario: Usuario, papel: str) -> IdentityResult:
        if papel in await self.get_roles(usuario):
            return IdentityResult.failed([IdentityError("UserAlreadyInRole", f"Usuário já possui o papel '{papel}'.")])
        self.session.add(UsuarioPapel(usuario_id=usuario.id, nome=papel))
        await self.session.commit()
        return IdentityResult.success(usuario)

    async def remove_claim(self, usuario: Usuario, tipo: str, valor: Optional[str] = None) -> int:
        """Remove os claims do tipo (e valor, se informado) ; devolve quantos foram removidos."""
        removidos = [c for c in await self.get_claims(usuario) if c.tipo == tipo and (valor is None or c.valor == valor)]
        for claim in removidos:
            await self.session.delete(claim)
        await self.session.commit()
        if removidos:
            log.info("claim_removed", extra={"user_id": str(usuario.id), "claim": tipo})
        return len(removidos)

    async def remove_from_role(self, usuario: Usuario, papel: str) -> IdentityResult:
        stmt = select(UsuarioPapel).where(UsuarioPapel.usuario_id == usuario.id, UsuarioPapel.nome == papel)
        existente = (await self.session.execute(stmt)).scalars().first()
        if existente is None:
            return IdentityResult.failed([IdentityError("UserNotInRole", f"Usuário não possui o papel '{papel}'.")])
        await self.session.delete(existente)
        await self.session.commit()
        return IdentityResult.success(usuario)

    # --- Sign-in ---

    async def _access_failed(self, usuario: Usuario) -> None:
        usuario.tentativas_falhas += 1
        if usuario.tentativas_falhas >= self.options.lockout_max_tentativas:
            usuario.bloqueado_ate = _utcnow() + timedelta(minutes=self.options.lockout_minutos)
            usuario.tentativas_falhas = 0
            log.warning("user_locked_out", extra={"user_id": str(usuario.id), "email": usuario.email})
        await self.session.commit()

    async def password_sign_in(self, email: str, password: str, lockout_on_failure: bool = True) -> SignInResult:
        usuario = await self.find_by_email(email)
        if usuario is None:
            return SignInResult()

        if self.options.exige_email_confirmado and not usuario.email_confirmado:
            return SignInResult(is_not_allowed=True, usuario=usuario)
        if self.is_locked_out(usuario):
            return SignInResult(is_locked_out=True, usuario=usuario)

        if await run_in_threadpool(verify_password, password, usuario.senha_hash):
            if usuario.tentativas_falhas:
                usuario.tentativas_falhas = 0
                await self.session.commit()
            return SignInResult(succeeded=True, usuario=usuario)

        if lockout_on_failure and usuario.lockout_habilitado:
            await self._access_failed(usuario)
            if self.is_locked_out(usuario):
                return SignInResult(is_locked_out=True, usuario=usuario)

        return SignInResult(usuario=usuario)
