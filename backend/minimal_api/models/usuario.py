from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minimal_api.db.base import Base

"""
Models de identidade (Usuario, UsuarioClaim, UsuarioPapel).

Papel (funcional) :
- Usuario : conta de acesso (email = login), hash bcrypt da senha, confirmação de email
  e estado de lockout (tentativas falhas + bloqueado_ate).
- UsuarioClaim : claims atribuídos ao usuário (ex : tipo "ExcluirFornecedor"), embutidos no JWT.
- UsuarioPapel : papéis (roles) do usuário, embutidos no JWT como "role".

Relações :
- Usuario 1..N UsuarioClaim / UsuarioPapel (remoção em cascata).
"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Usuario(Base):
    __tablename__ = "usuarios"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Email = nome de usuário ; a busca é feita pela forma normalizada (MAIÚSCULAS)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    email_normalizado: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    email_confirmado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    senha_hash: Mapped[str] = mapped_column(String(100), nullable=False)

    # Lockout
    lockout_habilitado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    tentativas_falhas: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bloqueado_ate: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    criado_em: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    claims = relationship("UsuarioClaim", back_populates="usuario", cascade="all, delete-orphan", lazy="selectin")
    papeis = relationship("UsuarioPapel", back_populates="usuario", cascade="all, delete-orphan", lazy="selectin")


class UsuarioClaim(Base):
    __tablename__ = "usuario_claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    usuario_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tipo: Mapped[str] = mapped_column(String(256), nullable=False)
    valor: Mapped[str] = mapped_column(String(256), nullable=False)

    usuario = relationship("Usuario", back_populates="claims")


class UsuarioPapel(Base):
    __tablename__ = "usuario_papeis"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    usuario_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    nome: Mapped[str] = mapped_column(String(256), nullable=False)

    usuario = relationship("Usuario", back_populates="papeis")

    __table_args__ = (UniqueConstraint("usuario_id", "nome", name="uq_usuario_papeis_usuario_nome"),)
