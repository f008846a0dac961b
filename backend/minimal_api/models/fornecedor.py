from __future__ import annotations

import uuid

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from minimal_api.db.base import Base

"""
Model Fornecedor.

Papel (funcional) :
- Representa um fornecedor (única entidade de negócio da API).
- Linha criada por POST, substituída integralmente por PUT, removida por DELETE.

Campos :
- nome : razão social / nome fantasia (obrigatório, até 200).
- documento : CPF/CNPJ só com dígitos (obrigatório, até 14).
- ativo : indicador de fornecedor ativo para negociação.
"""

NOME_MAX = 200
DOCUMENTO_MAX = 14


class Fornecedor(Base):
    __tablename__ = "fornecedores"

    # Identificador técnico (UUID gerado na aplicação)
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    nome: Mapped[str] = mapped_column(String(NOME_MAX), nullable=False)
    documento: Mapped[str] = mapped_column(String(DOCUMENTO_MAX), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
