from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

"""
Schemas Fornecedor (Pydantic).

Papel (funcional) :
- Define o contrato HTTP do fornecedor (entrada e saída).
- A entrada é permissiva nos tipos (campos opcionais) : as regras de negócio
  (obrigatório, tamanho) ficam em services.validation, que devolve o mapa campo -> mensagens.

Notas :
- extra="forbid" : recusa campos desconhecidos (contrato estrito).
- `id` é aceito mas ignorado : vem da rota (PUT) ou é gerado (POST).
"""


class FornecedorIn(BaseModel):
    """Payload de criação/substituição de fornecedor."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    nome: Optional[str] = None
    documento: Optional[str] = None
    ativo: bool = False

    @field_validator("nome", "documento", mode="before")
    @classmethod
    def _strip_strings(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class FornecedorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    nome: str
    documento: str
    ativo: bool
