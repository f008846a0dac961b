from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from minimal_api.models.fornecedor import Fornecedor

"""
DB Context (unidade de trabalho).

Papel (funcional) :
- Envolve uma AsyncSession e expõe uma coleção tipada de fornecedores
  (listar / obter / adicionar / atualizar / remover).
- `salvar()` faz o commit e devolve o "commit count" : número de linhas afetadas
  pelas alterações pendentes (novas + modificadas + removidas + linhas dos UPDATEs diretos).

Notas :
- Os handlers usam o commit count como sinal de sucesso (> 0 ou >= 0 conforme a operação).
- Uma falha de commit levanta exceção (não há retorno negativo) : fica a cargo do handler global (500).
"""


class ColecaoFornecedores:
    """Acesso aos fornecedores dentro de uma sessão."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        # linhas afetadas por UPDATEs diretos ainda não commitados
        self.linhas_afetadas = 0

    async def listar(self) -> List[Fornecedor]:
        rows = await self._session.execute(select(Fornecedor).order_by(Fornecedor.nome, Fornecedor.id))
        return list(rows.scalars().all())

    async def obter(self, fornecedor_id: uuid.UUID) -> Optional[Fornecedor]:
        """Busca por chave primária (objeto rastreado pela sessão)."""
        return await self._session.get(Fornecedor, fornecedor_id)

    async def obter_sem_rastreio(self, fornecedor_id: uuid.UUID) -> Optional[Fornecedor]:
        """Busca por id e desanexa o objeto : alterações nele não são persistidas."""
        result = await self._session.execute(select(Fornecedor).where(Fornecedor.id == fornecedor_id))
        fornecedor = result.scalars().first()
        if fornecedor is not None:
            self._session.expunge(fornecedor)
        return fornecedor

    def adicionar(self, fornecedor: Fornecedor) -> None:
        self._session.add(fornecedor)

    async def atualizar(self, fornecedor: Fornecedor) -> int:
        """Substituição integral por UPDATE ... WHERE id : nunca recria uma linha removida entretanto."""
        stmt = (
            update(Fornecedor)
            .where(Fornecedor.id == fornecedor.id)
            .values(nome=fornecedor.nome, documento=fornecedor.documento, ativo=fornecedor.ativo)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self._session.execute(stmt)
        self.linhas_afetadas += result.rowcount
        return result.rowcount

    async def remover(self, fornecedor: Fornecedor) -> None:
        await self._session.delete(fornecedor)


class ContextoDb:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.fornecedores = ColecaoFornecedores(session)

    def alteracoes_pendentes(self) -> int:
        s = self.session
        return len(s.new) + len(s.dirty) + len(s.deleted) + self.fornecedores.linhas_afetadas

    async def salvar(self) -> int:
        """Commit ; devolve o número de linhas afetadas."""
        count = self.alteracoes_pendentes()
        await self.session.commit()
        self.fornecedores.linhas_afetadas = 0
        return count
