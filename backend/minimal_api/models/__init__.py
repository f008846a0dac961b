"""
minimal_api.models

Pacote ORM (SQLAlchemy) : definição das entidades persistidas.

Papel (funcional) :
- Centraliza os modelos (Fornecedor + tabelas de identidade).
- Importar este pacote registra todas as tabelas em Base.metadata (Alembic, testes).
"""

from minimal_api.models.fornecedor import Fornecedor
from minimal_api.models.usuario import Usuario, UsuarioClaim, UsuarioPapel

__all__ = ["Fornecedor", "Usuario", "UsuarioClaim", "UsuarioPapel"]
