"""Criação das tabelas de fornecedores e de identidade.

Papel (funcional) :
- fornecedores : única entidade de negócio (nome varchar(200), documento varchar(14)).
- usuarios / usuario_claims / usuario_papeis : contas, claims (ex : ExcluirFornecedor) e papéis.

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Identificadores Alembic
revision: str = "4f2a9c1d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Aplicação das mudanças de schema."""
    op.create_table(
        "fornecedores",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("nome", sa.String(length=200), nullable=False),
        sa.Column("documento", sa.String(length=14), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "usuarios",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("email_normalizado", sa.String(length=256), nullable=False),
        sa.Column("email_confirmado", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("senha_hash", sa.String(length=100), nullable=False),
        sa.Column("lockout_habilitado", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("tentativas_falhas", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bloqueado_ate", sa.DateTime(timezone=True), nullable=True),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_usuarios_email_normalizado", "usuarios", ["email_normalizado"], unique=True)

    op.create_table(
        "usuario_claims",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("usuario_id", sa.Uuid(), nullable=False),
        sa.Column("tipo", sa.String(length=256), nullable=False),
        sa.Column("valor", sa.String(length=256), nullable=False),
        sa.ForeignKeyConstraint(["usuario_id"], ["usuarios.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_usuario_claims_usuario_id", "usuario_claims", ["usuario_id"], unique=False)

    op.create_table(
        "usuario_papeis",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("usuario_id", sa.Uuid(), nullable=False),
        sa.Column("nome", sa.String(length=256), nullable=False),
        sa.ForeignKeyConstraint(["usuario_id"], ["usuarios.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("usuario_id", "nome", name="uq_usuario_papeis_usuario_nome"),
    )
    op.create_index("ix_usuario_papeis_usuario_id", "usuario_papeis", ["usuario_id"], unique=False)


def downgrade() -> None:
    """Reversão das mudanças de schema."""
    op.drop_index("ix_usuario_papeis_usuario_id", table_name="usuario_papeis")
    op.drop_table("usuario_papeis")
    op.drop_index("ix_usuario_claims_usuario_id", table_name="usuario_claims")
    op.drop_table("usuario_claims")
    op.drop_index("ix_usuarios_email_normalizado", table_name="usuarios")
    op.drop_table("usuarios")
    op.drop_table("fornecedores")
