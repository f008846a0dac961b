"""
minimal_api.db

Pacote de banco de dados : conexão, sessão e contexto de persistência.

- session : engine async + sessões AsyncSession para o FastAPI (Depends(get_db)).
- context : ContextoDb, a "unidade de trabalho" usada pelos handlers (coleção de fornecedores + salvar()).
- migrações : Alembic (modo sync) via DATABASE_URL_SYNC.
"""
