"""
minimal_api

Pacote raiz do backend da API de Fornecedores.

Papel (funcional) :
- Contém todo o código da aplicação (API, identidade, acesso à base, schemas).
- Ponto de ancoragem dos imports : `from minimal_api...`

Organização :
- minimal_api.api      : rotas FastAPI (contratos HTTP, dependências, autorização)
- minimal_api.core     : peças transversais (settings, errors, logs, request_id, security, tracing)
- minimal_api.db       : base SQLAlchemy + sessão async + contexto de persistência
- minimal_api.models   : modelos ORM (fornecedores + identidade)
- minimal_api.schemas  : schemas Pydantic (entradas/saídas da API)
- minimal_api.services : identidade, emissão de token, validação
"""

__version__ = "1.0.0"
