"""
minimal_api.schemas

Pacote dos schemas da API (Pydantic).

Papel (funcional) :
- Define os modelos de entrada/saída usados pela API (request/response).
- Separa claramente :
  - os modelos ORM (minimal_api.models) = persistência
  - os schemas Pydantic (minimal_api.schemas) = contrato HTTP
"""
