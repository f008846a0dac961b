"""
minimal_api.core

Pacote "núcleo" da aplicação : reúne tudo o que é transversal (cross-cutting concerns),
ou seja, o que vale para vários endpoints/serviços e não depende do domínio Fornecedor.

- settings
  Centraliza a configuração (variáveis de ambiente, segredo JWT, política de senha, URLs...).

- errors
  Formato de erro uniforme (code, message, status, request_id, timestamp) e a exceção
  AppHTTPException, além do mapa de erros de validação (campo -> mensagens).

- logging
  Logs JSON (1 linha por evento) enriquecidos com request_id e trace_id.

- request_id
  Identificador de correlação por requisição (X-Request-Id).

- security
  Hash de senha (bcrypt) e JWT (PyJWT) : emissão/validação + Principal.

- tracing
  OpenTelemetry opcional : spans nomeados em volta dos handlers, exportação OTLP.
"""
