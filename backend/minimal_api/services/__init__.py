"""
minimal_api.services

Pacote "services" : lógica de aplicação independente dos endpoints HTTP.

- identity   : contas, política de senha, sign-in com lockout, claims e papéis.
- tokens     : emissão do JWT + resposta de autenticação.
- validation : regras de campo por DTO (mapa campo -> mensagens).

Princípio :
- minimal_api.api = transporte HTTP (rotas, dependências, serialização)
- minimal_api.services = orquestração reutilizável e testável
"""
