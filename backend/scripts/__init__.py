"""
scripts

Pacote utilitário para scripts de manutenção / dados.

Papel (funcional) :
- Scripts executáveis (CLI) ligados ao projeto :
  - conceder_claim : concede/revoga claims (ex : ExcluirFornecedor) e papéis
  - seed_fornecedores : gera fornecedores de demonstração

Nota :
- Os scripts não contêm lógica de negócio "central" : usam os modelos e helpers de `minimal_api/`.
"""
