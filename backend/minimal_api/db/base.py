from sqlalchemy.orm import DeclarativeBase

"""
DB Base.

Papel (funcional) :
- Define a classe Base SQLAlchemy comum a todos os modelos ORM.
- Serve de ponto de ancoragem para a declaração das tabelas (models/*),
  a criação de schema (migrações / metadata) e a introspecção ORM.

Nota :
- Todos os modelos devem herdar de Base para serem registrados na metadata.
"""


class Base(DeclarativeBase):
    """Classe raiz ORM (SQLAlchemy Declarative)."""
    pass
