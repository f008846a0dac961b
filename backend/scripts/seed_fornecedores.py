# backend/scripts/seed_fornecedores.py
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from uuid import uuid4

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import sessionmaker

# Permite rodar o script a partir de backend/ sem problema de import
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from minimal_api.core.settings import settings
from minimal_api.models.fornecedor import Fornecedor


# ---- Dados de demonstração ----
PREFIXOS = ["Distribuidora", "Comercial", "Indústria", "Atacadão", "Transportes", "Papelaria", "Alimentos"]
NOMES = ["Alvorada", "Boa Vista", "Horizonte", "Paulista", "Serra Azul", "Três Rios", "Vale Verde", "Acme"]
SUFIXOS = ["Ltda", "S.A.", "ME", "EIRELI"]


def documento_aleatorio(pessoa_juridica: bool) -> str:
    # Só dígitos : 14 (CNPJ) ou 11 (CPF) ; sem dígito verificador real (demo)
    size = 14 if pessoa_juridica else 11
    return "".join(str(random.randint(0, 9)) for _ in range(size))


def seed(reset: bool, n: int) -> None:
    engine = create_engine(settings.DATABASE_URL_SYNC, future=True)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    with SessionLocal() as db:
        if reset:
            db.execute(delete(Fornecedor))
            db.commit()
            print("✅ Reset feito (fornecedores removidos).")

        for _ in range(n):
            pj = random.random() < 0.8
            nome = f"{random.choice(PREFIXOS)} {random.choice(NOMES)}"
            if pj:
                nome = f"{nome} {random.choice(SUFIXOS)}"
            db.add(
                Fornecedor(
                    id=uuid4(),
                    nome=nome,
                    documento=documento_aleatorio(pj),
                    ativo=random.random() < 0.75,
                )
            )

        db.commit()

        total = db.execute(select(func.count()).select_from(Fornecedor)).scalar_one()
        print("✅ Seed concluído.")
        print(f"   - Fornecedores adicionados: {n}")
        print(f"   - Total na base: {total}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="Remove os fornecedores antes do seed")
    parser.add_argument("--n", type=int, default=25, help="Quantidade de fornecedores a gerar")
    parser.add_argument("--seed", type=int, default=42, help="Seed RNG para reprodutibilidade")
    args = parser.parse_args()

    random.seed(args.seed)
    seed(reset=args.reset, n=args.n)


if __name__ == "__main__":
    main()
