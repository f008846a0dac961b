# backend/scripts/conceder_claim.py
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

# Permite rodar o script a partir de backend/ sem problema de import
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from minimal_api.services.identity import IdentityService

"""
Concede um claim (ou papel) a um usuário existente.

Exemplos :
    python scripts/conceder_claim.py admin@empresa.com
    python scripts/conceder_claim.py admin@empresa.com --claim ExcluirFornecedor --valor ExcluirFornecedor
    python scripts/conceder_claim.py admin@empresa.com --papel Admin --sem-claim
    python scripts/conceder_claim.py admin@empresa.com --revogar

Passa pelo IdentityService (mesmas regras da API) : o token seguinte do usuário já traz o claim.
"""


async def conceder(
    session: AsyncSession,
    email: str,
    claim: str | None,
    valor: str | None,
    papel: str | None,
    revogar: bool,
) -> int:
    identity = IdentityService(session)
    usuario = await identity.find_by_email(email)
    if usuario is None:
        print(f"❌ Usuário '{email}' não encontrado.")
        return 1

    if claim:
        if revogar:
            removidos = await identity.remove_claim(usuario, claim, valor)
            print(f"✅ Claim '{claim}' revogado ({removidos} registro(s)).")
        else:
            await identity.add_claim(usuario, claim, valor or claim)
            print(f"✅ Claim '{claim}={valor or claim}' concedido a {usuario.email}.")

    if papel:
        if revogar:
            result = await identity.remove_from_role(usuario, papel)
            verbo = "revogado"
        else:
            result = await identity.add_to_role(usuario, papel)
            verbo = "concedido"
        if result.succeeded:
            print(f"✅ Papel '{papel}' {verbo}.")
        else:
            print(f"ℹ️  {result.errors[0].description}")

    return 0


async def _run(args: argparse.Namespace) -> int:
    from minimal_api.db.session import AsyncSessionLocal, engine

    claim = None if args.sem_claim else args.claim
    try:
        async with AsyncSessionLocal() as session:
            return await conceder(
                session,
                args.email,
                claim=claim,
                valor=args.valor,
                papel=args.papel,
                revogar=args.revogar,
            )
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Concede/revoga claims e papéis de um usuário")
    parser.add_argument("email", help="Email (login) do usuário")
    parser.add_argument("--claim", default="ExcluirFornecedor", help="Tipo do claim (padrão: ExcluirFornecedor)")
    parser.add_argument("--valor", default=None, help="Valor do claim (padrão: igual ao tipo ; na revogação, todos)")
    parser.add_argument("--papel", default=None, help="Papel (role) a conceder")
    parser.add_argument("--sem-claim", action="store_true", help="Não mexe em claims (só --papel)")
    parser.add_argument("--revogar", action="store_true", help="Revoga em vez de conceder")
    return asyncio.run(_run(parser.parse_args()))


if __name__ == "__main__":
    raise SystemExit(main())
