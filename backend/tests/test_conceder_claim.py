"""
Testes do script de concessão de claims/papéis (via IdentityService).
"""

from minimal_api.services.identity import IdentityService
from scripts.conceder_claim import conceder
from tests.helpers import SENHA, login, registrar


async def test_unknown_user_returns_1(db_session, capsys):
    assert await conceder(db_session, "ninguem@empresa.com", "ExcluirFornecedor", None, None, False) == 1
    assert "não encontrado" in capsys.readouterr().out


async def test_grant_and_revoke_claim(db_session):
    identity = IdentityService(db_session)
    usuario = (await identity.create_user("admin@empresa.com", SENHA)).usuario

    assert await conceder(db_session, "admin@empresa.com", "ExcluirFornecedor", None, None, False) == 0
    assert [(c.tipo, c.valor) for c in await identity.get_claims(usuario)] == [
        ("ExcluirFornecedor", "ExcluirFornecedor")
    ]

    assert await conceder(db_session, "admin@empresa.com", "ExcluirFornecedor", None, None, True) == 0
    assert await identity.get_claims(usuario) == []


async def test_grant_and_revoke_role(db_session, capsys):
    identity = IdentityService(db_session)
    usuario = (await identity.create_user("papel@empresa.com", SENHA)).usuario

    await conceder(db_session, "papel@empresa.com", None, None, "Admin", False)
    assert await identity.get_roles(usuario) == ["Admin"]

    await conceder(db_session, "papel@empresa.com", None, None, "Admin", True)
    assert await identity.get_roles(usuario) == []

    await conceder(db_session, "papel@empresa.com", None, None, "Admin", True)
    assert "não possui o papel" in capsys.readouterr().out


async def test_granted_claim_appears_in_next_token(client, session_factory):
    await registrar(client, "gerente@empresa.com")

    async with session_factory() as session:
        assert await conceder(session, "gerente@empresa.com", "ExcluirFornecedor", None, "Gerente", False) == 0

    body = (await login(client, "gerente@empresa.com")).json()
    claims = {(c["type"], c["value"]) for c in body["user_token"]["claims"]}
    assert ("ExcluirFornecedor", "ExcluirFornecedor") in claims
    assert ("role", "Gerente") in claims
