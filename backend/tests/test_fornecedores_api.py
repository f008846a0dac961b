"""
Testes de API : CRUD /fornecedor.
"""

import uuid

import pytest

from minimal_api.db.session import get_db
from minimal_api.main import app

ACME = {"nome": "Acme Ltda", "documento": "12345678000199", "ativo": True}


async def _criar(client, headers, payload=None):
    resp = await client.post("/fornecedor", json=payload or ACME, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp


class TestListar:
    async def test_empty_list_is_200(self, client):
        resp = await client.get("/fornecedor")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_list_is_anonymous(self, client, auth_headers):
        await _criar(client, auth_headers)
        await _criar(client, auth_headers, {"nome": "Beta", "documento": "111", "ativo": False})

        resp = await client.get("/fornecedor")
        assert resp.status_code == 200
        assert [f["nome"] for f in resp.json()] == ["Acme Ltda", "Beta"]


class TestCriarObter:
    async def test_post_then_get_roundtrip(self, client, auth_headers):
        resp = await _criar(client, auth_headers)
        created = resp.json()
        location = resp.headers["location"]
        assert location.endswith(f"/fornecedor/{created['id']}")

        resp = await client.get(location, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"id": created["id"], **ACME}

    async def test_client_id_is_ignored_on_create(self, client, auth_headers):
        sent = str(uuid.uuid4())
        resp = await _criar(client, auth_headers, {**ACME, "id": sent})
        assert resp.json()["id"] != sent

    async def test_invalid_payload_returns_validation_map(self, client, auth_headers):
        resp = await client.post("/fornecedor", json={"ativo": True}, headers=auth_headers)
        assert resp.status_code == 400
        errors = resp.json()["error"]["details"]["errors"]
        assert errors == {
            "nome": ["O campo Nome é obrigatório."],
            "documento": ["O campo Documento é obrigatório."],
        }
        assert (await client.get("/fornecedor")).json() == []

    async def test_get_unknown_is_404(self, client, auth_headers):
        resp = await client.get(f"/fornecedor/{uuid.uuid4()}", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    async def test_get_malformed_id_is_400(self, client, auth_headers):
        resp = await client.get("/fornecedor/nao-e-uuid", headers=auth_headers)
        assert resp.status_code == 400
        assert "id" in resp.json()["error"]["details"]["errors"]


class TestAtualizar:
    async def test_put_replaces_existing(self, client, auth_headers):
        fid = (await _criar(client, auth_headers)).json()["id"]

        novo = {"nome": "Acme Renomeada", "documento": "999", "ativo": False}
        resp = await client.put(f"/fornecedor/{fid}", json=novo, headers=auth_headers)
        assert resp.status_code == 204
        assert resp.content == b""

        resp = await client.get(f"/fornecedor/{fid}", headers=auth_headers)
        assert resp.json() == {"id": fid, **novo}

    async def test_put_unchanged_values_still_204(self, client, auth_headers):
        fid = (await _criar(client, auth_headers)).json()["id"]
        resp = await client.put(f"/fornecedor/{fid}", json=ACME, headers=auth_headers)
        assert resp.status_code == 204

    async def test_put_uses_route_id(self, client, auth_headers):
        fid = (await _criar(client, auth_headers)).json()["id"]
        outro = str(uuid.uuid4())
        resp = await client.put(f"/fornecedor/{fid}", json={**ACME, "id": outro, "nome": "X"}, headers=auth_headers)
        assert resp.status_code == 204

        ids = [f["id"] for f in (await client.get("/fornecedor")).json()]
        assert ids == [fid]

    async def test_put_missing_is_404(self, client, auth_headers):
        resp = await client.put(f"/fornecedor/{uuid.uuid4()}", json=ACME, headers=auth_headers)
        assert resp.status_code == 404
        assert (await client.get("/fornecedor")).json() == []

    async def test_put_invalid_payload(self, client, auth_headers):
        fid = (await _criar(client, auth_headers)).json()["id"]
        resp = await client.put(f"/fornecedor/{fid}", json={"nome": ""}, headers=auth_headers)
        assert resp.status_code == 400
        assert set(resp.json()["error"]["details"]["errors"]) == {"nome", "documento"}


class TestExcluir:
    async def test_delete_requires_claim(self, client, auth_headers):
        fid = (await _criar(client, auth_headers)).json()["id"]

        resp = await client.delete(f"/fornecedor/{fid}", headers=auth_headers)
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "FORBIDDEN"
        assert len((await client.get("/fornecedor")).json()) == 1

    async def test_delete_with_claim_then_again_is_404(self, client, auth_headers, admin_headers):
        fid = (await _criar(client, auth_headers)).json()["id"]

        resp = await client.delete(f"/fornecedor/{fid}", headers=admin_headers)
        assert resp.status_code == 204

        resp = await client.delete(f"/fornecedor/{fid}", headers=admin_headers)
        assert resp.status_code == 404
        assert (await client.get(f"/fornecedor/{fid}", headers=admin_headers)).status_code == 404

    async def test_delete_unknown_is_404(self, client, admin_headers):
        resp = await client.delete(f"/fornecedor/{uuid.uuid4()}", headers=admin_headers)
        assert resp.status_code == 404


class TestAutenticacao:
    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("GET", "/fornecedor/{id}", None),
            ("POST", "/fornecedor", ACME),
            ("PUT", "/fornecedor/{id}", ACME),
            ("DELETE", "/fornecedor/{id}", None),
        ],
    )
    async def test_requires_bearer_before_persistence(self, client, method, path, body):
        calls = []

        async def _tracking_db():
            calls.append(1)
            yield None

        app.dependency_overrides[get_db] = _tracking_db

        resp = await client.request(method, path.format(id=uuid.uuid4()), json=body)
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"
        assert resp.json()["error"]["code"] == "UNAUTHORIZED"
        assert calls == []

    async def test_invalid_token_is_401(self, client):
        resp = await client.post("/fornecedor", json=ACME, headers={"Authorization": "Bearer abc.def.ghi"})
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == "Token inválido"


async def test_request_id_is_echoed(client):
    resp = await client.get("/fornecedor", headers={"X-Request-Id": "req-123"})
    assert resp.headers["x-request-id"] == "req-123"

    resp = await client.get(f"/fornecedor/{uuid.uuid4()}")
    assert resp.json()["error"]["request_id"] == resp.headers["x-request-id"]


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["db"]["ok"] is True


async def test_openapi_declares_bearer_scheme(client):
    resp = await client.get("/openapi.json")
    assert resp.status_code == 200
    schemes = resp.json()["components"]["securitySchemes"]
    assert schemes["HTTPBearer"]["scheme"] == "bearer"
