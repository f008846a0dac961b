"""
Testes de senhas (bcrypt), JWT (PyJWT) e Principal.
"""

import time
import uuid

import jwt
import pytest

from minimal_api.core.errors import AppHTTPException
from minimal_api.core.security import (
    decode_token,
    encode_token,
    hash_password,
    principal_from_payload,
    verify_password,
)
from minimal_api.core.settings import settings
from minimal_api.models.usuario import Usuario
from minimal_api.schemas.usuario import UserClaim
from minimal_api.services.tokens import build_payload


def _usuario() -> Usuario:
    return Usuario(id=uuid.uuid4(), email="fulano@empresa.com", email_normalizado="FULANO@EMPRESA.COM")


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("Senha@123")
        assert hashed != "Senha@123"
        assert verify_password("Senha@123", hashed)
        assert not verify_password("senha@123", hashed)

    def test_invalid_hash_is_rejected(self):
        assert verify_password("Senha@123", "nao-e-um-hash") is False


class TestTokens:
    def test_payload_has_registered_claims_roles_and_user_claims(self):
        usuario = _usuario()
        payload = build_payload(
            usuario,
            [UserClaim(type="ExcluirFornecedor", value="ExcluirFornecedor")],
            ["Admin"],
            now=1_000,
        )
        assert payload["sub"] == str(usuario.id)
        assert payload["email"] == "fulano@empresa.com"
        assert payload["iss"] == settings.JWT_EMISSOR
        assert payload["aud"] == settings.JWT_VALIDO_EM
        assert payload["exp"] == 1_000 + settings.JWT_EXPIRACAO_HORAS * 3600
        assert payload["ExcluirFornecedor"] == "ExcluirFornecedor"
        assert payload["role"] == "Admin"

    def test_repeated_claim_types_become_lists(self):
        payload = build_payload(
            _usuario(),
            [UserClaim(type="Permissao", value="a"), UserClaim(type="Permissao", value="b")],
            ["A", "B"],
        )
        assert payload["Permissao"] == ["a", "b"]
        assert payload["role"] == ["A", "B"]

    def test_user_claims_cannot_override_registered_claims(self):
        usuario = _usuario()
        payload = build_payload(usuario, [UserClaim(type="sub", value="intruso")], [])
        assert payload["sub"] == str(usuario.id)

    def test_user_claim_named_role_is_ignored(self):
        payload = build_payload(
            _usuario(),
            [UserClaim(type="role", value="Root"), UserClaim(type="Permissao", value="a")],
            ["Admin"],
        )
        assert payload["role"] == "Admin"
        assert payload["Permissao"] == "a"

    def test_three_claims_of_same_type(self):
        payload = build_payload(
            _usuario(),
            [UserClaim(type="Permissao", value=v) for v in ("a", "b", "c")],
            [],
        )
        assert payload["Permissao"] == ["a", "b", "c"]
        assert "role" not in payload

    def test_roundtrip_to_principal(self):
        payload = build_payload(_usuario(), [UserClaim(type="ExcluirFornecedor", value="sim")], ["Admin"])
        principal = principal_from_payload(decode_token(encode_token(payload)))
        assert principal.email == "fulano@empresa.com"
        assert principal.has_claim("ExcluirFornecedor")
        assert principal.has_claim("ExcluirFornecedor", "sim")
        assert not principal.has_claim("ExcluirFornecedor", "nao")
        assert principal.roles == ["Admin"]
        assert "email" not in principal.claims

    def test_expired_token_is_401(self):
        payload = build_payload(_usuario(), [], [], now=int(time.time()) - 10 * 3600)
        with pytest.raises(AppHTTPException) as exc:
            decode_token(encode_token(payload))
        assert exc.value.status_code == 401
        assert exc.value.detail["message"] == "Token expirado"

    def test_wrong_signature_is_401(self):
        payload = build_payload(_usuario(), [], [])
        forged = jwt.encode(payload, "outro-segredo-qualquer-com-32-bytes!", algorithm="HS256")
        with pytest.raises(AppHTTPException) as exc:
            decode_token(forged)
        assert exc.value.status_code == 401

    def test_wrong_audience_is_401(self):
        payload = build_payload(_usuario(), [], [])
        payload["aud"] = "https://outro-sistema"
        with pytest.raises(AppHTTPException):
            decode_token(encode_token(payload))
