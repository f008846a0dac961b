"""
Testes das regras de validação por DTO.
"""

from minimal_api.schemas.fornecedor import FornecedorIn
from minimal_api.schemas.usuario import LoginUsuario, RegistroUsuario
from minimal_api.services.validation import is_email, validar_fornecedor, validar_login, validar_registro


class TestValidarFornecedor:
    def test_valid_payload_has_no_errors(self):
        payload = FornecedorIn(nome="Acme Ltda", documento="12345678000199", ativo=True)
        assert validar_fornecedor(payload) == {}

    def test_missing_fields_are_required(self):
        errors = validar_fornecedor(FornecedorIn())
        assert errors["nome"] == ["O campo Nome é obrigatório."]
        assert errors["documento"] == ["O campo Documento é obrigatório."]

    def test_blank_name_is_required(self):
        errors = validar_fornecedor(FornecedorIn(nome="   ", documento="123"))
        assert "nome" in errors
        assert "documento" not in errors

    def test_max_lengths(self):
        errors = validar_fornecedor(FornecedorIn(nome="x" * 201, documento="1" * 15))
        assert errors["nome"] == ["O campo Nome precisa ter no máximo 200 caracteres."]
        assert errors["documento"] == ["O campo Documento precisa ter no máximo 14 caracteres."]

    def test_strings_are_stripped(self):
        payload = FornecedorIn(nome="  Acme  ", documento=" 123 ")
        assert payload.nome == "Acme"
        assert payload.documento == "123"


class TestValidarRegistro:
    def test_valid(self):
        payload = RegistroUsuario(email="a@b.com", password="Senha@123", confirm_password="Senha@123")
        assert validar_registro(payload) == {}

    def test_confirm_password_alias(self):
        payload = RegistroUsuario.model_validate(
            {"email": "a@b.com", "password": "Senha@123", "confirmPassword": "Senha@123"}
        )
        assert payload.confirm_password == "Senha@123"
        assert validar_registro(payload) == {}

    def test_passwords_must_match(self):
        payload = RegistroUsuario(email="a@b.com", password="Senha@123", confirm_password="Outra@123")
        assert validar_registro(payload) == {"confirm_password": ["As senhas não conferem."]}

    def test_invalid_email_and_short_password(self):
        payload = RegistroUsuario(email="sem-arroba", password="123", confirm_password="123")
        errors = validar_registro(payload)
        assert errors["email"] == ["O campo Email está em formato inválido."]
        assert errors["password"] == ["O campo Senha precisa ter entre 6 e 100 caracteres."]


class TestValidarLogin:
    def test_empty(self):
        errors = validar_login(LoginUsuario())
        assert set(errors) == {"email", "password"}

    def test_valid(self):
        assert validar_login(LoginUsuario(email="a@b.com", password="qualquer")) == {}


def test_is_email():
    assert is_email("fulano@empresa.com.br")
    assert not is_email("@empresa.com")
    assert not is_email("fulano@")
    assert not is_email("a@b@c")
    assert not is_email("com espaco@b.com")
    assert not is_email("fulano@empresa")
    assert not is_email("fulano..silva@empresa.com")


def test_malformed_email_in_login():
    errors = validar_login(LoginUsuario(email="fulano@empresa", password="qualquer"))
    assert errors == {"email": ["O campo Email está em formato inválido."]}
