from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

"""
Core Errors.

Papel (funcional) :
- Padroniza o formato dos erros devolvidos pela API (payload homogêneo).
- Fornece uma exceção de aplicação (AppHTTPException) para levantar erros de negócio de forma coerente.
- Fornece `validation_problem()` para os erros de validação por campo (campo -> [mensagens]).

Convenção de resposta (exemplo) :
{
  "error": {
    "code": "NOT_FOUND",
    "message": "Fornecedor não encontrado",
    "status": 404,
    "request_id": "...",
    "timestamp": "...",
    "details": {...}
  }
}
"""

ValidationErrors = Dict[str, List[str]]


def now_iso() -> str:
    """Timestamp ISO-8601 em UTC (usado em todos os erros)."""
    return datetime.now(timezone.utc).isoformat()


def error_payload(
    *,
    code: str,
    message: str,
    status: int,
    request_id: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Monta um payload de erro homogêneo para a API."""
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "status": status,
            "request_id": request_id,
            "timestamp": now_iso(),
        }
    }
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppHTTPException(HTTPException):
    """
    Exceção de aplicação padronizada.

    Uso :
    - Levantar um erro "de negócio" com um código estável e uma mensagem explícita.
    - Deixar a camada de API/handlers produzir uma resposta coerente.

    Exemplo :
        raise AppHTTPException(404, "NOT_FOUND", "Fornecedor não encontrado")
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={"code": code, "message": message, "details": details},
            headers=headers,
        )


def validation_problem(errors: ValidationErrors) -> AppHTTPException:
    """400 com o mapa campo -> mensagens (equivalente a um ValidationProblem)."""
    return AppHTTPException(
        400,
        "VALIDATION_ERROR",
        "Um ou mais erros de validação ocorreram.",
        details={"errors": errors},
    )


def errors_from_pydantic(errors: List[Dict[str, Any]]) -> ValidationErrors:
    """Converte exc.errors() (Pydantic) para o mapa campo -> mensagens."""
    out: ValidationErrors = {}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        field = ".".join(loc) or "body"
        out.setdefault(field, []).append(str(err.get("msg", "Valor inválido")))
    return out
