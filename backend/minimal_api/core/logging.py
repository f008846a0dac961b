from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from .request_id import get_request_id

"""
Core Logging.

Papel (funcional) :
- Configura um logging JSON uniforme para toda a aplicação (API + uvicorn).
- Injeta o request_id em cada log para correlacionar os eventos de uma mesma requisição.
- Injeta trace_id/span_id quando há um span OpenTelemetry ativo (correlação logs <-> traces).
- Suporta "extras" estruturados (method, path, status_code, duration_ms, user_id, fornecedor_id...).
"""

# Extras padronizados (se fornecidos via logger.info(..., extra={...}))
_EXTRA_KEYS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_id",
    "email",
    "fornecedor_id",
    "claim",
)


class RequestIdFilter(logging.Filter):
    """Adiciona request_id ao LogRecord ('-' se ausente)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """Formatador JSON para logs estruturados (1 evento = 1 linha JSON)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "msg": record.getMessage(),
        }

        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        ctx = trace.get_current_span().get_span_context()
        if ctx.is_valid:
            payload["trace_id"] = format(ctx.trace_id, "032x")
            payload["span_id"] = format(ctx.span_id, "016x")

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """
    Inicializa o logging global (root) em JSON e alinha o uvicorn na mesma configuração.

    - Limpa os handlers existentes para evitar duplicados (notadamente com --reload).
    - Configura um StreamHandler stdout + JsonFormatter + RequestIdFilter.
    """
    lvl = level.upper()

    root = logging.getLogger()
    root.setLevel(lvl)

    if root.handlers:
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = root.handlers
        logger.setLevel(lvl)
