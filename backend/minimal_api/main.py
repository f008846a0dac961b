from __future__ import annotations

import time
import uuid
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from minimal_api.api.router import api_router
from minimal_api.core.settings import settings
from minimal_api.core.logging import setup_logging
from minimal_api.core.errors import error_payload, errors_from_pydantic, AppHTTPException
from minimal_api.core.request_id import REQUEST_ID_HEADER, set_request_id, get_request_id, ensure_request_id
from minimal_api.core.tracing import configure_tracing, shutdown_tracing

"""
Aplicação FastAPI (entrypoint).

Papel (funcional) :
- Configura a aplicação (settings, CORS, middlewares, routers, documentação OpenAPI).
- Centraliza a observabilidade :
  - request_id propagado (X-Request-Id)
  - logs estruturados JSON (tempo, status, client_ip)
  - tracing OpenTelemetry opcional (TRACING_ENABLED)
- Uniformiza os erros do lado do cliente (formato error_payload).

Este arquivo não contém lógica de negócio :
- As rotas estão em minimal_api.api
- A lógica reutilizável está em minimal_api.services
- Os componentes transversais estão em minimal_api.core
"""


class UTF8JSONResponse(JSONResponse):
    """Resposta JSON com charset UTF-8 explícito (mensagens em português)."""
    media_type = "application/json; charset=utf-8"


LOG_LEVEL = getattr(settings, "LOG_LEVEL", "INFO")
setup_logging(LOG_LEVEL)

log = logging.getLogger("minimal_api")

# logger dedicado à observabilidade HTTP (separado do negócio)
http_log = logging.getLogger("minimal_api.http")

SLOW_MS = int(getattr(settings, "SLOW_REQUEST_MS", 800))

# Swagger só fora de produção
DOCS_ENABLED = str(settings.ENV).lower() != "prod"


def _split_origins(value: str) -> list[str]:
    """Faz o parse de uma lista de origens CORS a partir de 'a,b,c'."""
    if not value:
        return []
    return [o.strip() for o in value.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.TRACING_ENABLED:
        configure_tracing(console=settings.TRACING_CONSOLE)
    log.info("startup %s (env=%s)", settings.APP_NAME, settings.ENV)
    yield
    shutdown_tracing()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    debug=settings.DEBUG,
    default_response_class=UTF8JSONResponse,
    docs_url="/swagger" if DOCS_ENABLED else None,
    redoc_url=None,
    openapi_url="/openapi.json" if DOCS_ENABLED else None,
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=_split_origins(settings.CORS_ORIGINS),
    allow_credentials=False,  # API stateless (Bearer), sem cookies
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    expose_headers=["Location", REQUEST_ID_HEADER],
)

if settings.FORCE_HTTPS:
    app.add_middleware(HTTPSRedirectMiddleware)

# --- Routers ---
app.include_router(api_router)


@app.middleware("http")
async def request_observability(request: Request, call_next):
    rid = ensure_request_id(request.headers.get(REQUEST_ID_HEADER))
    request.state.request_id = rid

    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)

        if response is not None:
            response.headers[REQUEST_ID_HEADER] = rid

        level = logging.WARNING if duration_ms >= SLOW_MS else logging.INFO
        http_log.log(
            level,
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": getattr(response, "status_code", None),
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )

        set_request_id(None)


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid.uuid4())


# --- Error handlers : formato padrão, sem stacktrace para o cliente ---
@app.exception_handler(AppHTTPException)
async def app_http_exception_handler(request: Request, exc: AppHTTPException):
    """Erros de aplicação (AppHTTPException) -> payload padrão."""
    detail = exc.detail if isinstance(exc.detail, dict) else {}

    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_payload(
            code=str(detail.get("code", "HTTP_ERROR")),
            message=str(detail.get("message", "Erro HTTP")),
            status=exc.status_code,
            request_id=_rid(request),
            details=detail.get("details", None),
        ),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Erros HTTP nativos (404 de rota, 405, etc.) -> payload padrão."""
    if isinstance(exc.detail, dict):
        code = str(exc.detail.get("code", "HTTP_ERROR"))
        message = str(exc.detail.get("message", "Erro HTTP"))
        details = exc.detail.get("details", None)
    else:
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        message = str(exc.detail)
        details = None

    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_payload(code=code, message=message, status=exc.status_code, request_id=_rid(request), details=details),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Erros de binding/tipo (Pydantic) -> 400 + mapa campo -> mensagens."""
    return UTF8JSONResponse(
        status_code=400,
        content=error_payload(
            code="VALIDATION_ERROR",
            message="Um ou mais erros de validação ocorreram.",
            status=400,
            request_id=_rid(request),
            details={"errors": errors_from_pydantic(exc.errors())},
        ),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Fallback : qualquer exceção não tratada -> 500 + log no servidor."""
    log.exception("Unhandled error: %s", exc)

    return UTF8JSONResponse(
        status_code=500,
        content=error_payload(
            code="INTERNAL_ERROR",
            message="Erro interno do servidor",
            status=500,
            request_id=_rid(request),
        ),
    )
