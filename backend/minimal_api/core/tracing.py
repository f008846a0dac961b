from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)
from opentelemetry.trace import Span

from minimal_api.core.settings import settings

"""
Core Tracing (OpenTelemetry).

Papel (funcional) :
- Configura (opcionalmente) um TracerProvider com exportação OTLP/gRPC para um coletor local.
- Fornece `traced(name, tags)` : envolve o corpo de um handler num span nomeado com tags de diagnóstico.

Notas :
- Puramente observacional : nenhum efeito no fluxo de controle dos handlers.
- Sem `configure_tracing()`, a API OpenTelemetry devolve spans no-op (custo quase nulo).
- O provider global só pode ser definido uma vez por processo.
"""

log = logging.getLogger("minimal_api.tracing")

TRACER_NAME = "minimal_api"

_provider: Optional[TracerProvider] = None


def configure_tracing(
    service_name: Optional[str] = None,
    endpoint: Optional[str] = None,
    exporter: Optional[SpanExporter] = None,
    console: bool = False,
) -> TracerProvider:
    """
    Instala o TracerProvider global.

    - exporter explícito (ex : InMemorySpanExporter nos testes) -> SimpleSpanProcessor.
    - senão -> OTLPSpanExporter (gRPC) em BatchSpanProcessor, apontando para `endpoint`.
    """
    global _provider
    if _provider is not None:
        return _provider

    resource = Resource.create(
        {
            "service.name": service_name or settings.OTEL_SERVICE_NAME,
            "deployment.environment": settings.ENV,
        }
    )
    provider = TracerProvider(resource=resource)

    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    else:
        target = endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=target, insecure=target.startswith("http://")))
        )
        log.info("tracing enabled (otlp=%s)", target)

    if console:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def shutdown_tracing() -> None:
    """Faz flush dos spans pendentes (chamado no shutdown da app)."""
    if _provider is not None:
        _provider.shutdown()


def set_tag(span: Span, key: str, value: Any) -> None:
    """Atributo de span tolerante : ignora None, converte tipos não primitivos em str."""
    if value is None:
        return
    if not isinstance(value, (str, bool, int, float)):
        value = str(value)
    span.set_attribute(key, value)


@contextmanager
def traced(name: str, tags: Optional[Dict[str, Any]] = None) -> Iterator[Span]:
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        for key, value in (tags or {}).items():
            set_tag(span, key, value)
        yield span
