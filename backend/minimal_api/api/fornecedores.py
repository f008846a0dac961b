from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, Response

from minimal_api.api.deps import AuthDep, ExcluirFornecedorDep, get_contexto
from minimal_api.core.errors import AppHTTPException, validation_problem
from minimal_api.core.security import Principal
from minimal_api.core.tracing import set_tag, traced
from minimal_api.db.context import ContextoDb
from minimal_api.models.fornecedor import Fornecedor
from minimal_api.schemas.fornecedor import FornecedorIn, FornecedorOut
from minimal_api.services.validation import validar_fornecedor

"""
API Fornecedor.

Papel (funcional) :
- GET    /fornecedor        : lista (anônimo) ; lista vazia -> 200 [].
- GET    /fornecedor/{id}   : detalhe (Bearer) ; 404 se ausente.
- POST   /fornecedor        : cria (Bearer) ; 201 + Location.
- PUT    /fornecedor/{id}   : substitui (Bearer) ; 404 se ausente, 204 se ok.
- DELETE /fornecedor/{id}   : remove (Bearer + claim ExcluirFornecedor) ; 404 se ausente, 204 se ok.

Notas :
- O sucesso das escritas é decidido pelo commit count devolvido por ContextoDb.salvar().
- Cada handler roda dentro de um span "fornecedor.<ação>" (tags : id, resultado, status).
"""

router = APIRouter(prefix="/fornecedor", tags=["Fornecedor"])
log = logging.getLogger("minimal_api.fornecedores")


def _not_found(span) -> AppHTTPException:
    set_tag(span, "http.status_code", 404)
    return AppHTTPException(404, "NOT_FOUND", "Fornecedor não encontrado")


@router.get("", response_model=List[FornecedorOut], name="GetFornecedor")
async def listar_fornecedores(ctx: ContextoDb = Depends(get_contexto)):
    with traced("fornecedor.listar") as span:
        fornecedores = await ctx.fornecedores.listar()
        set_tag(span, "fornecedor.quantidade", len(fornecedores))
        set_tag(span, "http.status_code", 200)
        return fornecedores


@router.get("/{id}", response_model=FornecedorOut, name="GetFornecedorPorId")
async def obter_fornecedor(
    id: uuid.UUID,
    principal: Principal = AuthDep,
    ctx: ContextoDb = Depends(get_contexto),
):
    with traced("fornecedor.obter", {"fornecedor.id": id, "usuario.id": principal.user_id}) as span:
        fornecedor = await ctx.fornecedores.obter(id)
        if fornecedor is None:
            raise _not_found(span)
        set_tag(span, "http.status_code", 200)
        return fornecedor


@router.post("", response_model=FornecedorOut, status_code=201, name="PostFornecedor")
async def criar_fornecedor(
    payload: FornecedorIn,
    request: Request,
    response: Response,
    principal: Principal = AuthDep,
    ctx: ContextoDb = Depends(get_contexto),
):
    with traced("fornecedor.criar", {"usuario.id": principal.user_id}) as span:
        errors = validar_fornecedor(payload)
        if errors:
            set_tag(span, "http.status_code", 400)
            raise validation_problem(errors)

        fornecedor = Fornecedor(
            id=uuid.uuid4(),
            nome=payload.nome,
            documento=payload.documento,
            ativo=payload.ativo,
        )
        ctx.fornecedores.adicionar(fornecedor)
        result = await ctx.salvar()
        set_tag(span, "fornecedor.id", fornecedor.id)
        set_tag(span, "commit.count", result)

        if result <= 0:
            set_tag(span, "http.status_code", 400)
            raise AppHTTPException(400, "SAVE_FAILED", "Houve um erro ao salvar o registro")

        log.info("fornecedor_created", extra={"fornecedor_id": str(fornecedor.id), "user_id": principal.user_id})
        response.headers["Location"] = str(request.url_for("GetFornecedorPorId", id=str(fornecedor.id)))
        set_tag(span, "http.status_code", 201)
        return fornecedor


@router.put("/{id}", status_code=204, response_class=Response, name="PutFornecedor")
async def atualizar_fornecedor(
    id: uuid.UUID,
    payload: FornecedorIn,
    principal: Principal = AuthDep,
    ctx: ContextoDb = Depends(get_contexto),
):
    with traced("fornecedor.atualizar", {"fornecedor.id": id, "usuario.id": principal.user_id}) as span:
        existente = await ctx.fornecedores.obter_sem_rastreio(id)
        if existente is None:
            raise _not_found(span)

        errors = validar_fornecedor(payload)
        if errors:
            set_tag(span, "http.status_code", 400)
            raise validation_problem(errors)

        # Substituição integral : o id é sempre o da rota
        await ctx.fornecedores.atualizar(
            Fornecedor(id=id, nome=payload.nome, documento=payload.documento, ativo=payload.ativo)
        )
        result = await ctx.salvar()
        set_tag(span, "commit.count", result)

        if result <= 0:
            set_tag(span, "http.status_code", 400)
            raise AppHTTPException(400, "SAVE_FAILED", "Houve um problema ao salvar o registro")

        log.info("fornecedor_updated", extra={"fornecedor_id": str(id), "user_id": principal.user_id})
        set_tag(span, "http.status_code", 204)
        return Response(status_code=204)


@router.delete("/{id}", status_code=204, response_class=Response, name="DeleteFornecedor")
async def excluir_fornecedor(
    id: uuid.UUID,
    principal: Principal = ExcluirFornecedorDep,
    ctx: ContextoDb = Depends(get_contexto),
):
    with traced("fornecedor.excluir", {"fornecedor.id": id, "usuario.id": principal.user_id}) as span:
        fornecedor = await ctx.fornecedores.obter(id)
        if fornecedor is None:
            raise _not_found(span)

        await ctx.fornecedores.remover(fornecedor)
        result = await ctx.salvar()
        set_tag(span, "commit.count", result)

        if result < 0:
            set_tag(span, "http.status_code", 400)
            raise AppHTTPException(400, "DELETE_FAILED", "Houve um problema ao remover o registro")

        log.info("fornecedor_deleted", extra={"fornecedor_id": str(id), "user_id": principal.user_id})
        set_tag(span, "http.status_code", 204)
        return Response(status_code=204)
