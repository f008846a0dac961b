from fastapi import APIRouter

from minimal_api.api.fornecedores import router as fornecedores_router
from minimal_api.api.health import router as health_router
from minimal_api.api.usuarios import router as usuarios_router

"""
Router principal da API.

Papel (funcional) :
- Agrupa os routers por domínio (health, usuário, fornecedor).
- Ponto de entrada único para inclusão na aplicação FastAPI.
"""

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(usuarios_router)
api_router.include_router(fornecedores_router)
