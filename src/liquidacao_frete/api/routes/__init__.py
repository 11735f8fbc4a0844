"""API v1 router registration."""

from fastapi import APIRouter

from liquidacao_frete.api.routes import cargos, settlements, undo

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(cargos.router)
v1_router.include_router(settlements.router)
v1_router.include_router(undo.router)
