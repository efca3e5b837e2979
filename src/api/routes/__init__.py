from fastapi import APIRouter
from src.api.routes.render import router as render_router
from src.api.routes.presets import router as presets_router

api_router = APIRouter()
api_router.include_router(render_router)
api_router.include_router(presets_router)

__all__ = ['api_router']
