"""API routes package."""

from fastapi import APIRouter

from app.api.routes import auth, dashboard, leagues

api_router = APIRouter()

# Incluir routers de diferentes módulos
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(leagues.router, prefix="/leagues", tags=["Leagues"])
