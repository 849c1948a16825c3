"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import api_router
from app.core.config import settings
from app.core.exceptions import LeagueError, Unauthenticated
from app.database import init_db

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Install the log handler and apply LOG_LEVEL to the application loggers."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logging.getLogger("app").setLevel(settings.LOG_LEVEL.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting %s (backend=%s)", settings.PROJECT_NAME, settings.DATA_BACKEND)

    if settings.DATA_BACKEND == "sql":
        logger.info("Initializing database...")
        init_db()

    yield

    logger.info("Application stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Incluir rutas de la API
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(LeagueError)
def handle_league_error(request: Request, exc: LeagueError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"Location": settings.AUTH_ENTRY_PATH}
    logger.info(
        "league_error method=%s path=%s error=%s detail=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "server_error"})


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint - Health check."""
    return {
        "message": "Welcome to Porras FC API",
        "status": "running",
        "version": settings.VERSION,
        "description": "Compite con tus amigos prediciendo resultados de fútbol",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
