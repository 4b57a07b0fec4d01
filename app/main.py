"""Aplicação principal FastAPI"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from app.core.config import settings
from app.core.exceptions import APIException
from app.core.logging_config import setup_logging
from app.core.middleware import OptimizedMiddleware
from app.core.rate_limit import limiter
from app.api.v1.api import api_router
import logging

# Configura logging
setup_logging()
logger = logging.getLogger(__name__)

# Cria aplicação FastAPI
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="API REST para gestão de elenco, partidas ao vivo, tempo de jogo e estatísticas de time de base",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Estado do limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Falhas de domínio com tipo estruturado"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Entrada malformada vira 400 com a lista de erros"""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors()), "error": "validation_failure"},
    )


# Middlewares
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(OptimizedMiddleware)

# Inclui routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """Endpoint raiz"""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "players": f"{settings.API_V1_PREFIX}/players",
            "matches": f"{settings.API_V1_PREFIX}/matches",
            "schedules": f"{settings.API_V1_PREFIX}/schedules",
            "stats": f"{settings.API_V1_PREFIX}/stats",
            "webhooks": f"{settings.API_V1_PREFIX}/webhooks"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


@app.on_event("startup")
async def startup_event():
    """Evento de startup"""
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} iniciando...")

    from app.core.database import AsyncSessionLocal, init_db
    from app.repositories.player_repository import PlayerRepository

    await init_db()
    try:
        async with AsyncSessionLocal() as db:
            players_count = await PlayerRepository(db).count()
        if players_count == 0:
            logger.warning("Nenhum jogador cadastrado. Use POST /api/v1/players para montar o elenco")
        else:
            logger.info(f"Banco OK: {players_count} jogadores no elenco")
    except Exception as e:
        logger.warning(f"Erro ao verificar banco: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """Evento de shutdown"""
    logger.info("Aplicação encerrando...")
    from app.core.cache import cache
    await cache.close()
    from app.core.database import close_db
    await close_db()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
