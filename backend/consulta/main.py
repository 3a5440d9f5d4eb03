"""
Consulta API - Backend
Consulta de clientes, pedidos e movimentações financeiras
"""
import logging
import time
import traceback
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from consulta.api import customers, lookup, orders
from consulta.core.config import settings
from consulta.core.database import CONNECTION_TIMEOUT, store_session
from consulta.core.exceptions import ConsultaError
from consulta.core.logging import setup_logging

setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(ConsultaError)
async def consulta_exception_handler(request: Request, exc: ConsultaError):
    """Known errors: 400 for bad input, 500 for store failures"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unhandled errors; the traceback is only exposed outside production"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {
        "error": "Erro interno do servidor",
        "message": str(exc),
    }
    if not settings.is_production:
        content["details"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)


# Include API routers
app.include_router(customers.router, prefix="/api/v1/clientes", tags=["Clientes"])
app.include_router(orders.router, prefix="/api/v1/pedidos", tags=["Pedidos"])
app.include_router(lookup.router, prefix="/api/v1", tags=["Consulta genérica"])


@app.get("/")
def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": "API do sistema de consulta está online!",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health():
    """Health check endpoint - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        with store_session(timeout_seconds=CONNECTION_TIMEOUT) as session:
            db_start = time.time()
            session.fetch_one("SELECT 1 AS ok")
            db_latency_ms = round((time.time() - db_start) * 1000, 2)
        db_status = "connected"
    except ConsultaError as e:
        db_status = "disconnected"
        db_error = e.message

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "consulta-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": CONNECTION_TIMEOUT
        },
        "total_latency_ms": total_latency_ms
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("consulta.main:app", host=settings.API_HOST, port=settings.API_PORT)
