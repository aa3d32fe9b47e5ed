# civic_events/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

from civic_events.api.v1.router import api_router
from civic_events.core.config import settings
from civic_events.core.errors import (
    AuthenticationError,
    CivicEventsError,
    NotFoundError,
    PermissionDeniedError,
    StorageFault,
    UniquenessError,
    ValidationError,
)
from civic_events.core.logging import setup_logging
from civic_events.db.bootstrap import run_migrations

logger = logging.getLogger(__name__)

setup_logging()

api = FastAPI(
    title="Eventos Municipais - Inscrições",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
)

api.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # ajuste para domínios específicos em produção
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# métricas /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

api.include_router(api_router, prefix="/api/v1")

@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}

@api.on_event("startup")
def startup():
    if settings.AUTO_MIGRATE:
        run_migrations()

def status_for(exc: CivicEventsError) -> int:
    # ordem importa: NotFoundError é um ValidationError
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, PermissionDeniedError):
        return 403
    if isinstance(exc, StorageFault):
        return 503
    return 409

@api.exception_handler(CivicEventsError)
def handle_domain_error(request: Request, exc: CivicEventsError):
    code = status_for(exc)
    if isinstance(exc, StorageFault):
        logger.error("storage fault on %s %s: %s", request.method, request.url.path, exc.__cause__)
    headers = {"WWW-Authenticate": "Bearer"} if code == 401 else None
    return JSONResponse(status_code=code, content=exc.as_dict(), headers=headers)

@api.exception_handler(IntegrityError)
def handle_integrity_error(request: Request, exc: IntegrityError):
    return JSONResponse(
        status_code=409,
        content={"code": UniquenessError.code, "message": "Registro duplicado.", "details": {"error": str(getattr(exc, "orig", exc))}},
    )

@api.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "message": "Erro interno.", "details": {"error": str(exc)}},
    )
