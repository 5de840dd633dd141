"""Liveness and readiness endpoints (``/health`` and ``/ready``)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError


def check_database_health(engine: Optional[Engine]) -> bool:
    """Executa ``SELECT 1`` e informa se o banco respondeu."""
    if engine is None:
        return False

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except SQLAlchemyError:
        return False


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_health_router(service_name: str, database_engine: Optional[Engine] = None) -> APIRouter:
    """Cria router FastAPI com endpoints /health e /ready.

    Args:
        service_name: Nome do serviço reportado nas respostas
        database_engine: Engine SQLAlchemy usada pela verificação de prontidão

    Returns:
        APIRouter configurado com endpoints de health check
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", status_code=status.HTTP_200_OK)
    def health():
        """Sempre 200 enquanto o processo está de pé; não toca no banco."""
        return {
            "status": "ok",
            "service": service_name,
            "timestamp": _timestamp(),
        }

    @router.get("/ready")
    def ready():
        """200 quando o banco responde, 503 caso contrário."""
        db_healthy = check_database_health(database_engine)
        payload = {
            "status": "ready" if db_healthy else "not_ready",
            "service": service_name,
            "timestamp": _timestamp(),
            "checks": {"database": db_healthy},
        }
        return JSONResponse(
            content=payload,
            status_code=status.HTTP_200_OK if db_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return router
