"""Async lifespan helpers: make sure the schema exists before serving."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.schema import MetaData

logger = structlog.get_logger(__name__)


def database_lifespan_factory(
    *,
    service_name: str,
    metadata: MetaData,
    engine,
    retries: int = 10,
    wait_seconds: float = 2.0,
):
    """Devolve um lifespan FastAPI que roda ``create_all`` com novas tentativas.

    Em produção o schema vem do Alembic; ``create_all`` só cria as tabelas
    que ainda não existem (execução local e testes).
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        logger.info("service_starting", service=service_name)
        for attempt in range(1, retries + 1):
            try:
                await asyncio.to_thread(metadata.create_all, bind=engine)
                break
            except OperationalError as exc:  # pragma: no cover - only triggered when DB is down
                if attempt == retries:
                    logger.error("database_unavailable", service=service_name, attempts=attempt)
                    raise
                logger.warning(
                    "database_unavailable_retrying",
                    service=service_name,
                    attempt=attempt,
                    wait_seconds=wait_seconds,
                    error=str(exc),
                )
                await asyncio.sleep(wait_seconds)

        yield
        logger.info("service_stopped", service=service_name)

    return _lifespan
