"""Structured logging helpers for the link page service."""

from __future__ import annotations

import logging
import sys
import time
from typing import Any, Optional
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog


_REQUEST_ID_HEADER = "X-Request-ID"
_TRACE_ID_HEADER = "X-Trace-ID"


def configure_logging(service_name: str, level: int = logging.INFO) -> structlog.stdlib.BoundLogger:
    """Configura o structlog para emitir linhas JSON pelo logging da stdlib."""

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(service_name).bind(service=service_name)


def bind_request_context(**values: Any) -> None:
    """Acrescenta campos (ex.: ``business_id``) a todas as linhas de log da requisição atual."""
    structlog.contextvars.bind_contextvars(**{key: value for key, value in values.items() if value is not None})


class RequestContextLogMiddleware(BaseHTTPMiddleware):
    """Associa os ids da requisição ao structlog e registra uma linha por requisição.

    O ``X-Request-ID`` enviado pelo cliente é reaproveitado e sempre volta na
    resposta, para casar chamados de suporte com as linhas de log.
    """

    def __init__(self, app, *, logger: Optional[structlog.stdlib.BoundLogger] = None) -> None:
        super().__init__(app)
        self._logger = logger or structlog.get_logger("linkpage.http")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(_REQUEST_ID_HEADER) or str(uuid4())
        trace_id = request.headers.get(_TRACE_ID_HEADER) or request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            trace_id=trace_id,
            path=request.url.path,
            method=request.method,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._logger.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise
        else:
            response.headers[_REQUEST_ID_HEADER] = request_id
            self._logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
