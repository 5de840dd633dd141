"""CORS (Cross-Origin Resource Sharing) wiring for the public front end.

Origins come from :class:`shared.config.CorsConfig`:
- Development: ``*`` unless CORS_ORIGINS is set
- Production: CORS_ORIGINS is mandatory (enforced while loading the config)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CorsConfig


def configure_cors(app: FastAPI, cors: CorsConfig) -> None:
    """Adiciona o CORSMiddleware ao app conforme a configuração carregada.

    Args:
        app: Instância FastAPI para configurar
        cors: Configuração de CORS do serviço
    """
    origins = list(cors.origins)
    allow_credentials = cors.allow_credentials

    # Com origem "*" o navegador recusa credenciais; desliga para não quebrar o preflight
    if origins == ["*"]:
        allow_credentials = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "X-Trace-ID"],
        expose_headers=["X-Request-ID"],
        max_age=cors.max_age,
    )
