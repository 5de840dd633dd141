"""Infrastructure helpers shared by the link page service (config, logging, health)."""

from .config import ServiceConfig, load_service_config
from .cors import configure_cors
from .health import create_health_router
from .logging import RequestContextLogMiddleware, bind_request_context, configure_logging
from .startup import database_lifespan_factory

__all__ = [
    "ServiceConfig",
    "load_service_config",
    "configure_cors",
    "create_health_router",
    "RequestContextLogMiddleware",
    "bind_request_context",
    "configure_logging",
    "database_lifespan_factory",
]
