import logging
import os
from html import escape

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from fastapi.responses import HTMLResponse

from app.core.database import Base, engine
from app.core.exceptions import register_exception_handlers
from app.models import Business, EmailVerificationToken, PasswordResetToken, SocialLink  # noqa: F401
from app.routers import admin, auth, businesses, socials
from app.services.mailer import build_mailer
from shared import (
    RequestContextLogMiddleware,
    configure_cors,
    configure_logging,
    create_health_router,
    database_lifespan_factory,
    load_service_config,
)

_CONFIG = load_service_config("linkpage")
_ROOT_PATH = os.getenv("APP_ROOT_PATH", "")

logger = configure_logging(_CONFIG.name, level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))

tags_metadata = [
    {"name": "Auth", "description": "Signup, email verification, login and password reset."},
    {"name": "Businesses", "description": "Owner profile management and public profile pages."},
    {"name": "Socials", "description": "Social links of the authenticated business."},
    {"name": "Admin", "description": "Account listing and approval (admin sessions only)."},
]

app = FastAPI(
    title="Follow Us Everywhere API",
    version="0.1.0",
    description="Link-in-bio pages for small businesses: one public page that opens every social profile.",
    openapi_tags=tags_metadata,
    root_path=_ROOT_PATH,
    lifespan=database_lifespan_factory(
        service_name=_CONFIG.name,
        metadata=Base.metadata,
        engine=engine,
    ),
    docs_url=None,
    redoc_url="/redoc",
)

app.state.config = _CONFIG
app.state.mailer = build_mailer(_CONFIG.mail)

register_exception_handlers(app)
configure_cors(app, _CONFIG.cors)
app.add_middleware(RequestContextLogMiddleware, logger=logger)


def custom_openapi_schema():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema["openapi"] = "3.0.3"
    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi_schema

# Swagger UI apontando para o openapi.json relativo ao root_path
@app.get("/docs", include_in_schema=False)
async def custom_swagger_ui_html():
    return HTMLResponse(f"""
    <!DOCTYPE html>
    <html>
    <head>
        <link type="text/css" rel="stylesheet" href="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/swagger-ui.css">
        <title>{escape(app.title)} - Swagger UI</title>
    </head>
    <body>
        <div id="swagger-ui"></div>
        <script src="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
        <script>
        const ui = SwaggerUIBundle({{
            url: window.location.pathname.replace(/\\/docs$/, '') + '/openapi.json',
            dom_id: '#swagger-ui',
            presets: [
                SwaggerUIBundle.presets.apis,
                SwaggerUIBundle.SwaggerUIStandalonePreset
            ],
            layout: "BaseLayout",
            deepLinking: true
        }})
        </script>
    </body>
    </html>
    """)


app.include_router(create_health_router(service_name=_CONFIG.name, database_engine=engine))
app.include_router(auth.router)
app.include_router(businesses.router)
app.include_router(socials.router)
app.include_router(admin.router)


@app.get("/")
def root():
    return {
        "service": _CONFIG.name,
        "status": "ok",
        "docs_url": "/docs",
    }
