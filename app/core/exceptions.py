"""Domain errors and the handlers that render them as JSON."""

from typing import Any, Dict, List

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class LinkPageError(Exception):
    """Base dos erros de domínio; cada subclasse define o status HTTP."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class InvalidInputError(LinkPageError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class ConflictError(LinkPageError):
    """E-mail ou slug já em uso."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Business with this email or slug already exists"


class InvalidCredentialsError(LinkPageError):
    """Mesma mensagem para e-mail desconhecido e senha errada."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class NotVerifiedError(LinkPageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Please verify your email before logging in"


class NotApprovedError(LinkPageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account is awaiting approval"


class InvalidOrExpiredTokenError(LinkPageError):
    """Token de verificação/redefinição desconhecido, já usado ou expirado."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired token"


class NotFoundError(LinkPageError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UnauthorizedError(LinkPageError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token is not valid"


class ForbiddenError(LinkPageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


# Handlers: {"message": ...} para erros de domínio, {"errors": [...]} para validação

def _format_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for error in exc.errors():
        location = error.get("loc", ())
        # loc vem como ("body", "email") / ("query", "token"); o primeiro item é a origem
        field_path = [str(part) for part in location[1:]] if len(location) > 1 else [str(p) for p in location]
        errors.append(
            {
                "field": ".".join(field_path),
                "message": error.get("msg", "Invalid value"),
                "location": str(location[0]) if location else "body",
            }
        )
    return errors


async def linkpage_error_handler(request: Request, exc: LinkPageError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": _format_validation_errors(exc)},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # detalhe só no log; o cliente recebe mensagem genérica
    logger.exception("internal_error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LinkPageError, linkpage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
