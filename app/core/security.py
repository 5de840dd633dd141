import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jwt, JWTError
from passlib.context import CryptContext
from shared import load_service_config

from app.core.exceptions import UnauthorizedError

_config = load_service_config("linkpage").security

pwd_context = CryptContext(
    schemes=["bcrypt", "sha256_crypt"],
    deprecated="auto",
    bcrypt__rounds=_config.bcrypt_rounds,
)

SECRET_KEY = _config.secret_key
JWT_ALGORITHM = _config.jwt_algorithm
SESSION_TTL = timedelta(days=_config.session_ttl_days)

# 32 bytes aleatórios -> 64 caracteres hex, igual ao link enviado por e-mail
OPAQUE_TOKEN_BYTES = 32


@dataclass(frozen=True)
class SessionContext:
    """Claims de um token de sessão válido, passados explicitamente aos handlers."""

    business_id: UUID
    is_admin: bool


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # hash corrompido ou de esquema desconhecido conta como senha errada
        return False


def issue_session(business_id: UUID, is_admin: bool, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    to_encode = {
        "sub": str(business_id),
        "is_admin": bool(is_admin),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + SESSION_TTL).timestamp()),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_session(token: str) -> SessionContext:
    """Valida assinatura e expiração; qualquer outro problema vira 401."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
        business_id = UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError):
        raise UnauthorizedError("Token is not valid")

    return SessionContext(business_id=business_id, is_admin=payload.get("is_admin") is True)


def generate_opaque_token() -> str:
    return secrets.token_hex(OPAQUE_TOKEN_BYTES)
