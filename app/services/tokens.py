"""Single-use, expiring tokens delivered by email.

Email verification and password reset share the same lifecycle and differ
only in table and time-to-live, so both go through :func:`issue_token` and
:func:`consume_token` with a :class:`TokenPurpose`.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Type
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidOrExpiredTokenError
from app.core.security import generate_opaque_token
from app.models.business import Business
from app.models.token import EmailVerificationToken, PasswordResetToken, SingleUseTokenMixin

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TokenPurpose:
    name: str
    model: Type[SingleUseTokenMixin]
    ttl: timedelta


EMAIL_VERIFICATION = TokenPurpose("email_verification", EmailVerificationToken, timedelta(hours=24))
PASSWORD_RESET = TokenPurpose("password_reset", PasswordResetToken, timedelta(hours=1))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite devolve datetimes sem tzinfo; tudo é gravado em UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _delete_all_for_business(db: Session, purpose: TokenPurpose, business_id: UUID) -> int:
    return (
        db.query(purpose.model)
        .filter(purpose.model.business_id == business_id)
        .delete(synchronize_session=False)
    )


def issue_token(
    db: Session,
    purpose: TokenPurpose,
    business_id: UUID,
    now: Optional[datetime] = None,
) -> str:
    """Substitui o token pendente desta finalidade e devolve um novo.

    Só adiciona à sessão; quem chama faz o commit junto com a mudança de
    estado que gerou o token.
    """
    issued_at = now or _utcnow()
    superseded = _delete_all_for_business(db, purpose, business_id)
    raw = generate_opaque_token()
    db.add(purpose.model(token=raw, business_id=business_id, expires_at=issued_at + purpose.ttl))
    db.flush()

    logger.info(
        "token_issued",
        purpose=purpose.name,
        business_id=str(business_id),
        superseded=superseded,
    )
    return raw


def _delete_by_id(db: Session, purpose: TokenPurpose, token_id: UUID) -> int:
    return (
        db.query(purpose.model)
        .filter(purpose.model.id == token_id)
        .delete(synchronize_session=False)
    )


def consume_token(
    db: Session,
    purpose: TokenPurpose,
    raw: str,
    apply: Callable[[Business], None],
    now: Optional[datetime] = None,
) -> Business:
    """Resgata ``raw`` uma única vez: aplica ``apply`` na conta e apaga os tokens.

    Token desconhecido e token expirado falham do mesmo jeito; o expirado é
    removido antes do erro. Se duas requisições trazem o mesmo token, só faz
    commit aquela cujo DELETE remove a linha; a outra desfaz as alterações e
    falha como token desconhecido.
    """
    record = db.query(purpose.model).filter(purpose.model.token == raw).first()
    if record is None:
        raise InvalidOrExpiredTokenError()

    token_id = record.id
    business_id = record.business_id
    if _as_utc(record.expires_at) <= _as_utc(now or _utcnow()):
        _delete_by_id(db, purpose, token_id)
        db.commit()
        logger.info("token_expired", purpose=purpose.name, business_id=str(business_id))
        raise InvalidOrExpiredTokenError()

    business = db.get(Business, business_id)
    if business is None:
        # a conta sumiu entre a emissão e o uso; o cascade já deveria ter limpado
        _delete_by_id(db, purpose, token_id)
        db.commit()
        raise InvalidOrExpiredTokenError()

    apply(business)

    # a linha do token é a trava: quem não conseguir apagá-la perdeu a corrida
    if _delete_by_id(db, purpose, token_id) != 1:
        db.rollback()
        logger.info("token_already_consumed", purpose=purpose.name, business_id=str(business_id))
        raise InvalidOrExpiredTokenError()

    _delete_all_for_business(db, purpose, business_id)
    db.commit()

    logger.info("token_consumed", purpose=purpose.name, business_id=str(business_id))
    return business
