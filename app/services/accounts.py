"""Account lifecycle: signup, email verification, login, password reset, profile.

State per business::

    unverified & unapproved -> verified & unapproved -> verified & approved

Only the last state may log in or be seen publicly. Verification flips once,
through a token from the signup email; approval is toggled by an admin.
"""

from typing import Dict, Tuple
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import (
    InvalidCredentialsError,
    NotApprovedError,
    NotFoundError,
    NotVerifiedError,
)
from app.core.security import hash_password, issue_session, verify_password
from app.models.business import Business
from app.services import crud, validators
from app.schemas.auth_schema import SignupRequest
from app.schemas.business_schema import BusinessUpdate
from app.services import tokens
from app.services.mailer import Mailer, deliver_best_effort, password_reset_email, verification_email
from shared.config import LinksConfig

logger = structlog.get_logger(__name__)

RESET_REQUESTED_MESSAGE = "If that email exists, a reset link has been sent."


def get_business(db: Session, business_id: UUID) -> Business:
    business = crud.get_business(db, business_id)
    if business is None:
        raise NotFoundError("Business not found")
    return business


def signup(db: Session, mailer: Mailer, links: LinksConfig, payload: SignupRequest) -> Tuple[str, Business]:
    """Cria a conta (não verificada e não aprovada) com os sete links padrão.

    O e-mail de verificação é best effort. A sessão devolvida já permite
    montar o perfil, mas o login continua fechado até a conta ser verificada
    e aprovada.
    """
    validators.ensure_email_and_slug_available(db, payload.email, payload.slug)

    business = crud.create_business(
        db,
        name=payload.name,
        slug=payload.slug,
        tagline=payload.tagline,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    raw_token = tokens.issue_token(db, tokens.EMAIL_VERIFICATION, business.id)
    db.commit()
    db.refresh(business)

    logger.info("business_signed_up", business_id=str(business.id), slug=business.slug)
    deliver_best_effort(mailer, verification_email(business.email, raw_token, links), purpose="email_verification")

    return issue_session(business.id, business.is_admin), business


def verify_email(db: Session, raw_token: str) -> Dict[str, str]:
    def _mark_verified(business: Business) -> None:
        business.is_verified = True

    business = tokens.consume_token(db, tokens.EMAIL_VERIFICATION, raw_token, _mark_verified)
    logger.info("email_verified", business_id=str(business.id))
    return {"message": "Email verified successfully"}


def login(db: Session, email: str, password: str) -> Tuple[str, Business]:
    """Confere as travas da conta e só depois a senha.

    E-mail desconhecido e senha errada devolvem a mesma mensagem. Falta de
    verificação ou de aprovação é informada como tal, para o front explicar
    o bloqueio.
    """
    business = crud.get_business_by_email(db, email)
    if business is None:
        logger.info("login_rejected", reason="unknown_email")
        raise InvalidCredentialsError()

    if not business.is_verified:
        logger.info("login_rejected", reason="not_verified", business_id=str(business.id))
        raise NotVerifiedError()

    if not business.is_approved:
        logger.info("login_rejected", reason="not_approved", business_id=str(business.id))
        raise NotApprovedError()

    if not verify_password(password, business.password_hash):
        logger.info("login_rejected", reason="bad_password", business_id=str(business.id))
        raise InvalidCredentialsError()

    logger.info("login_succeeded", business_id=str(business.id))
    return issue_session(business.id, business.is_admin), business


def request_password_reset(db: Session, mailer: Mailer, links: LinksConfig, email: str) -> Dict[str, str]:
    business = crud.get_business_by_email(db, email)

    # mesma resposta exista ou não o e-mail
    if business is not None:
        raw_token = tokens.issue_token(db, tokens.PASSWORD_RESET, business.id)
        db.commit()
        logger.info("password_reset_requested", business_id=str(business.id))
        deliver_best_effort(mailer, password_reset_email(business.email, raw_token, links), purpose="password_reset")

    return {"message": RESET_REQUESTED_MESSAGE}


def reset_password(db: Session, raw_token: str, new_password: str) -> Dict[str, str]:
    new_hash = hash_password(new_password)

    def _store_password(business: Business) -> None:
        business.password_hash = new_hash

    business = tokens.consume_token(db, tokens.PASSWORD_RESET, raw_token, _store_password)
    logger.info("password_reset_completed", business_id=str(business.id))
    return {"message": "Password updated successfully"}


def update_profile(db: Session, business_id: UUID, payload: BusinessUpdate) -> Business:
    """Atualização parcial: campos omitidos (ou enviados como null) ficam como estão."""
    business = get_business(db, business_id)

    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if "slug" in changes and changes["slug"] != business.slug:
        validators.ensure_unique_slug(db, changes["slug"], business_id=business.id)

    if not changes:
        return business
    return crud.update_business(db, business, changes)


def delete_business(db: Session, business_id: UUID) -> Dict[str, str]:
    business = get_business(db, business_id)
    crud.delete_business(db, business)
    logger.info("business_deleted", business_id=str(business_id))
    return {"message": "Account deleted"}
