from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.auth_dependencies import get_session
from app.core.database import get_db
from app.core.dependencies import get_links_config, get_mailer
from app.core.exceptions import InvalidInputError
from app.core.security import SessionContext
from app.schemas.auth_schema import (
    LoginRequest,
    LoginResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    SignupRequest,
    SignupResponse,
)
from app.schemas.business_schema import BusinessWithSocialsOut, MessageOut
from app.services import accounts
from app.services.mailer import Mailer
from shared.config import LinksConfig

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=SignupResponse)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    links: LinksConfig = Depends(get_links_config),
):
    token, business = accounts.signup(db, mailer, links, payload)
    return {"token": token, "business": business}


@router.get("/verify-email", response_model=MessageOut)
def verify_email(token: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    if not token:
        raise InvalidInputError("Token is required")
    return accounts.verify_email(db, token)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    token, business = accounts.login(db, payload.email, payload.password)
    return {"token": token, "business": business}


@router.post("/request-password-reset", response_model=MessageOut)
def request_password_reset(
    payload: PasswordResetRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    links: LinksConfig = Depends(get_links_config),
):
    return accounts.request_password_reset(db, mailer, links, payload.email)


@router.post("/reset-password", response_model=MessageOut)
def reset_password(payload: PasswordResetConfirm, db: Session = Depends(get_db)):
    return accounts.reset_password(db, payload.token, payload.new_password)


@router.get("/me", response_model=BusinessWithSocialsOut)
def get_me(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return accounts.get_business(db, session.business_id)
