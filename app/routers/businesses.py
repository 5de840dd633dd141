from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.auth_dependencies import get_session
from app.core.database import get_db
from app.core.dependencies import get_links_config
from app.core.security import SessionContext
from app.schemas.business_schema import BusinessOut, BusinessUpdate, MessageOut, PublicProfileOut, QrCodeOut
from app.services import accounts, profiles
from shared.config import LinksConfig

router = APIRouter(prefix="/businesses", tags=["Businesses"])


@router.put("/me", response_model=BusinessOut)
def update_me(
    payload: BusinessUpdate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return accounts.update_profile(db, session.business_id, payload)


@router.delete("/me", response_model=MessageOut)
def delete_me(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return accounts.delete_business(db, session.business_id)


@router.get("/me/qr-code", response_model=QrCodeOut)
def get_qr_code(
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
    links: LinksConfig = Depends(get_links_config),
):
    business = accounts.get_business(db, session.business_id)
    return profiles.build_qr_code(business, links.frontend_base_url)


@router.get("/{slug}", response_model=PublicProfileOut)
def get_public_profile(slug: str, db: Session = Depends(get_db)):
    return profiles.get_public_profile(db, slug)
