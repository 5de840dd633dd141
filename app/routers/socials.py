from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.auth_dependencies import get_session
from app.core.database import get_db
from app.core.security import SessionContext
from app.schemas.business_schema import MessageOut
from app.schemas.social_schema import SocialLinkCreate, SocialLinkOut, SocialLinksUpdate
from app.services import socials

router = APIRouter(prefix="/socials", tags=["Socials"])


@router.get("", response_model=List[SocialLinkOut])
def list_socials(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return socials.list_links(db, session.business_id)


@router.put("", response_model=List[SocialLinkOut])
def update_socials(
    payload: SocialLinksUpdate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return socials.update_links(db, session.business_id, payload.socials)


@router.post("", response_model=SocialLinkOut, status_code=status.HTTP_201_CREATED)
def add_social(
    payload: SocialLinkCreate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return socials.add_link(db, session.business_id, payload)


@router.delete("/{link_id}", response_model=MessageOut)
def delete_social(
    link_id: UUID,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return socials.remove_link(db, session.business_id, link_id)
