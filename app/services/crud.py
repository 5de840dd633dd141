from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.core.exceptions import ConflictError
from app.models.business import Business, SocialLink, default_social_links


def logo_from_name(name: str) -> str:
    return name[:2].upper()


def create_business(
    db: Session,
    *,
    name: str,
    slug: str,
    tagline: Optional[str],
    email: str,
    password_hash: str,
) -> Business:
    """Adiciona a conta e os sete links padrão à sessão (sem commit)."""
    business = Business(
        name=name,
        slug=slug,
        tagline=tagline or "",
        logo=logo_from_name(name),
        email=email,
        password_hash=password_hash,
        is_verified=False,
        is_approved=False,
        is_admin=False,
    )
    business.socials = default_social_links()
    db.add(business)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError()
    return business


def get_business(db: Session, business_id: UUID) -> Optional[Business]:
    return db.query(Business).filter(Business.id == business_id).first()


def get_business_by_email(db: Session, email: str) -> Optional[Business]:
    return db.query(Business).filter(Business.email == email).first()


def get_business_by_slug(db: Session, slug: str) -> Optional[Business]:
    return db.query(Business).filter(Business.slug == slug).first()


def list_businesses(db: Session) -> List[Business]:
    return db.query(Business).order_by(Business.created_at.desc()).all()


def update_business(db: Session, business: Business, changes: Dict[str, str]) -> Business:
    for field, value in changes.items():
        setattr(business, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError()
    db.refresh(business)
    return business


def delete_business(db: Session, business: Business) -> None:
    db.delete(business)
    db.commit()


def list_social_links(db: Session, business_id: UUID) -> List[SocialLink]:
    return (
        db.query(SocialLink)
        .filter(SocialLink.business_id == business_id)
        .order_by(SocialLink.display_order.asc())
        .all()
    )


def list_public_social_links(db: Session, business_id: UUID) -> List[SocialLink]:
    return (
        db.query(SocialLink)
        .filter(SocialLink.business_id == business_id, SocialLink.url != "")
        .order_by(SocialLink.display_order.asc())
        .all()
    )


def get_social_link(db: Session, business_id: UUID, link_id: UUID) -> Optional[SocialLink]:
    return (
        db.query(SocialLink)
        .filter(SocialLink.id == link_id, SocialLink.business_id == business_id)
        .first()
    )


def next_display_order(db: Session, business_id: UUID) -> int:
    current_max = (
        db.query(func.max(SocialLink.display_order))
        .filter(SocialLink.business_id == business_id)
        .scalar()
    )
    return 0 if current_max is None else current_max + 1
