from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.exceptions import ConflictError
from app.models.business import Business


def ensure_email_and_slug_available(db: Session, email: str, slug: str) -> None:
    query = db.query(Business.id).filter(or_(Business.email == email, Business.slug == slug))
    if query.first():
        raise ConflictError("Business with this email or slug already exists")


def ensure_unique_slug(db: Session, slug: str, business_id: UUID | None = None) -> None:
    query = db.query(Business.id).filter(Business.slug == slug)
    if business_id:
        query = query.filter(Business.id != business_id)

    if query.first():
        raise ConflictError("Slug is already taken")
