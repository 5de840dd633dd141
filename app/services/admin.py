"""Administrative gate: account listing and approval."""

from typing import List
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.business import Business
from app.services import crud

logger = structlog.get_logger(__name__)


def list_businesses(db: Session) -> List[Business]:
    return crud.list_businesses(db)


def set_approval(db: Session, business_id: UUID, approved: bool) -> Business:
    business = crud.get_business(db, business_id)
    if business is None:
        raise NotFoundError("Business not found")

    business.is_approved = approved
    db.commit()
    db.refresh(business)

    logger.info("approval_changed", business_id=str(business_id), is_approved=approved)
    return business
