"""Owner-side management of a business's social links."""

from typing import Dict, List
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.business import SocialLink
from app.services import accounts, crud
from app.schemas.social_schema import SocialLinkCreate, SocialLinkUpdate

logger = structlog.get_logger(__name__)


def list_links(db: Session, business_id: UUID) -> List[SocialLink]:
    accounts.get_business(db, business_id)
    return crud.list_social_links(db, business_id)


def update_links(db: Session, business_id: UUID, entries: List[SocialLinkUpdate]) -> List[SocialLink]:
    """Reescreve os links pelo nome da plataforma.

    A URL é sempre sobrescrita; ícone e ordem só quando enviados.
    Plataformas que a conta não tem são ignoradas (nada é inserido).
    """
    accounts.get_business(db, business_id)

    links_by_platform: Dict[str, List[SocialLink]] = {}
    for link in crud.list_social_links(db, business_id):
        links_by_platform.setdefault(link.platform, []).append(link)

    for entry in entries:
        for link in links_by_platform.get(entry.platform, []):
            link.url = entry.url
            if entry.icon is not None:
                link.icon = entry.icon
            if entry.display_order is not None:
                link.display_order = entry.display_order

    db.commit()
    return crud.list_social_links(db, business_id)


def add_link(db: Session, business_id: UUID, payload: SocialLinkCreate) -> SocialLink:
    # sessão de conta já apagada cai aqui em vez de estourar a FK
    accounts.get_business(db, business_id)

    display_order = payload.display_order
    if display_order is None:
        display_order = crud.next_display_order(db, business_id)

    link = SocialLink(
        business_id=business_id,
        platform=payload.platform,
        url=payload.url,
        icon=payload.icon or "",
        display_order=display_order,
    )
    db.add(link)
    db.commit()
    db.refresh(link)

    logger.info("social_link_added", business_id=str(business_id), platform=link.platform)
    return link


def remove_link(db: Session, business_id: UUID, link_id: UUID) -> Dict[str, str]:
    accounts.get_business(db, business_id)

    # só apaga se o link pertence ao dono da sessão
    link = crud.get_social_link(db, business_id, link_id)
    if link is None:
        raise NotFoundError("Social link not found")

    db.delete(link)
    db.commit()
    logger.info("social_link_removed", business_id=str(business_id), platform=link.platform)
    return {"message": "Social link deleted"}
