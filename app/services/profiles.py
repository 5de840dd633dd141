"""Public page resolution and the QR code that points at it."""

import base64
from io import BytesIO
from typing import Any, Dict

import qrcode
from qrcode.image.pure import PyPNGImage
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.business import Business
from app.services import crud


def get_public_profile(db: Session, slug: str) -> Dict[str, Any]:
    """Devolve a parte pública de uma conta verificada e aprovada.

    Slug desconhecido, não verificado ou não aprovado dá o mesmo 404.
    Links sem URL ficam de fora.
    """
    business = crud.get_business_by_slug(db, slug)
    if business is None or not business.is_active:
        raise NotFoundError("Business not found")

    return {
        "name": business.name,
        "slug": business.slug,
        "tagline": business.tagline,
        "logo": business.logo,
        "socials": crud.list_public_social_links(db, business.id),
    }


def public_page_url(business: Business, frontend_base_url: str) -> str:
    return f"{frontend_base_url.rstrip('/')}/b/{business.slug}"


def qr_code_data_url(content: str) -> str:
    image = qrcode.make(content, image_factory=PyPNGImage)
    buffer = BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def build_qr_code(business: Business, frontend_base_url: str) -> Dict[str, str]:
    url = public_page_url(business, frontend_base_url)
    return {"url": url, "qr_code": qr_code_data_url(url)}
