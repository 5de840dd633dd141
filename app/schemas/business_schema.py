from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.social_schema import PublicSocialLinkOut, SocialLinkOut

SLUG_PATTERN = r"^[A-Za-z0-9_-]+$"


class BusinessOut(BaseModel):
    """Visão do dono da conta; nunca carrega o hash da senha."""

    id: UUID
    name: str
    slug: str
    tagline: str
    logo: str
    email: str
    is_verified: bool
    is_approved: bool
    is_admin: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BusinessWithSocialsOut(BusinessOut):
    socials: List[SocialLinkOut] = Field(default_factory=list)


class BusinessUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, examples=["Joe's Coffee"])
    slug: Optional[str] = Field(default=None, min_length=1, pattern=SLUG_PATTERN, examples=["joescoffee"])
    tagline: Optional[str] = Field(default=None, examples=["Best Coffee"])
    logo: Optional[str] = Field(default=None, examples=["JO"])

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("name must not be empty")
        return value.strip() if value is not None else None


class PublicProfileOut(BaseModel):
    name: str
    slug: str
    tagline: str
    logo: str
    socials: List[PublicSocialLinkOut]


class QrCodeOut(BaseModel):
    url: str = Field(..., examples=["http://localhost:5173/b/joescoffee"])
    qr_code: str = Field(..., description="PNG image encoded as a data URL")


class BusinessSummaryOut(BaseModel):
    id: UUID
    name: str
    slug: str
    email: str
    created_at: datetime
    is_verified: bool
    is_approved: bool
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class ApprovalUpdate(BaseModel):
    is_approved: bool


class ApprovalOut(BaseModel):
    id: UUID
    name: str
    slug: str
    email: str
    is_verified: bool
    is_approved: bool

    model_config = ConfigDict(from_attributes=True)


class MessageOut(BaseModel):
    message: str
