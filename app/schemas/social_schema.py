from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator


class SocialLinkOut(BaseModel):
    id: UUID
    platform: str
    url: str
    icon: str
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class PublicSocialLinkOut(BaseModel):
    platform: str = Field(..., examples=["Instagram"])
    url: str = Field(..., examples=["https://instagram.com/joescoffee"])
    icon: str = Field(..., examples=["📷"])

    model_config = ConfigDict(from_attributes=True)


class SocialLinkUpdate(BaseModel):
    platform: str = Field(..., min_length=1, examples=["Instagram"])
    # URL vazia "desconfigura" a plataforma
    url: str = Field(default="", examples=["https://instagram.com/joescoffee"])
    icon: Optional[str] = None
    display_order: Optional[int] = Field(default=None, ge=0)


class SocialLinksUpdate(BaseModel):
    socials: List[SocialLinkUpdate]


class SocialLinkCreate(BaseModel):
    platform: str = Field(..., min_length=1, examples=["Threads"])
    url: str = Field(..., examples=["https://threads.net/@joescoffee"])
    icon: Optional[str] = Field(default=None, examples=["🧵"])
    display_order: Optional[int] = Field(default=None, ge=0)

    @field_validator("platform")
    @classmethod
    def _platform_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("platform must not be empty")
        return value

    @field_validator("url")
    @classmethod
    def _url_is_absolute_http(cls, value: str) -> str:
        # guarda a string como veio; HttpUrl só valida
        value = value.strip()
        try:
            HttpUrl(value)
        except ValidationError:
            raise ValueError("url must be an absolute http(s) URL")
        return value
