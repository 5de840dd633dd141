from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.business_schema import SLUG_PATTERN, BusinessOut, BusinessWithSocialsOut

# bcrypt ignora o que passa de 72 bytes
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 72


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, examples=["Joe's Coffee"])
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN, examples=["joescoffee"])
    tagline: Optional[str] = Field(default=None, examples=["Best Coffee"])
    email: EmailStr = Field(..., examples=["joe@example.com"])
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH, examples=["secret1"])

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class SignupResponse(BaseModel):
    token: str
    business: BusinessOut


class LoginResponse(BaseModel):
    token: str
    business: BusinessWithSocialsOut
