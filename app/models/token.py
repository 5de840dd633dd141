import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func
from app.core.database import Base


class SingleUseTokenMixin:
    """Colunas comuns às tabelas de tokens de uso único com expiração."""

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def business_id(cls):
        return Column(
            UUID(as_uuid=True),
            ForeignKey("businesses.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class EmailVerificationToken(SingleUseTokenMixin, Base):
    __tablename__ = "email_verification_tokens"

    business = relationship("Business", back_populates="verification_tokens")


class PasswordResetToken(SingleUseTokenMixin, Base):
    __tablename__ = "password_reset_tokens"

    business = relationship("Business", back_populates="password_reset_tokens")
