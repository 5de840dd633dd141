import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


# Ordem canônica das plataformas criadas no cadastro (display_order = posição)
DEFAULT_PLATFORMS = (
    ("Instagram", "📷"),
    ("TikTok", "🎵"),
    ("YouTube", "▶️"),
    ("Facebook", "👍"),
    ("X", "✖️"),
    ("LinkedIn", "💼"),
    ("Website", "🌐"),
)


class Business(Base):
    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    tagline = Column(String, nullable=False, default="")
    logo = Column(String, nullable=False, default="")
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    socials = relationship(
        "SocialLink",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="SocialLink.display_order",
    )
    verification_tokens = relationship(
        "EmailVerificationToken",
        back_populates="business",
        cascade="all, delete-orphan",
    )
    password_reset_tokens = relationship(
        "PasswordResetToken",
        back_populates="business",
        cascade="all, delete-orphan",
    )

    @property
    def is_active(self) -> bool:
        """Verificada e aprovada: pode fazer login e aparece publicamente."""
        return bool(self.is_verified and self.is_approved)


class SocialLink(Base):
    __tablename__ = "social_links"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    platform = Column(String, nullable=False)
    url = Column(String, nullable=False, default="")
    icon = Column(String, nullable=False, default="")
    display_order = Column(Integer, nullable=False, default=0)

    business = relationship("Business", back_populates="socials")


def default_social_links():
    """Os sete links vazios com que toda conta nova começa."""
    return [
        SocialLink(platform=platform, url="", icon=icon, display_order=position)
        for position, (platform, icon) in enumerate(DEFAULT_PLATFORMS)
    ]
