from app.models.business import DEFAULT_PLATFORMS, Business, SocialLink, default_social_links
from app.models.token import EmailVerificationToken, PasswordResetToken

__all__ = [
    "DEFAULT_PLATFORMS",
    "Business",
    "SocialLink",
    "default_social_links",
    "EmailVerificationToken",
    "PasswordResetToken",
]
