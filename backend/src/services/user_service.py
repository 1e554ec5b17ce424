"""Service layer for the current-user identity."""
from core.config import Settings, get_settings
from models.user import User


def get_current_user(settings: Settings | None = None) -> User:
    """
    Return the signed-in user.

    There is no authentication; the identity comes from configuration. Every
    note operation the editor performs is scoped to this user's id.
    """
    settings = settings or get_settings()
    return User(
        id=settings.current_user_id,
        name=settings.current_user_name,
        email=settings.current_user_email,
    )
