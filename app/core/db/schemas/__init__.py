# Import models so Alembic and Base metadata are aware of them
from .auth import User, UserRole, OAuthAccount, AccessToken  # noqa: F401
