"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import os
import logging
from app.models.user import User
from app.core.security import hash_password

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> User | None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role="admin"
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_NAME     (default: "Admin")
      ADMIN_EMAIL    (default: "admin@example.com")
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    if await User.filter(role="admin").exists():
        return None

    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    admin_name = os.getenv("ADMIN_NAME", "Admin").strip()
    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()

    # Email is unique across roles; never take over an existing account
    if await User.filter(email=admin_email).exists():
        logger.warning("[bootstrap] ADMIN_EMAIL=%s already belongs to another account -> skip.", admin_email)
        return None

    u = await User.create(
        name=admin_name,
        email=admin_email,
        password_hash=hash_password(admin_password),
        role="admin",
    )
    logger.warning("[bootstrap] Created default admin -> name=%s email=%s id=%s",
                   u.name, u.email, u.id)
    return u
