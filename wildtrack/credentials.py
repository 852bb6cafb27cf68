# wildtrack/credentials.py
"""Credential resolution for the login endpoint.

Login tries an ordered list of resolvers and stops at the first one that
recognises the username/password pair:

- ``StoreAdminResolver``: active administrators kept in the ``admins`` table
- ``EnvAdminResolver``: one administrator configured through the environment
  (``ADMIN_USERNAME`` / ``ADMIN_PASSWORD_HASH``)

Every failure collapses into ``None`` so the caller can answer with a single
"Invalid credentials" message whatever the reason was.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wildtrack import auth, models
from wildtrack.config import settings

logger = logging.getLogger(__name__)


def public_admin(admin: models.Admin) -> Dict[str, Any]:
    return {
        "id": str(admin.id),
        "username": admin.username,
        "name": admin.name,
        "email": admin.email,
        "role": admin.role,
    }


@lru_cache(maxsize=1)
def _unknown_user_hash() -> str:
    return auth.get_password_hash("unknown-admin-placeholder")


class CredentialResolver:
    def resolve(self, db: Session, username: str, password: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class StoreAdminResolver(CredentialResolver):
    def resolve(self, db, username, password):
        admin = (
            db.query(models.Admin)
            .filter(models.Admin.username == username, models.Admin.is_active.is_(True))
            .first()
        )
        if admin is None:
            # Same bcrypt cost as a wrong password for an existing username
            auth.verify_password(password, _unknown_user_hash())
            return None
        if not auth.verify_password(password, admin.password):
            return None

        identity = public_admin(admin)
        self.touch_last_login(db, admin)
        return identity

    @staticmethod
    def touch_last_login(db: Session, admin: models.Admin) -> None:
        # Best-effort: a failed write must not fail the login
        try:
            admin.last_login = models.utcnow()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Could not record last login for %s", admin.username, exc_info=True)


class EnvAdminResolver(CredentialResolver):
    def __init__(self, username: Optional[str], password_hash: Optional[str], role: str = "admin"):
        self.username = username
        self.password_hash = password_hash
        self.role = role

    @property
    def enabled(self) -> bool:
        return bool(self.username and self.password_hash)

    def resolve(self, db, username, password):
        if not self.enabled or username != self.username:
            return None
        if not auth.verify_password(password, self.password_hash):
            return None
        return {
            "id": f"env:{self.username}",
            "username": self.username,
            "name": "Administrator",
            "email": None,
            "role": self.role,
        }


def default_resolvers() -> Sequence[CredentialResolver]:
    return (
        StoreAdminResolver(),
        EnvAdminResolver(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD_HASH, settings.ADMIN_ROLE),
    )


def authenticate_admin(
    db: Session,
    username: str,
    password: str,
    resolvers: Optional[Sequence[CredentialResolver]] = None,
) -> Optional[Dict[str, Any]]:
    for resolver in resolvers if resolvers is not None else default_resolvers():
        identity = resolver.resolve(db, username, password)
        if identity is not None:
            return identity
    return None
