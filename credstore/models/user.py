# credstore/models/user.py
import enum
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String

from credstore.db.base import Base
from credstore.security.hashing import generate_salt, hash_password, verify_password


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    ROOT = "root"


_CREDENTIAL_KWARGS = frozenset({"password", "password_hash", "password_salt", "_password_hash", "_password_salt"})


def _enum_column(enum_cls, default):
    return Column(
        Enum(
            enum_cls,
            native_enum=False,
            length=16,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=default,
        index=True,
    )


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Only ever written together, by set_password(). Read through the
    # password_hash / password_salt properties.
    _password_hash = Column("password_hash", String(255), nullable=True)
    _password_salt = Column("password_salt", String(64), nullable=True)

    # Kept for migrating accounts from an older hash scheme. Never checked
    # by validate_password().
    legacy_password_hash = Column(String(255), nullable=True)

    session_token = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)

    status = _enum_column(UserStatus, UserStatus.ACTIVE)
    role = _enum_column(UserRole, UserRole.USER)
    settings = Column(JSON, nullable=False, default=dict)

    created = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    last_login = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __init__(self, **kwargs):
        blocked = _CREDENTIAL_KWARGS.intersection(kwargs)
        if blocked:
            raise TypeError(f"{', '.join(sorted(blocked))} cannot be passed to User(); use set_password()")

        # Column defaults only apply on flush; apply them up front so a
        # fresh User is usable before it reaches the store.
        kwargs.setdefault("status", UserStatus.ACTIVE)
        kwargs.setdefault("role", UserRole.USER)
        kwargs.setdefault("settings", {})
        now = _utcnow()
        kwargs.setdefault("created", now)
        kwargs.setdefault("last_login", now)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} status={self.status}>"

    # --- Credentials ---

    def set_password(self, password: str) -> None:
        """
        Replace the stored credentials with a fresh salt and hash for password.

        This is the only way password_salt and password_hash are written.
        Not synchronized: callers must not set the password of the same
        user from two tasks at once.
        """
        salt = generate_salt()
        password_hash = hash_password(salt, password)
        self._password_salt = salt
        self._password_hash = password_hash

    def validate_password(self, candidate: str) -> bool:
        """Return True if candidate matches the stored password. False when none is set."""
        return verify_password(candidate, self._password_salt, self._password_hash)

    @property
    def password_hash(self) -> Optional[str]:
        return self._password_hash

    @property
    def password_salt(self) -> Optional[str]:
        return self._password_salt

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    # --- Lifecycle ---

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def mark_deleted(self) -> None:
        self.status = UserStatus.DELETED

    def touch_login(self) -> None:
        self.last_login = _utcnow()

    # --- Utilities ---

    def split_name(self) -> Dict[str, Optional[str]]:
        """
        Split the display name into first, last and other (middle) parts.

        "Ada Augusta King Lovelace" -> first="Ada", last="Lovelace",
        other="Augusta King".
        """
        bits = (self.name or "").split()
        if not bits:
            return {"first": None, "last": None, "other": None}
        return {
            "first": bits[0],
            "last": bits[-1] if len(bits) > 1 else None,
            "other": " ".join(bits[1:-1]) if len(bits) > 2 else None,
        }
