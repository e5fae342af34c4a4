"""Session token issued after sign-in.

Tokens are global (not workspace-scoped). ``id`` is the lookup key and
``secret`` is compared in constant time by the auth layer.
"""

from __future__ import annotations

import re
import secrets
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from casebook.config import settings
from casebook.errors import ValidationError

_TOKEN_ID = re.compile(r"^[0-9a-f]{32}$")


def new_token_id() -> str:
    return secrets.token_hex(16)


def new_token_secret() -> str:
    return secrets.token_hex(32)


def validate_token_id(token_id: str) -> None:
    """Raise ValidationError unless ``token_id`` is 32 lowercase hex chars."""
    if not token_id or not _TOKEN_ID.match(token_id):
        raise ValidationError("invalid token id", token_id=token_id)


class Token(BaseModel):
    id: str
    secret: str
    sub: str
    email: str = ""
    name: str = ""
    expires_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def issue(cls, sub: str, email: str, name: str, ttl: timedelta | None = None) -> "Token":
        now = datetime.now(timezone.utc)
        return cls(
            id=new_token_id(),
            secret=new_token_secret(),
            sub=sub,
            email=email,
            name=name,
            expires_at=now + (ttl or timedelta(hours=settings.token_ttl_hours)),
            created_at=now,
        )

    def validate_token(self) -> None:
        """Check invariants before persistence."""
        validate_token_id(self.id)
        if not self.secret:
            raise ValidationError("token secret is empty", token_id=self.id)
        if not self.sub:
            raise ValidationError("token subject is empty", token_id=self.id)
        if self.expires_at is None:
            raise ValidationError("token expiry is missing", token_id=self.id)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return True
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def matches_secret(self, secret: str) -> bool:
        return secrets.compare_digest(self.secret, secret)
