"""Caller roles derived from static tokens."""

import secrets
from enum import Enum

from sheetpub.config.schema import Settings


class Role(str, Enum):
    ANONYMOUS = "anonymous"
    VIEWER = "viewer"
    ADMIN = "admin"

    @property
    def can_view(self) -> bool:
        return self in (Role.VIEWER, Role.ADMIN)

    @property
    def can_publish(self) -> bool:
        return self is Role.ADMIN


def _matches(token: str, secret: str) -> bool:
    # An unset secret must never match an empty token.
    if not token or not secret:
        return False
    return secrets.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


def resolve_role(token: str | None, settings: Settings) -> Role:
    """Map a caller token to a role. The admin token also grants viewing."""
    token = token or ""
    if _matches(token, settings.admin_token):
        return Role.ADMIN
    if _matches(token, settings.viewer_token):
        return Role.VIEWER
    return Role.ANONYMOUS
