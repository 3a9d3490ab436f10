"""Service account authentication and caller roles."""

from sheetpub.auth.roles import Role, resolve_role
from sheetpub.auth.service_account import ServiceAccountAuthenticator, TokenCache

__all__ = ["Role", "resolve_role", "ServiceAccountAuthenticator", "TokenCache"]
