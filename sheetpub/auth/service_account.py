"""Google service account authentication via the JWT-bearer grant."""

import asyncio
import time
from dataclasses import dataclass

import httpx
from loguru import logger

from sheetpub.auth._jwt_sign import rs256_sign
from sheetpub.config.schema import SHEETS_READONLY_SCOPE, ServiceAccountCredential
from sheetpub.errors import TokenExchangeError

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
# Longest lifetime Google's token endpoint accepts for an assertion.
ASSERTION_LIFETIME = 3600


@dataclass
class _CachedToken:
    token: str
    expires_at: float


class TokenCache:
    """Access tokens keyed by (client_email, scope), dropped 60s before expiry."""

    def __init__(self, leeway: float = 60):
        self.leeway = leeway
        self._entries: dict[tuple[str, str], _CachedToken] = {}
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}

    def lock(self, key: tuple[str, str]) -> asyncio.Lock:
        """Per-key lock; concurrent misses for one key share a single exchange."""
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def get(self, key: tuple[str, str], now: float | None = None) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = time.time() if now is None else now
        if now >= entry.expires_at - self.leeway:
            del self._entries[key]
            return None
        return entry.token

    def put(self, key: tuple[str, str], token: str, expires_at: float) -> None:
        self._entries[key] = _CachedToken(token, expires_at)

    def clear(self) -> None:
        self._entries.clear()


class ServiceAccountAuthenticator:
    """
    Exchanges a signed service account assertion for an access token.

    Without a cache every ``get_token`` call signs a new assertion and asks
    the token endpoint for a fresh token.
    """

    def __init__(
        self,
        credential: ServiceAccountCredential,
        scope: str = SHEETS_READONLY_SCOPE,
        timeout: float = 30,
        cache: TokenCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.credential = credential
        self.scope = scope
        self.timeout = timeout
        self.cache = cache
        self._transport = transport

    @property
    def cache_key(self) -> tuple[str, str]:
        return (self.credential.client_email, self.scope)

    def build_assertion(self, now: int | None = None) -> str:
        """Build the signed JWT presented to the token endpoint."""
        iat = int(time.time()) if now is None else int(now)
        header = {"alg": "RS256", "typ": "JWT"}
        claims = {
            "iss": self.credential.client_email,
            "scope": self.scope,
            "aud": self.credential.token_uri,
            "exp": iat + ASSERTION_LIFETIME,
            "iat": iat,
        }
        return rs256_sign(header, claims, self.credential.private_key)

    async def get_token(self) -> str:
        """Get an access token for the configured scope."""
        if self.cache is None:
            return await self._fetch_token()

        async with self.cache.lock(self.cache_key):
            cached = self.cache.get(self.cache_key)
            if cached:
                return cached
            return await self._fetch_token()

    async def _fetch_token(self) -> str:
        now = int(time.time())
        assertion = self.build_assertion(now)
        data = await self._exchange(assertion)

        token = data.get("access_token")
        if not token or not isinstance(token, str):
            raise TokenExchangeError("token endpoint response has no access_token")

        if self.cache is not None:
            expires_in = data.get("expires_in", ASSERTION_LIFETIME)
            self.cache.put(self.cache_key, token, now + float(expires_in))

        logger.debug(f"Obtained access token for {self.credential.client_email}")
        return token

    async def _exchange(self, assertion: str) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.credential.token_uri,
                    data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                )
        except httpx.HTTPError as e:
            raise TokenExchangeError(f"token endpoint unreachable: {e}") from e

        if not resp.is_success:
            raise TokenExchangeError(
                f"token endpoint returned {resp.status_code}: {resp.text[:200]}"
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise TokenExchangeError("token endpoint returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise TokenExchangeError("token endpoint returned an unexpected body")
        return data
