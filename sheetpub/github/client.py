"""GitHub contents API client for upserting files on a branch."""

import base64
from typing import Any

import httpx
from loguru import logger

from sheetpub.errors import PublishError


class GitHubClient:
    """Creates or updates files in a repository through the contents API."""

    def __init__(
        self,
        token: str,
        repo: str,
        branch: str = "main",
        api_url: str = "https://api.github.com",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.repo = repo
        self.branch = branch
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "sheetpub",
        }

    def contents_url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.repo}/contents/{path.lstrip('/')}"

    async def get_sha(self, path: str) -> str | None:
        """Return the blob SHA of an existing file, or None if it does not exist."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(
                    self.contents_url(path),
                    headers=self._headers,
                    params={"ref": self.branch},
                )
        except httpx.HTTPError as e:
            raise PublishError(f"GitHub unreachable: {e}") from e

        if resp.status_code != 200:
            logger.debug(f"GitHub: no existing {path} on {self.branch} ({resp.status_code})")
            return None
        try:
            return resp.json().get("sha")
        except (ValueError, AttributeError):
            return None

    async def put_file(self, path: str, content: str, message: str) -> None:
        """Create or update a file. Updates carry the previous SHA."""
        sha = await self.get_sha(path)

        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            body["sha"] = sha

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.put(self.contents_url(path), headers=self._headers, json=body)
        except httpx.HTTPError as e:
            raise PublishError(f"GitHub unreachable: {e}") from e

        if not resp.is_success:
            raise PublishError(f"GitHub rejected {path}: {resp.status_code} {resp.text[:200]}")

        logger.info(f"GitHub: {'updated' if sha else 'created'} {path} on {self.repo}@{self.branch}")
