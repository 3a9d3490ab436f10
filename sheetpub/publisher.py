"""Publish sheets as JSON files: the operations behind the HTTP routes."""

import asyncio
import json
from typing import Literal

import httpx
from loguru import logger
from pydantic import BaseModel

from sheetpub.auth.service_account import ServiceAccountAuthenticator, TokenCache
from sheetpub.config.schema import Settings, TableDescriptor
from sheetpub.errors import SheetPublishError
from sheetpub.github.client import GitHubClient
from sheetpub.sheets.client import SheetsClient
from sheetpub.sheets.transform import rows_to_records


class PublishResult(BaseModel):
    """Outcome of publishing one table."""

    table: str
    status: Literal["success", "error"]
    rows: int | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class BatchResult(BaseModel):
    """Outcome of publishing every active table."""

    success: bool = True
    published: int
    failed: int
    results: list[PublishResult]


class Publisher:
    """
    Fetches sheets, converts them to records and commits <table>.json.

    Errors from any step are turned into an error ``PublishResult``; nothing
    raised by the clients escapes ``publish_one`` or ``publish_all``.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self._transport = transport
        self._token_cache = TokenCache() if settings.token_cache else None
        # Contents API writes to one branch must not overlap.
        self._commit_lock = asyncio.Lock()

    def list_config(self) -> list[TableDescriptor]:
        return list(self.settings.tables)

    def _sheets_client(self) -> SheetsClient:
        s = self.settings
        auth = ServiceAccountAuthenticator(
            s.service_account(),
            scope=s.sheets_scope,
            timeout=s.http_timeout,
            cache=self._token_cache,
            transport=self._transport,
        )
        return SheetsClient(
            auth,
            s.spreadsheet_id,
            api_url=s.sheets_api_url,
            columns=s.sheet_columns,
            timeout=s.http_timeout,
            transport=self._transport,
        )

    def _github_client(self) -> GitHubClient:
        s = self.settings
        return GitHubClient(
            s.github_token,
            s.github_repo,
            branch=s.github_branch,
            api_url=s.github_api_url,
            timeout=s.http_timeout,
            transport=self._transport,
        )

    async def publish_one(self, table: str, message: str | None = None) -> PublishResult:
        """Publish a single sheet as <table>.json."""
        filename = f"{table}.json"
        message = message or f"Update {filename} from admin panel"
        try:
            rows = await self._sheets_client().fetch_values(table)
            records = rows_to_records(rows)
            content = json.dumps(records, indent=2, ensure_ascii=False)
            async with self._commit_lock:
                await self._github_client().put_file(filename, content, message)
        except SheetPublishError as e:
            logger.error(f"Publish of '{table}' failed: {e}")
            return PublishResult(table=table, status="error", message=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error publishing '{table}'")
            return PublishResult(table=table, status="error", message=str(e) or type(e).__name__)

        logger.info(f"Published '{table}' ({len(records)} rows)")
        return PublishResult(table=table, status="success", rows=len(records))

    async def publish_all(self) -> BatchResult:
        """Publish every active table; one failure never stops the others."""
        tables = [t.name for t in self.settings.tables if t.active]
        semaphore = asyncio.Semaphore(self.settings.publish_concurrency)

        async def _publish(name: str) -> PublishResult:
            async with semaphore:
                return await self.publish_one(name, f"Update {name}.json - batch publish")

        logger.info(f"Batch publish of {len(tables)} tables")
        results = list(await asyncio.gather(*(_publish(name) for name in tables)))

        published = sum(1 for r in results if r.ok)
        failed = len(results) - published
        logger.info(f"Batch publish done: {published} published, {failed} failed")
        return BatchResult(published=published, failed=failed, results=results)
