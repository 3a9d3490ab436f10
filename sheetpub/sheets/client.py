"""Google Sheets values API client."""

from urllib.parse import quote

import httpx
from loguru import logger

from sheetpub.auth.service_account import ServiceAccountAuthenticator
from sheetpub.errors import UpstreamFetchError


class SheetsClient:
    """Reads a sheet's cell values as a list of rows."""

    def __init__(
        self,
        auth: ServiceAccountAuthenticator,
        spreadsheet_id: str,
        api_url: str = "https://sheets.googleapis.com/v4",
        columns: str = "A:Z",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.auth = auth
        self.spreadsheet_id = spreadsheet_id
        self.api_url = api_url.rstrip("/")
        self.columns = columns
        self.timeout = timeout
        self._transport = transport

    def values_url(self, sheet_name: str) -> str:
        cell_range = quote(f"{sheet_name}!{self.columns}", safe="!:")
        return f"{self.api_url}/spreadsheets/{self.spreadsheet_id}/values/{cell_range}"

    async def fetch_values(self, sheet_name: str) -> list[list]:
        """Fetch every row of a sheet. Row 0 is the header row."""
        token = await self.auth.get_token()
        url = self.values_url(sheet_name)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Google Sheets unreachable: {e}") from e

        if not resp.is_success:
            raise UpstreamFetchError(
                f"Google Sheets returned {resp.status_code} for '{sheet_name}': {resp.text[:200]}"
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Google Sheets returned a non-JSON body for '{sheet_name}'") from e

        values = data.get("values") if isinstance(data, dict) else None
        if not values:
            raise UpstreamFetchError("No data from Google Sheets")

        logger.debug(f"Sheets: fetched {len(values)} rows from '{sheet_name}'")
        return values
