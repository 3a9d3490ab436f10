import base64

import httpx
import pytest

from sheetpub.auth.service_account import ServiceAccountAuthenticator
from sheetpub.errors import PublishError, UpstreamFetchError
from sheetpub.github.client import GitHubClient
from sheetpub.sheets.client import SheetsClient


def _sheets(credential, apis) -> SheetsClient:
    auth = ServiceAccountAuthenticator(credential, transport=apis.transport)
    return SheetsClient(auth, "sheet123", transport=apis.transport)


def _github(apis) -> GitHubClient:
    return GitHubClient("gh-token", "owner/site", transport=apis.transport)


def test_values_url_targets_named_range(credential) -> None:
    client = SheetsClient(ServiceAccountAuthenticator(credential), "sheet123")
    assert client.values_url("menu") == (
        "https://sheets.googleapis.com/v4/spreadsheets/sheet123/values/menu!A:Z"
    )


async def test_fetch_values_returns_rows(credential, apis) -> None:
    apis.sheets["menu"] = [["name"], ["Plov"]]

    assert await _sheets(credential, apis).fetch_values("menu") == [["name"], ["Plov"]]


async def test_fetch_values_error_status_raises(credential, apis) -> None:
    with pytest.raises(UpstreamFetchError, match="400"):
        await _sheets(credential, apis).fetch_values("missing")


async def test_fetch_values_without_values_raises(credential, apis) -> None:
    apis.sheets["empty"] = []

    with pytest.raises(UpstreamFetchError, match="No data"):
        await _sheets(credential, apis).fetch_values("empty")


async def test_put_file_creates_without_sha(apis) -> None:
    result = await _github(apis).put_file("menu.json", '[{"name": "Чай"}]', "Update menu.json")

    assert result is None

    body = apis.puts["menu.json"]
    assert "sha" not in body
    assert body["branch"] == "main"
    assert body["message"] == "Update menu.json"
    assert base64.b64decode(body["content"]).decode("utf-8") == '[{"name": "Чай"}]'


async def test_put_file_updates_with_prior_sha(apis) -> None:
    apis.existing_sha["menu.json"] = "abc123"

    await _github(apis).put_file("menu.json", "[]", "Update menu.json")

    assert apis.puts["menu.json"]["sha"] == "abc123"


async def test_put_file_rejection_raises(apis) -> None:
    apis.rejected_paths.add("menu.json")

    with pytest.raises(PublishError, match="409"):
        await _github(apis).put_file("menu.json", "[]", "Update menu.json")


async def test_github_sends_token_auth_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "GET":
            return httpx.Response(404)
        return httpx.Response(200, json={})

    client = GitHubClient("gh-token", "owner/site", transport=httpx.MockTransport(handler))
    await client.put_file("faq.json", "[]", "msg")

    assert [r.method for r in seen] == ["GET", "PUT"]
    assert all(r.headers["authorization"] == "token gh-token" for r in seen)
    assert seen[0].url.params["ref"] == "main"
