import json
from typing import Any

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from sheetpub.config.schema import ServiceAccountCredential, Settings, TableDescriptor


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def ec_pem() -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def credential(rsa_pem) -> ServiceAccountCredential:
    return ServiceAccountCredential(
        client_email="svc@example.com",
        private_key=rsa_pem,
        token_uri="https://token.example/token",
    )


@pytest.fixture
def settings(credential) -> Settings:
    return Settings(
        _env_file=None,
        admin_token="admin-secret",
        viewer_token="viewer-secret",
        google_service_account_json=credential.model_dump_json(),
        github_token="gh-token",
        github_repo="owner/site",
        spreadsheet_id="sheet123",
        tables=[
            TableDescriptor(name="menu", priority="daily"),
            TableDescriptor(name="price", priority="daily"),
            TableDescriptor(name="faq", priority="weekly"),
        ],
    )


class FakeApis:
    """Stands in for the token endpoint, Sheets and GitHub behind one MockTransport."""

    def __init__(self) -> None:
        self.sheets: dict[str, Any] = {}
        self.existing_sha: dict[str, str] = {}
        self.rejected_paths: set[str] = set()
        self.token_requests: list[dict[str, str]] = []
        self.puts: dict[str, dict[str, Any]] = {}
        self.token_response: tuple[int, Any] = (200, {"access_token": "ya29.test", "expires_in": 3600})

    def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == "token.example":
            form = dict(httpx.QueryParams(request.content.decode()))
            self.token_requests.append(form)
            status, body = self.token_response
            return httpx.Response(status, json=body)

        if host == "sheets.googleapis.com":
            assert request.headers["authorization"] == "Bearer ya29.test"
            sheet = request.url.path.rsplit("/", 1)[-1].split("!")[0]
            if sheet not in self.sheets:
                return httpx.Response(400, json={"error": {"message": "Unable to parse range"}})
            return httpx.Response(200, json={"range": f"{sheet}!A1:Z9", "values": self.sheets[sheet]})

        if host == "api.github.com":
            path = request.url.path.split("/contents/", 1)[1]
            if request.method == "GET":
                sha = self.existing_sha.get(path)
                if sha is None:
                    return httpx.Response(404, json={"message": "Not Found"})
                return httpx.Response(200, json={"sha": sha, "path": path})
            if path in self.rejected_paths:
                return httpx.Response(409, json={"message": "conflict"})
            self.puts[path] = json.loads(request.content)
            return httpx.Response(201, json={"content": {"path": path}})

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def apis() -> FakeApis:
    return FakeApis()
