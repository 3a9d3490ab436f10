"""Configuration schema using Pydantic."""

import json
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sheetpub.errors import CredentialParseError

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
SHEETS_READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"


class ServiceAccountCredential(BaseModel):
    """The parts of a Google service account key file used for signing."""

    model_config = {"frozen": True}

    client_email: str
    private_key: str
    token_uri: str = GOOGLE_TOKEN_URI

    @classmethod
    def from_json(cls, raw: str) -> "ServiceAccountCredential":
        """Parse a service account key file's JSON text."""
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            raise CredentialParseError(f"service account JSON is not valid: {e}") from e
        if not isinstance(data, dict):
            raise CredentialParseError("service account JSON must be an object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CredentialParseError(f"service account JSON is incomplete: {e}") from e


class TableDescriptor(BaseModel):
    """A sheet that can be published as <name>.json."""

    name: str
    priority: Literal["daily", "weekly"] = "weekly"
    role_required: Literal["editor", "admin"] = "editor"
    active: bool = True


def _table(name: str, priority: str, role_required: str = "editor") -> TableDescriptor:
    return TableDescriptor(name=name, priority=priority, role_required=role_required)


DEFAULT_TABLES: list[TableDescriptor] = [
    _table("menu", "daily"),
    _table("price", "daily"),
    _table("offer", "daily"),
    _table("booking", "daily"),
    _table("zakazfoods", "daily"),
    _table("rules", "weekly"),
    _table("reviews", "weekly"),
    _table("contacts", "weekly", "admin"),
    _table("infrastructure", "weekly"),
    _table("roomtypes", "weekly"),
    _table("gallery", "weekly"),
    _table("activities", "weekly"),
    _table("faq", "weekly"),
    _table("aboutus", "weekly", "admin"),
]


class Settings(BaseSettings):
    """
    Runtime settings, read from the environment (or a .env file).

    Field names map to upper-case environment variables, e.g. ``admin_token``
    is read from ``ADMIN_TOKEN``.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Caller tokens
    admin_token: str = ""
    viewer_token: str = ""

    # Google Sheets
    google_service_account_json: str = ""
    spreadsheet_id: str = "1_2eVHM6dqxqHrPqxX0Kb2xjcUa6fzRAjuQMFa5wK8rw"
    sheets_api_url: str = "https://sheets.googleapis.com/v4"
    sheets_scope: str = SHEETS_READONLY_SCOPE
    sheet_columns: str = "A:Z"
    token_cache: bool = False

    # GitHub
    github_token: str = ""
    github_repo: str = "Andreyhiitola/pelikan-alakol-site_v2"
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"

    # Tables and publishing
    tables: list[TableDescriptor] = Field(default_factory=lambda: list(DEFAULT_TABLES))
    publish_concurrency: int = Field(default=4, ge=1, le=32)
    http_timeout: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8787
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    def service_account(self) -> ServiceAccountCredential:
        """Parse the configured service account credential."""
        if not self.google_service_account_json:
            raise CredentialParseError("GOOGLE_SERVICE_ACCOUNT_JSON is not configured")
        return ServiceAccountCredential.from_json(self.google_service_account_json)

    def get_table(self, name: str) -> TableDescriptor | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None
