"""Errors raised while authenticating, fetching and publishing tables."""


class SheetPublishError(Exception):
    """Base class for every error a publish operation can report."""


class CredentialParseError(SheetPublishError):
    """The service account credential or its private key cannot be decoded."""


class SigningError(SheetPublishError):
    """The assertion could not be signed with the supplied key."""


class TokenExchangeError(SheetPublishError):
    """The token endpoint did not hand back an access token."""


class UpstreamFetchError(SheetPublishError):
    """The spreadsheet API was unavailable or returned a malformed response."""


class TransformError(SheetPublishError):
    """Sheet rows could not be turned into records."""


class PublishError(SheetPublishError):
    """GitHub rejected the commit."""
