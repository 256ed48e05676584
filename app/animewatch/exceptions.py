"""Custom exceptions used by the watch session pipeline."""


class CatalogError(Exception):
    """Raised when an upstream catalog lookup fails."""


class CatalogRequestError(CatalogError):
    """Raised when the catalog cannot be reached or answers with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CatalogPayloadError(CatalogError):
    """Raised when a catalog response does not match the expected shape."""


class ServerNotFound(LookupError):
    """Raised when the selected server is missing from the current server list."""


class SessionNotFound(KeyError):
    """Raised when a watch session id is unknown to the manager."""
