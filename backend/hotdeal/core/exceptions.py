"""Custom exception classes for the ingestion pipeline."""


class HotdealException(Exception):
    """Base exception for all hotdeal errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigError(HotdealException):
    """Raised when configuration cannot be loaded or validated."""

    def __init__(self, source: str, message: str):
        super().__init__(f"Invalid configuration in {source}: {message}")


class ScraperError(HotdealException):
    """Raised when a crawler cannot fetch or parse a page."""

    def __init__(self, crawler: str, message: str):
        super().__init__(f"Scraper error for {crawler}: {message}")


class StorageError(HotdealException):
    """Raised when a storage operation fails."""


class StorageConnectionError(StorageError):
    """Raised when the storage connection cannot be established."""

    def __init__(self, message: str):
        super().__init__(f"Storage connection failed: {message}")


class RelocationError(HotdealException):
    """Raised when an image cannot be downloaded or re-hosted."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Image relocation failed for {url}: {message}")
