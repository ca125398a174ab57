# ABOUTME: Shared extraction errors and the narrow interface for locating report text
# ABOUTME: Swapping the locator is the single change needed when upstream markup drifts

from typing import Protocol

from bs4 import BeautifulSoup


class ExtractionError(Exception):
    """Raised when the pipeline cannot produce a report."""

    pass


class ReportUnavailableError(ExtractionError):
    """Raised when the root report page cannot be fetched."""

    def __init__(self, message: str, url: str, cause: BaseException | None = None):
        super().__init__(message)
        self.url = url
        self.cause = cause


class ReportLocator(Protocol):
    """Finds the human-authored report region in a parsed page."""

    def locate(self, soup: BeautifulSoup) -> str | None:
        """Return the report region as line-structured plain text.

        The region starts at the report marker. ``None`` means no bounded
        region was found.
        """
        ...
