# ABOUTME: Report section extraction from the fishing report page
# ABOUTME: Parses the page with BeautifulSoup and splits the report body from the streamflow line

import re
from datetime import UTC, datetime

from bs4 import BeautifulSoup

from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import ReportSnapshot
from poudre_flies.extraction.base import ReportLocator
from poudre_flies.extraction.text import normalize, tidy_lines
from poudre_flies.utils.logging import get_logger

logger = get_logger(__name__)

# Private-use character standing in for the page footer in flattened text.
FOOTER_MARK = "\ue000"

_DROPPED_TAGS = ["script", "style", "noscript", "template"]
_BLOCK_TAGS = ["p", "div", "li", "ul", "ol", "section", "article", "h1", "h2", "h3", "h4", "h5", "h6", "tr", "table"]

_DATE_STAMP = r"\s*\d{1,2}/\d{1,2}/\d{2,4}"


def phrase_pattern(phrase: str) -> str:
    """Regex source for a phrase whose words may be separated by any whitespace."""
    return r"\s+".join(re.escape(word) for word in phrase.split())


def page_text(soup: BeautifulSoup) -> str:
    """Flatten a parsed page to line-structured text.

    Scripts and styles are dropped, ``<br>`` and block elements end a line,
    and every ``<footer>`` becomes :data:`FOOTER_MARK`.
    """
    for tag in soup.find_all(_DROPPED_TAGS):
        tag.decompose()
    for footer in soup.find_all("footer"):
        footer.replace_with(FOOTER_MARK)
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n")
    return tidy_lines(soup.get_text())


class MarkerReportLocator(ReportLocator):
    """Locates the report between a marker phrase and the first terminator phrase or footer."""

    def __init__(self, marker: str, terminators: tuple[str, ...]):
        stops = [phrase_pattern(term) for term in terminators] + [FOOTER_MARK]
        self.pattern = re.compile(rf"{phrase_pattern(marker)}.*?(?={'|'.join(stops)})", re.IGNORECASE | re.DOTALL)

    def locate(self, soup: BeautifulSoup) -> str | None:
        match = self.pattern.search(page_text(soup))
        return match.group(0) if match else None


class ReportSectionExtractor:
    """Turns report page markup into a :class:`ReportSnapshot`."""

    def __init__(self, dictionary: FlyDictionary | None = None, locator: ReportLocator | None = None):
        self.dictionary = dictionary or FlyDictionary.default()
        self.locator = locator or MarkerReportLocator(
            self.dictionary.report_marker, self.dictionary.report_terminators
        )

        marker = phrase_pattern(self.dictionary.report_marker)
        self._header_pattern = re.compile(rf"{marker}(?:{_DATE_STAMP})?", re.IGNORECASE)

        flow = phrase_pattern(self.dictionary.flow_marker)
        # The flow sentence runs to the first sentence end or line break.
        self._flow_pattern = re.compile(rf"{flow}\b.*?(?=[.!?](?=\s|$)|\n|$)", re.IGNORECASE)
        self._flow_sentence_pattern = re.compile(rf"{flow}\b.*?(?:[.!?](?=\s|$)|\n|$)", re.IGNORECASE)

    def extract(
        self, markup: str, source_url: str = "", captured_at: datetime | None = None
    ) -> ReportSnapshot:
        """Extract the report text and streamflow line from page markup.

        Both fields pass through :func:`normalize`, so markup that survives
        as escaped text in the page is stripped as well. A page without a
        bounded report region yields an empty snapshot.
        """
        captured_at = captured_at or datetime.now(UTC)
        soup = BeautifulSoup(markup or "", "html.parser")
        region = self.locator.locate(soup)

        if region is None:
            logger.warning("Could not find report section", source_url=source_url, marker=self.dictionary.report_marker)
            return ReportSnapshot(source_url=source_url, captured_at=captured_at)

        flow_info = ""
        flow_match = self._flow_pattern.search(region)
        if flow_match:
            flow_info = normalize(flow_match.group(0))

        report_text = self._header_pattern.sub("", region, count=1)
        report_text = self._flow_sentence_pattern.sub(" ", report_text)
        report_text = normalize(report_text)

        logger.info(
            "Extracted report section",
            source_url=source_url,
            report_length=len(report_text),
            has_flow_info=bool(flow_info),
        )
        return ReportSnapshot(
            flow_info=flow_info,
            report_text=report_text,
            source_url=source_url,
            captured_at=captured_at,
        )
