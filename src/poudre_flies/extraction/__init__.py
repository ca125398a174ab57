# ABOUTME: Text extraction from the upstream report page
# ABOUTME: Pipeline Stage 1: report markup → snapshot, mentions and categories

"""
Extraction Layer: Turn report markup into structured text

This layer handles:
- Markup normalization into plain text
- Locating the report body and streamflow line
- Matching fly names against the curated dictionary
- Keyword categorization of fly names

Data Flow: RawPage → ReportSnapshot → FlyMention list → categories
"""

from .base import ExtractionError, ReportLocator, ReportUnavailableError
from .categorizer import FlyCategorizer
from .mentions import FlyMentionMatcher
from .report import MarkerReportLocator, ReportSectionExtractor
from .text import collapse_whitespace, normalize

__all__ = [
    "ExtractionError",
    "FlyCategorizer",
    "FlyMentionMatcher",
    "MarkerReportLocator",
    "ReportLocator",
    "ReportSectionExtractor",
    "ReportUnavailableError",
    "collapse_whitespace",
    "normalize",
]
