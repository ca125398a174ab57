# ABOUTME: Fly mention matching against the curated dictionary plus size-qualified free text
# ABOUTME: Substring matching is deliberately permissive; overlapping names can both match

import re
from typing import Literal

from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import FlyMention
from poudre_flies.utils.logging import get_logger

logger = get_logger(__name__)

# "Sz 20-24 Midge", "Sz. 18–22 RS2", "sz 16 Copper"
SIZE_QUALIFIED = re.compile(r"\bSz\.?\s*\d+(?:\s*[-–]\s*\d+)?\s+\w+", re.IGNORECASE)


class FlyMentionMatcher:
    """Finds fly names in plain report text."""

    def __init__(
        self,
        dictionary: FlyDictionary | None = None,
        order: Literal["dictionary", "narrative"] = "dictionary",
    ):
        self.dictionary = dictionary or FlyDictionary.default()
        self.order = order

    def find_mentions(self, report_text: str) -> list[FlyMention]:
        """Return dictionary hits followed by size-qualified free-text hits.

        Dictionary hits keep dictionary declaration order. Free-text hits keep
        their order of appearance and are skipped when an earlier mention,
        dictionary or free-text, is contained in them. With
        ``order="narrative"`` the combined list is sorted by first position
        in the text instead.
        """
        lowered = report_text.lower()

        mentions: list[FlyMention] = []
        for pattern in self.dictionary.known_patterns:
            position = lowered.find(pattern.lower())
            if position >= 0:
                mentions.append(FlyMention(name=pattern, is_dictionary_match=True, position=position))

        dictionary_hits = len(mentions)
        matched = [mention.name.lower() for mention in mentions]
        for match in SIZE_QUALIFIED.finditer(report_text):
            literal = match.group(0).strip()
            folded = literal.lower()
            if any(earlier in folded for earlier in matched):
                continue
            matched.append(folded)
            mentions.append(FlyMention(name=literal, is_dictionary_match=False, position=match.start()))

        if self.order == "narrative":
            mentions.sort(key=lambda mention: mention.position)

        logger.debug(
            "Matched fly mentions",
            dictionary_hits=dictionary_hits,
            free_text_hits=len(mentions) - dictionary_hits,
            order=self.order,
        )
        return mentions
