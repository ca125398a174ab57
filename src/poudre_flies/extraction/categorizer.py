# ABOUTME: Keyword categorization of flies into dry, nymph or streamer
# ABOUTME: Dry keywords are checked before streamer keywords; anything else is a nymph

from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import FlyCategory


class FlyCategorizer:
    """Deterministic keyword classifier backed by the injected dictionary."""

    def __init__(self, dictionary: FlyDictionary | None = None):
        dictionary = dictionary or FlyDictionary.default()
        self.dry_keywords = tuple(keyword.lower() for keyword in dictionary.dry_keywords)
        self.streamer_keywords = tuple(keyword.lower() for keyword in dictionary.streamer_keywords)

    def categorize(self, fly_name: str) -> FlyCategory:
        name = fly_name.lower()
        if any(keyword in name for keyword in self.dry_keywords):
            return FlyCategory.DRY
        if any(keyword in name for keyword in self.streamer_keywords):
            return FlyCategory.STREAMER
        return FlyCategory.NYMPH
