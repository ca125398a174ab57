# ABOUTME: Curated fly dictionary injected into the matcher, resolver, categorizer and section extractor
# ABOUTME: Holds known pattern names, product slugs, category keywords and report marker phrases

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Common patterns named in Poudre reports; declaration order is the mention order.
DEFAULT_KNOWN_PATTERNS: tuple[str, ...] = (
    "UV Emerger",
    "Bling Midge",
    "Charlie Craven's Mole Fly",
    "Mole Fly",
    "Shucking Midge",
    "RS2",
    "Foam Wing RS2",
    "Grey Foam Wing RS2",
    "BWO",
    "Blue Wing Olive",
    "Extended Body BWO",
    "Parachute Adams",
    "Griffith's Gnat",
    "Zebra Midge",
    "Top Secret Midge",
    "Mercury Midge",
    "Juju Baetis",
    "Pheasant Tail",
    "Copper John",
    "Two Bit Hooker",
    "Poison Tung",
    "San Juan Worm",
    "Pat's Rubber Legs",
    "Sparkle Dun",
    "Comparadun",
    "Hi-Vis Midge",
    "Eric's Hi-Vis Midge",
    "Medallion Midge",
    "WD-40",
    "Barr Emerger",
    "Stalcup Baetis",
    "Rojo Midge",
    "Black Beauty",
    "Rainbow Warrior",
    "Hopper",
    "Stimulator",
    "Elk Hair Caddis",
    "Woolly Bugger",
    "Slumpbuster",
    "Circus Peanut",
)

DEFAULT_SLUGS: dict[str, str] = {
    "Zebra Midge": "zebra-midge",
    "Parachute Adams": "parachute-adams",
    "Pheasant Tail": "pheasant-tail-nymph",
    "Copper John": "copper-john",
    "RS2": "rs2",
    "Juju Baetis": "juju-baetis",
    "Pat's Rubber Legs": "pats-rubber-legs",
    "San Juan Worm": "san-juan-worm",
    "Elk Hair Caddis": "elk-hair-caddis",
    "Stimulator": "stimulator",
    "Griffith's Gnat": "griffiths-gnat",
    "Woolly Bugger": "woolly-bugger",
    "Slumpbuster": "slumpbuster",
    "Circus Peanut": "circus-peanut",
    "Rainbow Warrior": "rainbow-warrior",
    "Two Bit Hooker": "two-bit-hooker",
}

DEFAULT_DRY_KEYWORDS: tuple[str, ...] = (
    "dry",
    "adams",
    "parachute",
    "gnat",
    "sparkle dun",
    "comparadun",
    "stimulator",
    "elk hair",
    "caddis",
    "hopper",
    "hi-vis",
    "extended body",
    "spinner",
    "cripple",
    "mole fly",
)

DEFAULT_STREAMER_KEYWORDS: tuple[str, ...] = (
    "streamer",
    "bugger",
    "slumpbuster",
    "circus peanut",
    "sculpin",
    "zonker",
    "leech",
    "minnow",
    "bunny",
)

DEFAULT_ASSET_DENYLIST: tuple[str, ...] = ("logo", "gift-card", "gift_card", "giftcard", "favicon")


class FlyDictionary(BaseModel):
    """Explicit lookup tables for mention matching, image resolution and categorization."""

    model_config = ConfigDict(frozen=True)

    known_patterns: tuple[str, ...] = Field(default=DEFAULT_KNOWN_PATTERNS)
    slugs: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SLUGS))
    dry_keywords: tuple[str, ...] = Field(default=DEFAULT_DRY_KEYWORDS)
    streamer_keywords: tuple[str, ...] = Field(default=DEFAULT_STREAMER_KEYWORDS)
    asset_denylist: tuple[str, ...] = Field(default=DEFAULT_ASSET_DENYLIST)
    report_marker: str = "Latest Update:"
    report_terminators: tuple[str, ...] = ("Poudre River Recommended Flies", "Poudre River Dry Flies")
    flow_marker: str = "Current Streamflow"
    asset_paths: tuple[str, ...] = ("cdn.shopify.com/s/files/", "/cdn/shop/")

    @classmethod
    def default(cls) -> "FlyDictionary":
        return cls()

    @classmethod
    def load(cls, path: Path | str | None = None) -> "FlyDictionary":
        """Return the dictionary from ``path``, or the built-in one when no path is given."""
        return cls.from_file(path) if path else cls.default()

    @classmethod
    def from_file(cls, path: Path | str) -> "FlyDictionary":
        """Load a dictionary from a JSON file; omitted keys keep their defaults."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)

    def slug_for(self, name: str) -> str | None:
        """Look up the product slug for a fly name, ignoring case."""
        if name in self.slugs:
            return self.slugs[name]
        folded = name.casefold()
        for known, slug in self.slugs.items():
            if known.casefold() == folded:
                return slug
        return None
