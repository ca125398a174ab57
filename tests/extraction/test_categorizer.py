# ABOUTME: Tests for keyword categorization of flies
# ABOUTME: Validates dry-before-streamer precedence and the nymph default

import pytest

from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import FlyCategory
from poudre_flies.extraction.categorizer import FlyCategorizer


class TestFlyCategorizer:
    """Test FlyCategorizer.categorize."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Parachute Adams", FlyCategory.DRY),
            ("Elk Hair Caddis", FlyCategory.DRY),
            ("Griffith's Gnat", FlyCategory.DRY),
            ("Woolly Bugger", FlyCategory.STREAMER),
            ("Circus Peanut", FlyCategory.STREAMER),
            ("Zebra Midge", FlyCategory.NYMPH),
            ("Pheasant Tail", FlyCategory.NYMPH),
            ("Sz 20-24 Midge", FlyCategory.NYMPH),
        ],
    )
    def test_default_keywords(self, name, expected):
        assert FlyCategorizer().categorize(name) == expected

    def test_case_insensitive(self):
        assert FlyCategorizer().categorize("PARACHUTE bwo") == FlyCategory.DRY

    def test_dry_wins_over_streamer(self):
        # "hopper" is dry, "bugger" is streamer
        assert FlyCategorizer().categorize("Hopper Bugger") == FlyCategory.DRY

    def test_deterministic(self):
        categorizer = FlyCategorizer()
        assert {categorizer.categorize("Slumpbuster") for _ in range(5)} == {FlyCategory.STREAMER}

    def test_injected_keywords(self):
        dictionary = FlyDictionary(dry_keywords=("chubby",), streamer_keywords=("midge",))
        categorizer = FlyCategorizer(dictionary)

        assert categorizer.categorize("Chubby Chernobyl") == FlyCategory.DRY
        assert categorizer.categorize("Zebra Midge") == FlyCategory.STREAMER
        assert categorizer.categorize("Parachute Adams") == FlyCategory.NYMPH
