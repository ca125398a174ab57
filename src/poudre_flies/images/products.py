# ABOUTME: Per-product detail page scanning for the product image
# ABOUTME: Takes the first asset-path image URL that is not a logo or gift card

import re

from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.images.urls import normalize_image_url

IMAGE_URL = re.compile(r"""(?:https?:)?//[^\s"'<>()\\]+?\.(?:jpe?g|png|webp|gif)(?:\?[^\s"'<>()\\]*)?""", re.IGNORECASE)


def find_product_image(markup: str, dictionary: FlyDictionary, width: int = 400) -> str | None:
    """Scan a product page for its first product image URL.

    URLs must contain one of the dictionary's asset paths and none of its
    denylisted substrings. JSON-escaped slashes are unescaped first.
    """
    text = (markup or "").replace("\\/", "/")
    denylist = tuple(entry.lower() for entry in dictionary.asset_denylist)

    for match in IMAGE_URL.finditer(text):
        candidate = match.group(0)
        lowered = candidate.lower()
        if not any(path.lower() in lowered for path in dictionary.asset_paths):
            continue
        if any(entry in lowered for entry in denylist):
            continue
        return normalize_image_url(candidate, width)
    return None
