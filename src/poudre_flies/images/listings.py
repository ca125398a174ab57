# ABOUTME: Collection listings from the shop: structured JSON feed and rendered product grid
# ABOUTME: Parses both shapes into CollectionProduct records with normalized image URLs

import json
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from poudre_flies.core.models import CollectionProduct, FlyCategory
from poudre_flies.images.urls import extract_size, match_key, names_match, normalize_image_url
from poudre_flies.utils.logging import get_logger
from poudre_flies.utils.retry import ParseError

logger = get_logger(__name__)

_EMBEDDED_PRODUCTS = re.compile(r"var\s+products\s*=\s*(\[.*?\]);", re.DOTALL)
_PRODUCT_HREF = re.compile(r"/products/([^/?#\"']+)")

# How far above a product link to look for its card element.
MAX_CARD_DEPTH = 4


@dataclass
class CollectionListing:
    """Products known for one category's collection.

    ``grid_products`` is ``None`` until the rendered grid has been fetched.
    """

    category: FlyCategory
    url: str
    feed_products: list[CollectionProduct] = field(default_factory=list)
    grid_products: list[CollectionProduct] | None = None

    @property
    def feed_url(self) -> str:
        return self.url.rstrip("/") + ".json"

    @property
    def products(self) -> list[CollectionProduct]:
        """Feed products when the feed had any, otherwise whatever the grid yielded."""
        return self.feed_products or (self.grid_products or [])


def _first_image(item: dict) -> str | None:
    images = item.get("images") or []
    if images:
        first = images[0]
        if isinstance(first, dict):
            return first.get("src")
        if isinstance(first, str):
            return first
    featured = item.get("featured_image")
    if isinstance(featured, dict):
        return featured.get("src")
    return featured if isinstance(featured, str) else None


def _products_from_items(items: list, width: int) -> list[CollectionProduct]:
    products = []
    for item in items:
        if not isinstance(item, dict) or not item.get("title"):
            continue
        title = str(item["title"]).strip()
        products.append(
            CollectionProduct(
                name=title,
                image=normalize_image_url(_first_image(item), width),
                size=extract_size(title),
                handle=item.get("handle"),
            )
        )
    return products


def parse_collection_feed(body: str, width: int = 400) -> list[CollectionProduct]:
    """Parse a collection ``.json`` feed.

    Raises:
        ParseError: If the body is not JSON or has no ``products`` list
    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"Collection feed is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("products"), list):
        raise ParseError("Collection feed has no products list")

    return _products_from_items(data["products"], width)


def parse_embedded_products(markup: str, width: int = 400) -> list[CollectionProduct]:
    """Read a ``var products = [...]`` array embedded in a collection page, if present."""
    match = _EMBEDDED_PRODUCTS.search(markup)
    if not match:
        return []
    try:
        items = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.debug("Embedded products array is not valid JSON", error=str(e))
        return []
    return _products_from_items(items if isinstance(items, list) else [], width)


def _handle_from_href(href: str) -> str | None:
    match = _PRODUCT_HREF.search(href)
    return match.group(1) if match else None


def _card_for(anchor: Tag, handle: str) -> Tag | None:
    """Smallest element around ``anchor`` holding an image and linking only to ``handle``."""
    node: Tag | None = anchor
    for _ in range(MAX_CARD_DEPTH):
        if node is None:
            return None
        linked = {_handle_from_href(link.get("href", "")) for link in node.select('a[href*="/products/"]')}
        if node is not anchor and linked - {handle}:
            return None
        if node.find("img") is not None:
            return node
        node = node.parent
    return None


def _image_src(img: Tag) -> str | None:
    for attr in ("src", "data-src", "data-original"):
        value = img.get(attr)
        if value and not value.startswith("data:") and "{width}" not in value:
            return value
    for attr in ("srcset", "data-srcset"):
        value = img.get(attr)
        if value:
            return value.split(",")[0].split()[0]
    return None


def _card_title(card: Tag, anchor: Tag, img: Tag) -> str:
    title_element = card.select_one('[class*="title"]')
    if title_element is not None and title_element.get_text(strip=True):
        return title_element.get_text(" ", strip=True)
    if img.get("alt"):
        return img["alt"].strip()
    return anchor.get_text(" ", strip=True)


def parse_product_grid(markup: str, width: int = 400, base_url: str | None = None) -> list[CollectionProduct]:
    """Scrape (link, image, title) cards from a rendered collection page."""
    embedded = parse_embedded_products(markup, width)
    if embedded:
        return embedded

    soup = BeautifulSoup(markup or "", "html.parser")
    products: list[CollectionProduct] = []
    seen: set[str] = set()

    for anchor in soup.select('a[href*="/products/"]'):
        handle = _handle_from_href(anchor.get("href", ""))
        if not handle or handle in seen:
            continue
        card = _card_for(anchor, handle)
        if card is None:
            continue
        img = card.find("img")
        image = normalize_image_url(_image_src(img), width, base_url)
        title = _card_title(card, anchor, img)
        if not image or not title:
            continue

        seen.add(handle)
        products.append(CollectionProduct(name=title, image=image, size=extract_size(title), handle=handle))

    return products


def find_product(fly_name: str, products: list[CollectionProduct]) -> CollectionProduct | None:
    """Pick the listed product for a fly: an exact name match first, then a near match."""
    fly_key = match_key(fly_name)
    candidates = [product for product in products if product.image]
    for product in candidates:
        if match_key(product.name) == fly_key:
            return product
    for product in candidates:
        if names_match(fly_name, product.name):
            return product
    return None
