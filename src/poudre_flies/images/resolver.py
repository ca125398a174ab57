# ABOUTME: Tiered image resolution for recommended flies
# ABOUTME: Collection feed, then rendered grid, then the product detail page; failures resolve to None

import asyncio

from poudre_flies.config import Config, get_config
from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import CollectionProduct, FlyCategory
from poudre_flies.images.listings import (
    CollectionListing,
    find_product,
    parse_collection_feed,
    parse_product_grid,
)
from poudre_flies.images.products import find_product_image
from poudre_flies.utils.http import FetchClient
from poudre_flies.utils.logging import get_logger
from poudre_flies.utils.pacing import Pacer
from poudre_flies.utils.retry import FetchError, ParseError


class ImageResolver:
    """Resolves a fly name to a product image URL.

    Tiers, each tried only when the previous one found nothing:

    1. the category collection's JSON feed
    2. the category collection's rendered product grid
    3. the fly's product detail page, when the dictionary has a slug for it

    Collection feeds are loaded once per run (concurrently, via
    :meth:`load_collections`); grid and detail pages fetched while resolving
    go through the pacer.
    """

    def __init__(
        self,
        client: FetchClient,
        config: Config | None = None,
        dictionary: FlyDictionary | None = None,
        pacer: Pacer | None = None,
    ):
        self.client = client
        self.config = config or get_config()
        self.dictionary = dictionary or FlyDictionary.default()
        self.pacer = pacer or Pacer(self.config.pacing_interval)
        self.width = self.config.image_width
        self.listings: dict[FlyCategory, CollectionListing] = {}
        self.logger = get_logger(__name__)

    def _listing(self, category: FlyCategory) -> CollectionListing:
        if category not in self.listings:
            self.listings[category] = CollectionListing(category=category, url=self.config.collection_url(category))
        return self.listings[category]

    async def load_collections(
        self, categories: tuple[FlyCategory, ...] = tuple(FlyCategory)
    ) -> dict[FlyCategory, list[CollectionProduct]]:
        """Load every category's collection concurrently."""
        results = await asyncio.gather(*(self.load_collection(category) for category in categories))
        return dict(zip(categories, results, strict=True))

    async def load_collection(self, category: FlyCategory) -> list[CollectionProduct]:
        """Load one collection: the JSON feed, falling back to the rendered grid."""
        listing = self._listing(category)
        listing.feed_products = await self._fetch_feed(listing)
        if not listing.feed_products:
            listing.grid_products = await self._fetch_grid(listing)

        self.logger.info(
            "Loaded collection",
            category=category.value,
            feed_products=len(listing.feed_products),
            grid_products=len(listing.grid_products or []),
        )
        return listing.products

    async def resolve(self, fly_name: str, category: FlyCategory) -> str | None:
        """Return an image URL for ``fly_name``, or ``None`` when every tier fails."""
        try:
            return await self._resolve(fly_name, category)
        except Exception as e:
            self.logger.warning(
                "Image resolution failed", fly=fly_name, error=str(e), error_type=type(e).__name__
            )
            return None

    async def _resolve(self, fly_name: str, category: FlyCategory) -> str | None:
        listing = self._listing(category)

        product = find_product(fly_name, listing.feed_products)
        if product:
            self.logger.debug("Resolved from collection feed", fly=fly_name, product=product.name)
            return product.image

        if listing.grid_products is None:
            await self.pacer.acquire()
            listing.grid_products = await self._fetch_grid(listing)
        product = find_product(fly_name, listing.grid_products)
        if product:
            self.logger.debug("Resolved from product grid", fly=fly_name, product=product.name)
            return product.image

        slug = self.dictionary.slug_for(fly_name)
        if slug is None:
            self.logger.debug("No slug for fly, skipping product page", fly=fly_name)
            return None

        await self.pacer.acquire()
        page = await self.client.fetch_ok(self.config.product_url(slug))
        image = find_product_image(page.body, self.dictionary, self.width)
        if image:
            self.logger.debug("Resolved from product page", fly=fly_name, slug=slug)
        return image

    async def _fetch_feed(self, listing: CollectionListing) -> list[CollectionProduct]:
        try:
            page = await self.client.fetch_ok(listing.feed_url)
            return parse_collection_feed(page.body, self.width)
        except (FetchError, ParseError) as e:
            self.logger.warning("Could not load collection feed", url=listing.feed_url, error=str(e))
            return []

    async def _fetch_grid(self, listing: CollectionListing) -> list[CollectionProduct]:
        try:
            page = await self.client.fetch_ok(listing.url)
            return parse_product_grid(page.body, self.width, base_url=self.config.shop_base_url)
        except FetchError as e:
            self.logger.warning("Could not load collection grid", url=listing.url, error=str(e))
            return []
