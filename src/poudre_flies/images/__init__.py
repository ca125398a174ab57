# ABOUTME: Product image resolution for recommended flies
# ABOUTME: Pipeline Stage 2: fly names → collection listings → image URLs

from .listings import CollectionListing, find_product, parse_collection_feed, parse_product_grid
from .products import find_product_image
from .resolver import ImageResolver
from .urls import normalize_image_url

__all__ = [
    "CollectionListing",
    "ImageResolver",
    "find_product",
    "find_product_image",
    "normalize_image_url",
    "parse_collection_feed",
    "parse_product_grid",
]
