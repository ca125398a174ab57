# ABOUTME: Tests for product detail page image scanning
# ABOUTME: Validates asset-path filtering, the non-product denylist and JSON-escaped URLs

from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.images.products import find_product_image

PRODUCT_PAGE = """
<html><head>
<link rel="icon" href="//stpetes.com/cdn/shop/files/favicon.png?v=1">
<meta property="og:image" content="https://cdn.example.com/unrelated.jpg">
</head><body>
<img class="header__logo" src="//stpetes.com/cdn/shop/files/st-petes-logo.png?v=12">
<a href="/products/gift-card"><img src="//cdn.shopify.com/s/files/1/gift-card.jpg"></a>
<img class="product__media" src="//stpetes.com/cdn/shop/products/zebra-midge.jpg?v=1699&width=1080">
</body></html>
"""


class TestFindProductImage:
    """Test find_product_image."""

    def test_returns_first_product_asset(self):
        image = find_product_image(PRODUCT_PAGE, FlyDictionary.default())
        assert image == "https://stpetes.com/cdn/shop/products/zebra-midge.jpg?width=400"

    def test_json_escaped_urls(self):
        markup = '<script>{"featured_image":"https:\\/\\/cdn.shopify.com\\/s\\/files\\/1\\/rs2.jpg?v=3"}</script>'
        image = find_product_image(markup, FlyDictionary.default(), width=600)
        assert image == "https://cdn.shopify.com/s/files/1/rs2.jpg?width=600"

    def test_no_candidate(self):
        assert find_product_image("<p>No images here</p>", FlyDictionary.default()) is None
        assert find_product_image("", FlyDictionary.default()) is None

    def test_injected_denylist_and_paths(self):
        dictionary = FlyDictionary(asset_paths=("/images/",), asset_denylist=("banner",))
        markup = (
            '<img src="https://flies.example.com/images/banner.jpg">'
            '<img src="https://flies.example.com/images/rs2.webp">'
        )
        assert find_product_image(markup, dictionary) == "https://flies.example.com/images/rs2.webp?width=400"
