# ABOUTME: Image URL normalization and product-name matching keys
# ABOUTME: Gives every resolved image an absolute https URL with a fixed display width

import re
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

# Query parameters that pin a cached version or a rendered size.
SIZING_PARAMS = frozenset({"v", "width", "height", "crop"})

_HOOK_SIZE = re.compile(r"#\s*(\d+)")
_NON_WORD = re.compile(r"[^a-z0-9]+")


def normalize_image_url(url: str | None, width: int = 400, base_url: str | None = None) -> str | None:
    """Make an image URL absolute, drop version/size parameters and append ``width``.

    >>> normalize_image_url("//cdn.example.com/x.jpg?v=123")
    'https://cdn.example.com/x.jpg?width=400'
    """
    if not url or not url.strip():
        return None

    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url
    elif base_url and not urlsplit(url).scheme:
        url = urljoin(base_url, url)

    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None

    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key not in SIZING_PARAMS]
    query.append(("width", str(width)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), ""))


def extract_size(name: str) -> str | None:
    """Return the hook size from a product title such as ``"Zebra Midge #18"``."""
    match = _HOOK_SIZE.search(name)
    return match.group(1) if match else None


def match_key(name: str) -> str:
    """Lowercase a name, drop its hook size and reduce punctuation to single spaces."""
    name = _HOOK_SIZE.sub(" ", name.lower())
    return _NON_WORD.sub(" ", name).strip()


def names_match(fly_name: str, product_name: str) -> bool:
    """True when the names are equal or the fly name appears as whole words in the product name."""
    fly_key = match_key(fly_name)
    product_key = match_key(product_name)
    if not fly_key or not product_key:
        return False
    return fly_key == product_key or f" {fly_key} " in f" {product_key} "
