"""
Shared constants for the project.

Defaults used when a setting is absent from config/fetch_settings.yaml.
"""

from decimal import Decimal

# Plausibility range for a product price (inclusive). Anything outside is
# treated as a regex latching onto a SKU, a year or a quantity.
PRICE_MIN = Decimal("1.0")
PRICE_MAX = Decimal("100000.0")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "fr-FR,fr;q=0.9,en;q=0.8"

# Preview bots get full Open Graph markup on most storefronts
PREVIEW_USER_AGENT = "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"

PAGE_TIMEOUT = 15
IMAGE_TIMEOUT = 15
RENDERING_PROXY_TIMEOUT = 60
QUICK_ADD_DEADLINE = 3.0

MAX_IMAGE_SIDE = 800
JPEG_QUALITY = 80
MAX_IMAGE_BYTES = 15 * 1024 * 1024
MAX_PAGE_BYTES = 5 * 1024 * 1024

URL_TITLE_MAX_LENGTH = 60

RENDERING_PROXY_ENDPOINT = "https://api.scraperapi.com"
RENDERING_PROXY_API_KEY_ENV = "WISHFILL_RENDERING_PROXY_API_KEY"
