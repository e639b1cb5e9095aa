# fashion_search/config/settings.py

"""Central configuration for the fashion_search engine."""

import os
from dataclasses import dataclass
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str) -> bool:
    """Read a boolean feature flag ("1"/"true") from the environment."""
    return os.getenv(name, "").strip().lower() in ("1", "true")


@dataclass(frozen=True)
class ImageSizeThresholds:
    """Byte-size buckets for the last-resort image fallback.

    Payloads above ``large`` are treated as full outfits, above
    ``medium`` as a single garment, below ``small`` as accessories.
    """

    large: int = 200_000
    medium: int = 50_000
    small: int = 20_000


class Settings:
    """Central configuration for the fashion_search engine."""

    # --- Credentials ---
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    SERPAPI_API_KEY: str = os.getenv("SERPAPI_API_KEY", "")

    # --- AI query builder ---
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_ENDPOINT: str = (
        "https://generativelanguage.googleapis.com/v1beta/"
        "models/{model}:generateContent"
    )
    SPELL_ONLY: bool = _env_flag("SPELL_ONLY")
    AI_TIMEOUT: float = 10.0            # Seconds before the AI call is abandoned
    MIN_QUERY_LENGTH: int = 3
    MIN_IMAGE_QUERY_LENGTH: int = 5
    MAX_QUERY_LENGTH: int = 200
    IMAGE_SIZE_THRESHOLDS: ImageSizeThresholds = ImageSizeThresholds()

    # --- Inbound limits ---
    MAX_IMAGE_BYTES: int = 20 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
    ]

    # --- Upstream search ---
    SERPAPI_ENDPOINT: str = "https://serpapi.com/search.json"
    LOCALE_PARAMS: dict[str, str] = {
        "gl": "in",
        "hl": "en",
        "google_domain": "google.co.in",
    }
    AMAZON_DOMAIN: str = "amazon.in"
    REQUEST_DELAY: float = 1.0          # Base backoff between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 2                # Retry count on transient failures

    # --- Price display ---
    CURRENCY_SYMBOL: str = "₹"
    CURRENCY_CODES: list[str] = ["INR", "₹"]

    # --- Price enhancer ---
    ENHANCE_HEAD_LIMIT: int = 5         # Products scraped per search
    SCRAPE_TIMEOUT: float = 2.0         # Per-product scrape budget (secs)
    SCRAPE_CONCURRENCY: int = 5
    SCRAPE_REQUEST_TIMEOUT: int = 5
    SCRAPE_MAX_RETRIES: int = 1

    # Retailer page scrapers, matched by substring of a product's source
    PRICE_SCRAPERS: list[dict[str, str]] = [
        {
            "id": "amazon",
            "scraper": "fashion_search.scrapers.amazon_price_scraper.AmazonPriceScraper",
        },
        {
            "id": "myntra",
            "scraper": "fashion_search.scrapers.myntra_price_scraper.MyntraPriceScraper",
        },
        {
            "id": "ajio",
            "scraper": "fashion_search.scrapers.ajio_price_scraper.AjioPriceScraper",
        },
        {
            "id": "flipkart",
            "scraper": "fashion_search.scrapers.flipkart_price_scraper.FlipkartPriceScraper",
        },
        {
            "id": "snapdeal",
            "scraper": "fashion_search.scrapers.snapdeal_price_scraper.SnapdealPriceScraper",
        },
    ]

    # --- Resilience ---
    CIRCUIT_BREAKER_THRESHOLD: int = 3  # Consecutive failures to trip
    CIRCUIT_BREAKER_COOLDOWN: float = 60.0
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-IN,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Trending ---
    TRENDING_LIMIT: int = 12
    TRENDING_KEYWORDS_PER_SITE: int = 2
    TRENDING_KEYWORDS: list[str] = [
        "trending fashion",
        "best sellers",
        "new arrivals",
        "most popular",
        "streetwear",
        "summer collection",
        "ethnic wear",
        "sneakers",
        "t-shirts",
        "hoodies",
    ]
    TRENDING_SITES: list[str] = [
        "myntra.com",
        "ajio.com",
        "amazon.in",
        "flipkart.com",
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (provider registry) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "google_shopping",
            "label": "Google Shopping",
            "provider": (
                "fashion_search.providers.google_shopping_provider"
                ".GoogleShoppingProvider"
            ),
        },
        {
            "id": "amazon",
            "label": "Amazon.in",
            "provider": (
                "fashion_search.providers.amazon_provider.AmazonProvider"
            ),
        },
        {
            "id": "flipkart",
            "label": "Flipkart",
            "provider": (
                "fashion_search.providers.site_search_provider"
                ".SiteSearchProvider"
            ),
            "site": "flipkart.com",
        },
        {
            "id": "myntra",
            "label": "Myntra",
            "provider": (
                "fashion_search.providers.site_search_provider"
                ".SiteSearchProvider"
            ),
            "site": "myntra.com",
        },
    ]
