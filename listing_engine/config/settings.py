# listing_engine/config/settings.py

"""Central configuration for the listing comparison engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the listing comparison engine."""

    # --- Search history ---
    HISTORY_CAPACITY: int = 50          # Max remembered queries
    HISTORY_RECENT_LIMIT: int = 10      # Default size of recent()
    HISTORY_STORAGE_KEY: str = "searchHistory"
    HISTORY_BACKEND: str = os.getenv(
        "LISTING_ENGINE_HISTORY_BACKEND", "json"
    )                                   # "json", "sqlite" or "memory"

    # --- External comparison ---
    EXTERNAL_SEARCH_DELAY: float = float(
        os.getenv("LISTING_ENGINE_SEARCH_DELAY", "0.8")
    )                                   # Simulated round trip (secs)
    RETRY_ATTEMPTS: int = 3             # Attempts on transport failure
    RETRY_DELAY: float = 1.0            # Linear backoff step (secs)
    FALLBACK_PREFIX_SIZE: int = 2       # Catalog prefix when nothing matches
    EXTERNAL_PROVIDER: str = (
        "listing_engine.services.mock_catalog.MockCatalogProvider"
    )

    # Ordered policy data: first rule whose keyword appears in the
    # folded query selects catalog items carrying any of its tags.
    FALLBACK_RULES: list[dict[str, list[str]]] = [
        {
            "keywords": ["electronic", "tech", "gadget"],
            "tags": ["electronics"],
        },
        {
            "keywords": ["furniture", "office", "chair"],
            "tags": ["furniture"],
        },
    ]

    # --- Debounce ---
    DEBOUNCE_DELAY: float = 0.3         # Quiescence window (secs)

    # --- Comparison copy ---
    LOCAL_ADVANTAGES: list[str] = [
        "Faster delivery from local vendors",
        "Easy returns and customer support",
        "Support local businesses",
        "No international shipping fees",
    ]
    EXTERNAL_ADVANTAGES: list[str] = [
        "Often lower prices",
        "Wider product selection",
        "International brands",
        "Bulk purchase options",
    ]
    RECOMMENDATIONS: list[str] = [
        "Compare prices between local and external options",
        "Consider delivery time vs cost savings",
        "Check product reviews and seller ratings",
    ]

    # --- Display ---
    CURRENCY_SYMBOL: str = "$"
    PLACEHOLDER_IMAGE: str = "/placeholder-image.jpg"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SAMPLE_LISTINGS_PATH: Path = (
        BASE_DIR / "listing_engine" / "config" / "sample_listings.json"
    )
    DATA_DIR: Path = Path(
        os.getenv("LISTING_ENGINE_DATA_DIR", str(BASE_DIR / "data"))
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Logging ---
    LOG_CONSOLE_LEVEL: str = os.getenv(
        "LISTING_ENGINE_LOG_LEVEL", "WARNING"
    )                                   # stderr handler threshold
    LOG_RETENTION: int = 20             # Run log files kept on disk

    # --- External platforms (registry) ---
    EXTERNAL_PLATFORMS: list[dict[str, str]] = [
        {
            "id": "jumia",
            "name": "Jumia",
            "base_url": "https://jumia.com",
            "search_path": "/search",
            "logo": "🛒",
        },
        {
            "id": "aliexpress",
            "name": "AliExpress",
            "base_url": "https://aliexpress.com",
            "search_path": "/wholesale",
            "logo": "🏪",
        },
        {
            "id": "amazon",
            "name": "Amazon",
            "base_url": "https://amazon.com",
            "search_path": "/s",
            "logo": "📦",
        },
        {
            "id": "ebay",
            "name": "eBay",
            "base_url": "https://ebay.com",
            "search_path": "/sch",
            "logo": "🏷️",
        },
    ]
