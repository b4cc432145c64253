"""
Configuration management for the aggregated query benchmark.
Loads settings from environment variables and .env file.
"""

import os
from pathlib import Path
from typing import Dict, Any
from dotenv import load_dotenv

# Load .env file from project root
PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


class ConfigurationError(ValueError):
    """Raised when an environment setting cannot be parsed."""
    pass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Central configuration management."""

    # ==========================================================================
    # Benchmark Settings
    # ==========================================================================
    DEFAULT_LIMIT: int = _env_int("DEFAULT_LIMIT", 500)
    MAX_LIMIT: int = 2000
    DEFAULT_WARMUP: int = _env_int("DEFAULT_WARMUP", 1)

    # ==========================================================================
    # Store Settings
    # ==========================================================================
    DATABASE_URL: str = os.getenv(
        "QB_DATABASE_URL",
        f"sqlite:///{PROJECT_ROOT / 'var' / 'products.sqlite'}",
    )
    SQL_ECHO: bool = _env_bool("SQL_ECHO")

    # Output directories
    OUTPUT_DIR: Path = PROJECT_ROOT / os.getenv("OUTPUT_DIR", "var")
    REPORT_DIR: Path = PROJECT_ROOT / os.getenv("REPORT_DIR", "reports")

    # ==========================================================================
    # Fixture Settings
    # ==========================================================================
    CATEGORIES_COUNT: int = _env_int("CATEGORIES_COUNT", 500)
    BRANDS_COUNT: int = _env_int("BRANDS_COUNT", 1000)
    PRODUCTS_COUNT: int = _env_int("PRODUCTS_COUNT", 10000)
    IMAGES_PER_PRODUCT: int = _env_int("IMAGES_PER_PRODUCT", 3)
    REVIEWS_PER_PRODUCT: int = _env_int("REVIEWS_PER_PRODUCT", 5)
    FIXTURE_BATCH_SIZE: int = _env_int("FIXTURE_BATCH_SIZE", 500)

    @classmethod
    def get_fixture_config(cls) -> Dict[str, Any]:
        """Get fixture generation sizes."""
        return {
            "categories": cls.CATEGORIES_COUNT,
            "brands": cls.BRANDS_COUNT,
            "products": cls.PRODUCTS_COUNT,
            "images_per_product": cls.IMAGES_PER_PRODUCT,
            "reviews_per_product": cls.REVIEWS_PER_PRODUCT,
            "batch_size": cls.FIXTURE_BATCH_SIZE,
        }

    @classmethod
    def clamp_limit(cls, limit: int) -> int:
        """Clamp a requested record limit into [1, MAX_LIMIT]."""
        return max(1, min(int(limit), cls.MAX_LIMIT))

    @classmethod
    def ensure_directories(cls):
        """Create output directories if they don't exist."""
        cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        cls.REPORT_DIR.mkdir(parents=True, exist_ok=True)
