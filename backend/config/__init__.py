import logging

from .settings import Settings, get_settings
from .constants import (
    SANITIZER_CONFIG,
    LLM_CONFIG,
    SOURCE_LIMITS,
    FALLBACK_CONFIDENCE,
)

logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("fact_check")

REQUIRED_KEYS = [
    "GEMINI_API_KEY",
]

def check_api_keys_on_startup(settings: Settings) -> None:
    """Check for required API keys on startup."""
    missing_keys = [key_name for key_name in REQUIRED_KEYS if not getattr(settings, key_name, None)]

    if missing_keys:
        logger.warning(
            f"Missing API keys: {', '.join(missing_keys)}. "
            "Every cache miss will return the degraded 'uncertain' verdict."
        )
    else:
        logger.info("All required API keys are configured.")

__all__ = [
    "logger",
    "Settings",
    "get_settings",
    "check_api_keys_on_startup",
    "SANITIZER_CONFIG",
    "LLM_CONFIG",
    "SOURCE_LIMITS",
    "FALLBACK_CONFIDENCE",
]
