import os

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv())

DEFAULT_BASE_URL = "https://app.docrouter.ai/fastapi"

# DocRouter API configuration
DOCROUTER_ORG_API_TOKEN = os.getenv("DOCROUTER_ORG_API_TOKEN")
DOCROUTER_ACCOUNT_API_TOKEN = os.getenv("DOCROUTER_ACCOUNT_API_TOKEN")
DOCROUTER_BASE_URL = os.getenv("DOCROUTER_BASE_URL", DEFAULT_BASE_URL)

# Webhook trigger configuration
DOCROUTER_WEBHOOK_PATH = os.getenv("DOCROUTER_WEBHOOK_PATH", "docrouter")
DOCROUTER_WEBHOOK_SECRET = os.getenv("DOCROUTER_WEBHOOK_SECRET", "")
DOCROUTER_VERIFY_SIGNATURE = os.getenv("DOCROUTER_VERIFY_SIGNATURE", "true")


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Interpret an environment flag such as "true", "1", "yes" or "off"."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
