# directory_etl/config.py
from dotenv import load_dotenv
import os
from pathlib import Path

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
ARTICLES_TABLE = os.getenv("ARTICLES_TABLE", "articles")

# Runtime parameters
CONCURRENCY = int(os.getenv("CONCURRENCY", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
GEO_FILTER = _env_flag("GEO_FILTER", True)
REJECT_UNCLASSIFIED = _env_flag("REJECT_UNCLASSIFIED", False)
BUSINESS_STATUS = os.getenv("BUSINESS_STATUS", "approved")
FALLBACK_CATEGORY = os.getenv("FALLBACK_CATEGORY", "Uncategorized")
DEFAULT_AUTHOR = os.getenv("DEFAULT_AUTHOR", "Amaravati Chamber")

# Webhook server
WEBHOOK_HOST = os.getenv("WEBHOOK_HOST", "0.0.0.0")
WEBHOOK_PORT = int(os.getenv("WEBHOOK_PORT", "8080"))

# File names
RAW_INPUT_CSV = os.getenv("RAW_INPUT_CSV", "businesses_raw.csv")
INPUT_CSV = os.getenv("INPUT_CSV", "updated_businesses.csv")
BUSINESSES_CSV = "businesses.csv"
CATEGORIES_CSV = "business_categories.csv"
MAPPINGS_CSV = "business_category_mappings.csv"
ERROR_LOG = "category_errors.log"
CATEGORY_TABLE_CSV = os.getenv(
    "CATEGORY_TABLE_CSV",
    str(Path(__file__).parent / "data" / "category_mapping.csv"),
)
