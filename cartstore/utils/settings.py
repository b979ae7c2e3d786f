# cartstore/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

CATALOG_BASE_URL = os.getenv("CATALOG_BASE_URL", "https://fakestoreapi.com")
_timeout = os.getenv("CATALOG_TIMEOUT_SECONDS")
CATALOG_TIMEOUT_SECONDS = float(_timeout) if _timeout else None  # None = domyslny timeout transportu
CATALOG_RETRY_ATTEMPTS = int(os.getenv("CATALOG_RETRY_ATTEMPTS", 1))
STORAGE_URL = os.getenv("STORAGE_URL", "sqlite:///cartstore.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
PERSIST_KEY = os.getenv("PERSIST_KEY", "root")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = os.getenv("DEBUG", "0").lower() in ("1", "true", "yes")
