import os
import logging

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", "PROD"))
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    import sys
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('RUNTIME_ENVIRONMENT', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Remote Store (storefront REST API)
API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8080/api")
API_TIMEOUT_SECONDS = float(os.environ.get("API_TIMEOUT_SECONDS", "10"))

# Local Store backend: "sqlite" (file on disk) or "redis"
LOCAL_STORAGE_BACKEND = os.environ.get("LOCAL_STORAGE_BACKEND", "sqlite").lower()
LOCAL_STORAGE_DB_URL = os.environ.get("LOCAL_STORAGE_DB_URL", "sqlite:///local_storage.db")
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

# One fixed storage key per collection
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "greeting_card_cart")
WISHLIST_STORAGE_KEY = os.environ.get("WISHLIST_STORAGE_KEY", "greeting_card_wishlist")

# Shipping defaults, used when the promotion preview is unavailable
# Amounts are in the store currency's major unit (VND)
try:
    SHIPPING_FEE = float(os.environ.get("SHIPPING_FEE", "30000"))
    FREE_SHIPPING_THRESHOLD = float(os.environ.get("FREE_SHIPPING_THRESHOLD", "500000"))
except ValueError as e:
    import sys
    print(f"\n ERROR: Invalid shipping configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Expected: numbers (e.g., SHIPPING_FEE=30000, FREE_SHIPPING_THRESHOLD=500000)\n", file=sys.stderr)
    sys.exit(1)

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask tokens and emails in logs

# Log Retention: Environment-specific defaults
# Dev: keep a month of logs for debugging
# Prod: Use 5 days default to save disk space
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))

if RUNTIME_ENVIRONMENT == RuntimeEnvironment.TEST:
    logging.debug("[Init] Running in TEST environment")
