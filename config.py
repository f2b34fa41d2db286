import os
import sys

from dotenv import load_dotenv

from enums.currency import Currency
from enums.duplicate_tier_policy import DuplicateTierPolicy
from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test runs to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    _runtime_env_str = os.environ.get("RUNTIME_ENVIRONMENT")
    if not _runtime_env_str:
        raise ValueError("RUNTIME_ENVIRONMENT environment variable is not set")
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(_runtime_env_str)
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('RUNTIME_ENVIRONMENT', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Database
DB_NAME = os.environ.get("DB_NAME", "pricing.db")
DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")

# Parse CURRENCY with error handling
try:
    CURRENCY = Currency(os.environ.get("CURRENCY", Currency.USD.value))
except ValueError as e:
    valid_currencies = [c.value for c in Currency]
    print(f"\n ERROR: Invalid CURRENCY configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_currencies)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('CURRENCY', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: CURRENCY={valid_currencies[0]}\n", file=sys.stderr)
    sys.exit(1)

# Pricing
PRICE_DECIMAL_PLACES = int(os.environ.get("PRICE_DECIMAL_PLACES", "2"))  # Rounding of reported money amounts

try:
    DUPLICATE_TIER_POLICY = DuplicateTierPolicy(os.environ.get("DUPLICATE_TIER_POLICY", DuplicateTierPolicy.REPLACE.value))
except ValueError as e:
    valid_policies = [p.value for p in DuplicateTierPolicy]
    print(f"\n ERROR: Invalid DUPLICATE_TIER_POLICY configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_policies)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('DUPLICATE_TIER_POLICY', '(not set)')}\n", file=sys.stderr)
    sys.exit(1)

# Optimistic locking of product configurations
CONFIG_SAVE_MAX_RETRIES = int(os.environ.get("CONFIG_SAVE_MAX_RETRIES", "3"))  # Reload/reapply/resave attempts on VersionConflict
CONFIG_SAVE_RETRY_DELAY = float(os.environ.get("CONFIG_SAVE_RETRY_DELAY", "0.1"))  # Base delay in seconds, doubles per attempt

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask sensitive data in logs
LOG_DIR = os.environ.get("LOG_DIR", "logs")

# Retention defaults per environment
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.PROD:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))
