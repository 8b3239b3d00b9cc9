"""
Global settings for the Multicall batcher
Loads overrides from environment variables or .env file
"""
import os
from typing import Final
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Multicall3 is deployed at the same address on every supported chain
MULTICALL3_ADDRESS: Final[str] = "0xcA11bde05977b3631167028862bE2a173976CA11"


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


# Aggregator contract used when a Caller gets no explicit address
MULTICALL_ADDRESS: Final[str] = os.getenv("MULTICALL_ADDRESS") or MULTICALL3_ADDRESS

# Calls per aggregate invocation for chunked operations
DEFAULT_CHUNK_SIZE: Final[int] = _env_int("DEFAULT_CHUNK_SIZE", 100)

# Pause between chunks in seconds (0 disables pacing)
DEFAULT_COOLDOWN_SECONDS: Final[float] = _env_float("DEFAULT_COOLDOWN_SECONDS", 0.0)

# Request timeout in seconds for dialed providers
REQUEST_TIMEOUT: Final[float] = _env_float("REQUEST_TIMEOUT", 10.0)

# Logging level
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()
