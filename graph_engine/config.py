"""Service settings, read from the environment at import time."""
import logging
import os

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default


GRAPH_SERVICE_TOKEN = os.environ.get("GRAPH_SERVICE_TOKEN", "")
TOKEN_HEADER = "x-graph-token"

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = _env_int("PORT", 8787)
MAX_BODY_BYTES = _env_int("MAX_BODY_BYTES", 2 * 1024 * 1024)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

CHAIN_MIN_LENGTH = _env_int("CHAIN_MIN_LENGTH", 2)
CHAIN_MAX_LENGTH = _env_int("CHAIN_MAX_LENGTH", 10)
# 0 disables the budget
CHAIN_MAX_VISITS = _env_int("CHAIN_MAX_VISITS", 2_000_000)
CHAIN_TIMEOUT_SECONDS = _env_float("CHAIN_TIMEOUT_SECONDS", 30.0)

DUPLICATE_EDGE_POLICY = os.environ.get("DUPLICATE_EDGE_POLICY", "last_write_wins").strip().lower()
