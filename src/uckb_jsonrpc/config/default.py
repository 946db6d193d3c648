# uckb_jsonrpc/config/default.py
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RPC_URL = "http://127.0.0.1:8114"


def _float_or_none(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


# Env overrides, otherwise defaults
RPC_URL: str = os.getenv("CKB_RPC_URL", DEFAULT_RPC_URL)
RPC_TIMEOUT: float | None = _float_or_none(os.getenv("CKB_RPC_TIMEOUT"))
RPC_TOKEN: str | None = os.getenv("CKB_RPC_TOKEN") or None
# unset leaves the package logger to the host application
LOG_LEVEL: str | None = (os.getenv("UCKB_LOG_LEVEL") or "").upper() or None
