# simplechain/utils.py
import hashlib
import json
import time


def canonical_json(obj) -> bytes:
    """
    Returns the byte form used for hashing.
    Key order is kept as given (the record order IS the format),
    compact separators, non-ASCII kept literal.
    """
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def sha256_hex(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


def now_seconds() -> int:
    # whole seconds only, part of the hashed format
    return int(time.time())


def short_hash(value: str, size: int = 16) -> str:
    if not value:
        return "<empty>"
    return f"{value[:size]}..."
