"""Short, stable fingerprint of a flat field mapping.

Used to give customised SSH profiles distinct names. Stability matters, not
collision resistance: the same fields always hash to the same string, no
matter the key order or letter case.
"""

import base64
import hashlib
import json

HASH_LENGTH = 10


def _encode(item) -> str:
    if isinstance(item, str):
        item = item.lower()
    return json.dumps(item, ensure_ascii=False).lower()


def _serialize_entry(key, value) -> str:
    return f"{_encode(key)}:{_encode(value)}"


def config_hash(fields) -> str:
    """Return a URL-safe digest of fields, truncated to HASH_LENGTH characters.

    Raises:
        TypeError: If a key or value is not JSON serialisable.
    """
    entries = sorted(_serialize_entry(key, value) for key, value in fields.items())
    digest = hashlib.sha256("\n".join(entries).encode("utf-8")).digest()
    encoded = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return encoded[:HASH_LENGTH]
