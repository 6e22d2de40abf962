"""Publisher server endpoints and hashed key prefixes.

Lookups never send the publisher key itself.  The request path carries a
fixed-length hex prefix of the key's SHA-256 digest, so every lookup has
the same shape regardless of which publisher is being resolved.  Do not
add query parameters or headers whose size depends on the key.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable

HashPrefixFn = Callable[[str, int], str]


def hash_prefix_hex(publisher_key: str, prefix_bytes: int) -> str:
    """Return the first *prefix_bytes* of SHA-256(key) as lower-case hex."""
    if prefix_bytes < 1:
        msg = f"prefix_bytes must be positive, got {prefix_bytes}"
        raise ValueError(msg)
    digest = hashlib.sha256(publisher_key.encode("utf-8")).digest()
    return digest[:prefix_bytes].hex()


def publisher_list_url(server_url: str) -> str:
    return f"{server_url}/prefixes"


def publisher_info_url(server_url: str, hex_prefix: str) -> str:
    return f"{server_url}/prefix/{hex_prefix}"
