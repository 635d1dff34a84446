"""
Canonical cache key derivation.

The same key is used for local cache lookups and sent to the service as
``cache_key``, so client and server always agree on which translation a
request refers to.
"""

from __future__ import annotations

import hashlib
import json


def generate_cache_key(
    account_id: str,
    text: str,
    locale: str,
    context: str = "",
    tone: str = "",
) -> str:
    """
    Derive a deterministic cache key for a translation request.

    Fields are serialized as a JSON array before hashing so field boundaries
    are unambiguous: ("ab", "c") and ("a", "bc") never share a key.

    Returns:
        64-character SHA-256 hex digest
    """
    content = json.dumps(
        [account_id, text, locale, context, tone],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
