"""
Deterministic session identifiers.

A session id is a UUIDv5 over a SHA-512 digest of the visitor attributes
and a fixed salt. Same inputs give the same id on every process, which is
what makes session creation safe without a prior read.
"""

import hashlib
import uuid
from typing import Optional


def _hash(*parts: str) -> str:
    return hashlib.sha512("".join(parts).encode("utf-8")).hexdigest()


def derive_id(*parts: Optional[str], salt: str = "") -> str:
    """
    Derive a stable UUID string from the given parts.

    Args:
        parts: Values identifying the visitor, e.g. website id, hostname, ip, user agent.
               None is treated as an empty string.
        salt: Fixed configuration value mixed into the digest

    Returns:
        Canonical UUID string
    """
    values = [part or "" for part in parts]
    # Separator keeps ("ab", "c") and ("a", "bc") apart
    digest = _hash("\x1f".join(values), salt)
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, digest))


def is_valid_uuid(value: Optional[str]) -> bool:
    """
    True only for canonical, hyphenated RFC 4122 UUID strings.

    The version must be 1-8 and the variant RFC 4122; the nil UUID is also accepted.
    """
    if not isinstance(value, str) or len(value) != 36:
        return False
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    if str(parsed) != value.lower():
        return False
    if parsed.int == 0:
        return True
    return parsed.variant == uuid.RFC_4122 and 1 <= parsed.version <= 8
