"""Address canonicalization.

Query services hand back addresses in several encodings: ``0x``-prefixed
hex, escaped binary dumps (``\\xABCD...``) or bare hex. Everything is
reduced to lower-case ``0x``-prefixed form so addresses compare equal
across chains and against the denylist. No length or checksum validation
is performed.
"""

from typing import Any


def normalize_address(value: Any) -> str | None:
    """
    Canonicalize an address.

    Args:
        value: Raw address as returned by the data source

    Returns:
        Lower-case ``0x`` address, or None for empty input
    """
    if not value:
        return None

    raw = str(value)
    if raw.startswith(("0x", "0X")):
        return raw.lower()
    if raw.startswith(("\\x", "\\X")):
        return f"0x{raw[2:].lower()}"
    return f"0x{raw.lower()}"
