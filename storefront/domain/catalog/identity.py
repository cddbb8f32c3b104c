# storefront/domain/catalog/identity.py
"""Maps human-entered product keys from the sheet to stable integer ids.

Sheet editors key products either by number (``"12"``) or by a slug
(``"acid-washed-oversized"``). Numeric keys are used as-is; in ``legacy``
mode a key that starts with a number (``"101-A"``) uses that number. Other
keys are hashed together with the product name into a numeric range that
sits above the ids editors actually type.

Two hashing modes exist:

``legacy``
    The 32-bit rolling hash older deployments used, folded into
    ``10_000..109_999``. Distinct keys can collide and are then merged into a
    single product; collisions are neither detected nor reported. Kept as the
    default so existing durable rows keep their ``sku``.

``content``
    SHA-256 of key and name folded into ``110_000..2**53``. Stable across
    processes and practically collision free. Changes ids of every
    non-numeric key compared to ``legacy``.
"""
import enum
import hashlib
import re

LEGACY_OFFSET = 10_000
LEGACY_MODULUS = 100_000

CONTENT_OFFSET = LEGACY_OFFSET + LEGACY_MODULUS
CONTENT_CEILING = 2 ** 53

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_LEADING_INT_RE = re.compile(r"[+-]?[0-9]+")


class IdentityMode(str, enum.Enum):
    LEGACY = "legacy"
    CONTENT = "content"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def legacy_hash(text: str) -> int:
    h = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32((h << 7) - h + code_unit)
    return h


def content_hash(text: str) -> int:
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def parse_numeric_key(key: str, strict: bool = False):
    """Return the key as a positive int, or None.

    By default the leading integer is taken and any trailing text ignored, so
    ``"12abc"`` is 12 and ``"1.5"`` is 1. With ``strict`` only a plain run of
    digits counts.
    """
    key = key.strip()
    if strict:
        if not key.isdigit() or not key.isascii():
            return None
        value = int(key)
    else:
        match = _LEADING_INT_RE.match(key)
        if match is None:
            return None
        value = int(match.group())
    return value if value > 0 else None


def resolve_product_id(key: str, name: str, mode: IdentityMode = IdentityMode.LEGACY) -> int:
    mode = IdentityMode(mode)
    numeric = parse_numeric_key(key, strict=mode is IdentityMode.CONTENT)
    if numeric is not None:
        return numeric

    key = key.strip()
    name = name.strip()
    if mode is IdentityMode.CONTENT:
        span = CONTENT_CEILING - CONTENT_OFFSET
        return content_hash(f"{key}\x1f{name}") % span + CONTENT_OFFSET
    return abs(legacy_hash(key + name)) % LEGACY_MODULUS + LEGACY_OFFSET


def slugify(name: str) -> str:
    return _SLUG_RE.sub("-", (name or "").lower()).strip("-")
