import re

# Sanity bound against misparsed tokens (phone numbers, years glued together...)
MAX_AMOUNT = 1_000_000_000

# First decimal token: digits with optional thousands separators, up to 2 decimals
AMOUNT_RE = re.compile(r"\d[\d,]*(?:\.\d{1,2})?")
NOT_AVAILABLE_RE = re.compile(r"NOT[_ ]AVAILABLE", re.IGNORECASE)

def normalize_address(addr: str) -> str:
    """
    Minimal normalization so seeds are stable:
    - trim whitespace
    - lowercase
    - collapse multiple spaces
    """
    return " ".join(addr.strip().lower().split())

def to_amount(token: str) -> float | None:
    """Strip separators from a numeric token; None unless 0 < value < MAX_AMOUNT."""
    cleaned = token.replace(",", "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if 0 < value < MAX_AMOUNT:
        return value
    return None

def parse_amount(text: str) -> float | None:
    """
    Parse the first decimal token in free text.

    >>> parse_amount("About HK$1,234,567.89 today")
    1234567.89
    """
    match = AMOUNT_RE.search(text or "")
    if match is None:
        return None
    return to_amount(match.group(0))

def is_not_available(text: str) -> bool:
    """Case-insensitive check for the NOT_AVAILABLE / NOT AVAILABLE sentinel."""
    return bool(NOT_AVAILABLE_RE.search(text or ""))

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out
