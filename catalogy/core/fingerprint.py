# catalogy/core/fingerprint.py
"""
Visitor fingerprints for unique-view counting.

Same algorithm as the storefront's browser-side helper, so a fingerprint
derived here matches one the browser sent for the same signals:

  - signals joined by "|" (missing values render as "")
  - 32-bit rolling hash over UTF-16 code units: h = h * 31 + unit
  - absolute value, base-36

Low entropy and collision tolerant. Not an identifier and not a
security primitive.
"""

import struct

from catalogy.schemas.analytics import ClientSignals

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def rolling_hash(data: str) -> int:
    """Signed 32-bit rolling hash of `data`."""
    raw = data.encode("utf-16-le", "surrogatepass")
    units = struct.unpack(f"<{len(raw) // 2}H", raw)

    h = 0
    for unit in units:
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def derive_fingerprint(signals: ClientSignals | None) -> str:
    signals = signals or ClientSignals()
    parts = [
        signals.user_agent,
        signals.language,
        signals.timezone_offset,
        signals.screen_width,
        signals.screen_height,
        signals.color_depth,
    ]
    data = "|".join("" if p is None else str(p) for p in parts)
    return _to_base36(abs(rolling_hash(data)))
