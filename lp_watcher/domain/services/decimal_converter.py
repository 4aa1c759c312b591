from __future__ import annotations

from lp_watcher.domain.exceptions import InvalidPrecisionError


def to_human_string(raw_amount: int, decimals: int, digits_to_show: int) -> str:
    """Render a raw on-chain amount with ``digits_to_show`` fractional digits.

    Extra precision is truncated, never rounded. A zero amount renders as ``"0"``.
    """
    if digits_to_show < 0 or decimals < digits_to_show:
        raise InvalidPrecisionError(
            f"decimals ({decimals}) must be >= digits_to_show ({digits_to_show}) >= 0."
        )
    if raw_amount < 0:
        raise InvalidPrecisionError(f"raw_amount must be non-negative, got {raw_amount}.")
    if raw_amount == 0:
        return "0"

    digits = str(int(raw_amount) // 10 ** (decimals - digits_to_show))
    if digits_to_show == 0:
        return digits
    digits = digits.zfill(digits_to_show + 1)
    return f"{digits[:-digits_to_show]}.{digits[-digits_to_show:]}"
