from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext


ANOMALY_RATE_THRESHOLD = Decimal("0.97")

# Display precision per event kind.
DIGITS_TO_SHOW = {
    "Swap": 4,
    "AddLiquidity": 3,
    "RemoveLiquidity": 3,
    "RemoveLiquidityOne": 3,
    "RemoveLiquidityImbalance": 4,
}


def _places(value: Decimal) -> int:
    return max(-value.as_tuple().exponent, 0)


def _precision_for(value: Decimal, places: int) -> int:
    # integer digits + fractional places + one for a rounding carry
    return max(value.adjusted() + 1, 1) + places + 1


def round_usd(value: Decimal, digits_to_show: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _precision_for(value, digits_to_show))
        return value.quantize(Decimal(1).scaleb(-digits_to_show), rounding=ROUND_HALF_UP)


def usd_value(human_amount: str, price: Decimal, digits_to_show: int) -> Decimal:
    amount = Decimal(human_amount)
    with localcontext() as ctx:
        # exact product: raw amounts are unbounded
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + len(price.as_tuple().digits))
        product = amount * price
    return round_usd(product, digits_to_show)


def sum_usd(values: list[Decimal]) -> Decimal:
    if not values:
        return Decimal("0")
    with localcontext() as ctx:
        widest = max(_precision_for(value, _places(value)) for value in values)
        ctx.prec = max(ctx.prec, widest + len(str(len(values))))
        return sum(values, Decimal("0"))


def exchange_rate(sold_human_amount: str, bought_human_amount: str) -> Decimal | None:
    sold = Decimal(sold_human_amount)
    if sold == 0:
        return None
    return Decimal(bought_human_amount) / sold


def is_rate_anomalous(rate: Decimal | None) -> bool:
    if rate is None:
        return False
    return rate <= ANOMALY_RATE_THRESHOLD


def format_usd(value: Decimal) -> str:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _precision_for(value, 2))
        rounded = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${rounded:,.2f}"
