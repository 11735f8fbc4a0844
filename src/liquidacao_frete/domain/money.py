"""Money helpers using Decimal with BRL precision rules."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from re import sub

MONEY_PRECISION = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize_money(value: Decimal) -> Decimal:
    """Return value rounded to two decimal places with HALF_UP strategy.

    Precision is widened for values with more integer digits than the
    current context holds.
    """

    with localcontext() as context:
        context.prec = max(context.prec, value.adjusted() + 4)
        return value.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def parse_amount(text: str | None) -> Decimal:
    """Parse user-typed currency text into Decimal, returning zero when invalid.

    Accepts both ``1.234,56`` and ``1,234.56``: the last separator found is
    taken as the decimal separator and every earlier one is dropped as a
    thousands separator.
    """

    if not text:
        return Decimal("0")
    negative = text.strip().startswith("-")
    cleaned = sub(r"[^\d,.]", "", text)
    if not any(char.isdigit() for char in cleaned):
        return Decimal("0")

    last_separator = max(cleaned.rfind(","), cleaned.rfind("."))
    if last_separator == -1:
        normalized = cleaned
    else:
        integer_part = sub(r"[,.]", "", cleaned[:last_separator])
        fraction_part = cleaned[last_separator + 1 :]
        normalized = f"{integer_part or '0'}.{fraction_part or '0'}"

    try:
        amount = Decimal(normalized)
    except InvalidOperation:
        return Decimal("0")
    return -amount if negative else amount


def format_money(value: Decimal) -> str:
    """Render money as string with exactly two decimal places."""

    return f"{quantize_money(value):.2f}"


def format_brl(value: Decimal) -> str:
    """Render money in pt-BR display format, e.g. ``R$ 1.234,56``."""

    grouped = f"{quantize_money(value):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    if localized.startswith("-"):
        return f"-R$ {localized[1:]}"
    return f"R$ {localized}"
