"""Numeric policy shared by set, exercise and session aggregates.

All arithmetic goes through ``Decimal`` and is quantized with ROUND_HALF_UP,
so identical inputs always produce identical stored totals.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

Number = Union[int, float, Decimal]

CENT = Decimal("0.01")
TENTH = Decimal("0.1")
KG_TO_LB = Decimal("2.20462")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() avoids dragging binary float noise into the decimal
    return Decimal(str(value))


def quantize(value: Number, exp: Decimal = CENT) -> Decimal:
    return to_decimal(value).quantize(exp, rounding=ROUND_HALF_UP)


def round_float(value: Number, exp: Decimal = CENT) -> float:
    return float(quantize(value, exp))


def set_volume(weight_kg: Optional[Number], actual_reps: Optional[int]) -> Optional[Decimal]:
    """weight x reps, or None when either side is missing or zero."""
    if not weight_kg or not actual_reps:
        return None
    return quantize(to_decimal(weight_kg) * actual_reps)


def total_volume(pairs: Iterable[tuple[Optional[Number], Optional[int]]]) -> Decimal:
    total = Decimal("0")
    for weight_kg, actual_reps in pairs:
        volume = set_volume(weight_kg, actual_reps)
        if volume is not None:
            total += volume
    return quantize(total)


def average(values: Iterable[Number], exp: Decimal = TENTH) -> Optional[float]:
    present = [to_decimal(v) for v in values if v is not None]
    if not present:
        return None
    return round_float(sum(present) / len(present), exp)


def percentage(part: Number, whole: Number) -> float:
    if not whole:
        return 0.0
    return round_float(to_decimal(part) / to_decimal(whole) * 100)


def seconds_to_minutes(seconds: Optional[int]) -> Optional[float]:
    if not seconds:
        return None
    return round_float(Decimal(seconds) / 60)


def meters_to_kilometers(meters: Optional[int]) -> Optional[float]:
    if not meters:
        return None
    return round_float(Decimal(meters) / 1000)


def kg_to_pounds(weight_kg: Optional[Number]) -> Optional[float]:
    if not weight_kg:
        return None
    return round_float(to_decimal(weight_kg) * KG_TO_LB)


def format_duration(seconds: Optional[int]) -> Optional[str]:
    if not seconds:
        return None
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
