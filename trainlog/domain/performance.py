from decimal import Decimal
from typing import NamedTuple, Optional

from trainlog.domain.metrics import round_float

FAMILIES = ("reps", "duration_seconds", "distance_meters")


class Measurement(NamedTuple):
    family: str
    target: int
    actual: int


def comparable_measurement(record) -> Optional[Measurement]:
    """First metric family (reps, then duration, then distance) with both a
    positive target and a positive actual on ``record``."""
    for family in FAMILIES:
        target = getattr(record, f"target_{family}")
        actual = getattr(record, f"actual_{family}")
        if target and actual:
            return Measurement(family, target, actual)
    return None


def target_met(record) -> bool:
    measurement = comparable_measurement(record)
    if measurement is None:
        return False
    return measurement.actual >= measurement.target


def performance_percentage(record) -> Optional[float]:
    measurement = comparable_measurement(record)
    if measurement is None:
        return None
    return round_float(Decimal(measurement.actual) / Decimal(measurement.target) * 100)


def prescribed_families(record) -> set[str]:
    return {family for family in FAMILIES if getattr(record, f"target_{family}")}


def has_actual(record) -> bool:
    return any(getattr(record, f"actual_{family}") for family in FAMILIES)
