from decimal import Decimal

from trainlog.domain.metrics import (
    average,
    format_duration,
    kg_to_pounds,
    meters_to_kilometers,
    percentage,
    quantize,
    seconds_to_minutes,
    set_volume,
    total_volume,
)


def test_set_volume_is_weight_times_reps():
    assert set_volume(Decimal("100"), 10) == Decimal("1000.00")
    assert set_volume(62.5, 8) == Decimal("500.00")


def test_set_volume_needs_both_weight_and_reps():
    assert set_volume(None, 10) is None
    assert set_volume(Decimal("100"), None) is None
    assert set_volume(0, 10) is None


def test_total_volume_skips_sets_without_reps():
    pairs = [(Decimal("100"), 10)] * 3 + [(Decimal("20"), None), (None, None)]
    assert total_volume(pairs) == Decimal("3000.00")


def test_total_volume_of_nothing_is_zero():
    assert total_volume([]) == Decimal("0.00")


def test_rounding_is_half_up():
    assert quantize(Decimal("2.345")) == Decimal("2.35")
    assert quantize(Decimal("2.335")) == Decimal("2.34")
    assert quantize(0.125) == Decimal("0.13")


def test_average_rounds_to_one_decimal_and_ignores_missing():
    assert average([7, 8, 8]) == 7.7
    assert average([None, 9]) == 9.0
    assert average([]) is None


def test_percentage():
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67
    assert percentage(3, 3) == 100.0
    assert percentage(5, 0) == 0.0


def test_unit_conversions():
    assert seconds_to_minutes(125) == 2.08
    assert seconds_to_minutes(None) is None
    assert meters_to_kilometers(5000) == 5.0
    assert kg_to_pounds(Decimal("100")) == 220.46


def test_format_duration():
    assert format_duration(45) == "45s"
    assert format_duration(125) == "2m 5s"
    assert format_duration(3725) == "1h 2m 5s"
    assert format_duration(0) is None
