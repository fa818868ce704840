from types import SimpleNamespace

import pytest

from trainlog.domain.performance import (
    comparable_measurement,
    has_actual,
    performance_percentage,
    prescribed_families,
    target_met,
)


def make_set(**values):
    fields = {
        "target_reps": None,
        "actual_reps": None,
        "target_duration_seconds": None,
        "actual_duration_seconds": None,
        "target_distance_meters": None,
        "actual_distance_meters": None,
    }
    fields.update(values)
    return SimpleNamespace(**fields)


@pytest.mark.parametrize(
    "actual, expected",
    [(9, False), (10, True), (12, True)],
)
def test_target_met_at_the_boundary(actual, expected):
    assert target_met(make_set(target_reps=10, actual_reps=actual)) is expected


def test_target_met_without_a_comparable_pair():
    assert target_met(make_set(target_reps=10)) is False
    assert target_met(make_set(actual_reps=10)) is False
    assert target_met(make_set(target_reps=10, actual_duration_seconds=60)) is False


def test_reps_win_over_other_families():
    record = make_set(
        target_reps=10, actual_reps=8,
        target_duration_seconds=60, actual_duration_seconds=90,
    )
    assert comparable_measurement(record).family == "reps"
    assert target_met(record) is False


def test_falls_through_to_duration_then_distance():
    assert target_met(make_set(target_duration_seconds=60, actual_duration_seconds=60)) is True
    assert target_met(make_set(target_distance_meters=5000, actual_distance_meters=4800)) is False


def test_performance_percentage():
    assert performance_percentage(make_set(target_reps=10, actual_reps=8)) == 80.0
    assert performance_percentage(make_set(target_reps=3, actual_reps=2)) == 66.67
    assert performance_percentage(make_set(target_distance_meters=5000, actual_distance_meters=5500)) == 110.0
    assert performance_percentage(make_set(target_reps=10)) is None


def test_prescribed_families_and_actuals():
    record = make_set(target_duration_seconds=60)
    assert prescribed_families(record) == {"duration_seconds"}
    assert has_actual(record) is False
    record.actual_duration_seconds = 55
    assert has_actual(record) is True
