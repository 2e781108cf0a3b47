"""Tests for measures and their unit-building arithmetic."""

import dataclasses
from fractions import Fraction

import numpy as np
import pytest

from measura.core.base import BaseUnit
from measura.core.canonical import render
from measura.core.expr import DIMENSIONLESS, Base, Inv, Mul
from measura.core.measure import (
    Measure,
    divide,
    into_inner,
    invert,
    lift,
    measure_product,
    measure_sum,
    multiply,
    unify,
)
from measura.core.si import KILOGRAM, METER, SECOND
from measura.core.unify import UnitMismatchError

KILOMETER = BaseUnit("km")


def test_speed_from_distance_and_duration():
    distance = lift(100.0, METER)
    duration = lift(25.0, SECOND)
    speed = multiply(distance, invert(duration))
    assert speed.value == pytest.approx(4.0)
    assert speed.unit == Mul(Base(METER), Inv(Base(SECOND)))

    unified = unify(speed, Mul(Inv(SECOND), METER))
    assert unified.value is speed.value
    assert unified.unit == Mul(Inv(Base(SECOND)), Base(METER))


def test_divide_builds_a_product_with_an_inverse():
    speed = divide(lift(100.0, METER), lift(25.0, SECOND))
    assert speed.value == 4.0
    assert speed.unit == Mul(Base(METER), Inv(Base(SECOND)))
    assert (lift(100.0, METER) / lift(25.0, SECOND)) == speed


def test_operator_spelling_of_the_same_computation():
    distance = lift(100.0, METER)
    duration = lift(25.0, SECOND)
    speed = (Measure.dimensionless(1.0) / duration * distance).unify(METER / SECOND)
    assert speed.value == pytest.approx(4.0)
    assert speed.unit == METER / SECOND


def test_unify_rejects_a_different_unit():
    speed = lift(10.0, KILOMETER) / lift(100.0, SECOND)
    with pytest.raises(UnitMismatchError, match=r"expected unit of measure: m \* s\^-1"):
        speed.unify(METER / SECOND)


def test_unify_error_mentions_found_unit():
    with pytest.raises(UnitMismatchError) as excinfo:
        lift(3.0, SECOND).unify(METER, context="get_length")
    assert str(excinfo.value) == "get_length: expected unit of measure: m, found unit of measure: s"


def test_into_inner_and_unwrap():
    assert into_inner(lift(5, METER)) == 5
    assert lift(5, METER).into_inner() == 5
    assert Measure.dimensionless(3).unwrap() == 3
    ratio = (lift(6.0, METER) / lift(3.0, METER)).unify(DIMENSIONLESS)
    assert ratio.unwrap() == 2.0
    with pytest.raises(TypeError):
        lift(3, METER).unwrap()


def test_base_unit_new_lifts_a_value():
    assert METER.new(5) == lift(5, METER)
    assert lift(5, METER).unit == Base(METER)


def test_measures_are_immutable():
    measure = lift(1.0, METER)
    with pytest.raises(dataclasses.FrozenInstanceError):
        measure.value = 2.0


def test_addition_requires_identical_tags():
    total = lift(1, METER) + lift(2, METER)
    assert total == lift(3, METER)
    assert (lift(5, METER) - lift(2, METER)).value == 3
    with pytest.raises(TypeError):
        lift(1, METER) + lift(1, SECOND)
    with pytest.raises(TypeError):
        lift(1, METER) + 1


def test_addition_after_unifying_the_spelling():
    a = lift(2, METER) * lift(3, SECOND)
    b = lift(4, SECOND) * lift(5, METER)
    with pytest.raises(TypeError):
        a + b
    assert (a + b.unify(a.unit)).value == 26


def test_scalar_scaling_keeps_the_tag():
    assert lift(1, METER) * 10 == lift(10, METER)
    assert 10 * lift(1, METER) == lift(10, METER)
    assert (lift(10.0, METER) / 4).value == 2.5
    rate = 1 / lift(4.0, SECOND)
    assert rate.value == 0.25
    assert rate.unit == Inv(Base(SECOND))


def test_negation_and_abs():
    assert -lift(2, METER) == lift(-2, METER)
    assert abs(lift(-2, METER)) == lift(2, METER)


def test_equality_and_ordering():
    assert lift(1, METER) == lift(1, METER)
    assert lift(1, METER) != lift(1, SECOND)
    assert lift(1, METER) < lift(2, METER)
    assert lift(2, METER) >= lift(2, METER)
    with pytest.raises(TypeError):
        lift(1, METER) < lift(2, SECOND)


def test_sqrt_of_a_squared_tag():
    area = lift(3.0, METER) * lift(3.0, METER)
    side = area.sqrt()
    assert side.value == 3.0
    assert side.unit == Base(METER)
    with pytest.raises(TypeError):
        (lift(9.0, METER) * lift(1.0, SECOND)).sqrt()


def test_map_value_changes_representation_only():
    measure = lift(1, METER).map_value(float)
    assert isinstance(measure.value, float)
    assert measure.unit == Base(METER)


def test_exact_values():
    rate = invert(lift(Fraction(4), SECOND))
    assert rate.value == Fraction(1, 4)


def test_repr_and_runtime_unit():
    speed = lift(4.0, METER) / lift(1.0, SECOND)
    assert repr(speed) == "Measure(4.0, 'm * s^-1')"
    assert render(speed.as_runtime()) == "m * s^-1"


def test_array_values():
    distances = lift(np.array([1.0, 2.0]), METER)
    durations = lift(np.array([2.0, 4.0]), SECOND)
    speeds = (distances / durations).unify(Inv(SECOND) * METER)
    np.testing.assert_allclose(speeds.value, [0.5, 0.5])
    assert speeds.unit == Mul(Inv(Base(SECOND)), Base(METER))


def test_measure_sum():
    assert measure_sum([lift(1, METER), lift(2, METER)], METER) == lift(3, METER)
    assert measure_sum([], METER).value == 0
    with pytest.raises(TypeError):
        measure_sum([lift(1, METER), lift(1, SECOND)], METER)


def test_measure_product():
    product = measure_product([lift(2, METER), lift(3, SECOND), lift(4, KILOGRAM)])
    assert product.value == 24
    assert product.unit == Mul(Mul(Base(METER), Base(SECOND)), Base(KILOGRAM))
    assert measure_product([]) == Measure.dimensionless(1)


def test_zero_is_tagged_with_the_given_unit():
    zero = Measure.zero(METER / SECOND)
    assert zero.is_zero()
    assert zero.unit == Mul(Base(METER), Inv(Base(SECOND)))
    assert Measure.zero(METER) + lift(2, METER) == lift(2, METER)
    assert not lift(0.5, METER).is_zero()
    assert measure_sum([], SECOND) == Measure.zero(SECOND)
