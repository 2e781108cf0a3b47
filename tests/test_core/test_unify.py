import logging

import pytest

from measura import config
from measura.core.base import BaseUnit
from measura.core.canonical import render
from measura.core.expr import DIMENSIONLESS, Inv, Mul
from measura.core.si import METER, SECOND
from measura.core.unify import Mismatch, UnitMismatchError, check_unify, guard, try_unify

KILOMETER = BaseUnit("km", "kilometre")


def test_same_unit_different_spelling_unifies():
    assert try_unify(Mul(METER, Inv(SECOND)), Mul(Inv(SECOND), METER)) is None
    assert try_unify(Mul(METER, Inv(METER)), DIMENSIONLESS) is None


def test_mismatch_carries_both_forms():
    mismatch = try_unify(Mul(KILOMETER, Inv(SECOND)), Mul(METER, Inv(SECOND)))
    assert isinstance(mismatch, Mismatch)
    assert render(mismatch.expected) == "m * s^-1"
    assert render(mismatch.found) == "km * s^-1"
    report = mismatch.report()
    assert "expected unit of measure: m * s^-1" in report
    assert "found unit of measure: km * s^-1" in report


def test_no_conversion_between_multiples():
    assert try_unify(KILOMETER, METER) is not None


def test_check_unify_raises_assertion_error():
    with pytest.raises(UnitMismatchError) as excinfo:
        check_unify(KILOMETER / SECOND, METER / SECOND)
    assert isinstance(excinfo.value, AssertionError)
    assert render(excinfo.value.expected) == "m * s^-1"
    assert render(excinfo.value.found) == "km * s^-1"


def test_context_prefixes_the_message():
    with pytest.raises(UnitMismatchError, match=r"^get_speed: expected unit of measure"):
        check_unify(KILOMETER / SECOND, METER / SECOND, context="get_speed")


def test_guard_logs_before_raising(caplog):
    mismatch = try_unify(SECOND, METER)
    with caplog.at_level(logging.ERROR, logger="measura"):
        with pytest.raises(UnitMismatchError):
            guard(mismatch)
    records = [record for record in caplog.records if "unit mismatch" in record.getMessage()]
    assert records
    assert records[0].levelno == logging.ERROR
    assert records[0].payload == {"expected": "m", "found": "s"}


def test_trace_logs_successful_unifications(caplog, monkeypatch):
    monkeypatch.setattr(config, "TRACE_UNIFY", True)
    with caplog.at_level(logging.DEBUG, logger="measura.core.unify"):
        assert try_unify(METER / SECOND, Inv(SECOND) * METER) is None
    assert any("unified m * s^-1 with m * s^-1" in record.getMessage() for record in caplog.records)


def test_trace_is_silent_by_default(caplog, monkeypatch):
    monkeypatch.setattr(config, "TRACE_UNIFY", False)
    with caplog.at_level(logging.DEBUG, logger="measura.core.unify"):
        try_unify(METER, METER)
    assert not [record for record in caplog.records if record.name == "measura.core.unify"]


def test_report_keeps_plain_names_when_they_are_unambiguous():
    mismatch = try_unify(Mul(KILOMETER, Inv(SECOND)), Mul(BaseUnit("km", "other declaration"), SECOND))
    assert mismatch.rendered() == ("km * s", "km * s^-1")
