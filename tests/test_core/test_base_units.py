"""Tests for base units and the name registry."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from measura.core.base import BaseUnit, BaseUnitLike, RegistryError, UnitRegistry
from measura.core.si import DEFAULT_REGISTRY, METER, SECOND, SI_BASE_UNITS


def test_identity_is_the_name():
    assert BaseUnit("km") == BaseUnit("km", "kilometre")
    assert hash(BaseUnit("km")) == hash(BaseUnit("km", "kilometre"))
    assert BaseUnit("km") != BaseUnit("m")


def test_empty_names_are_rejected():
    with pytest.raises(ValueError):
        BaseUnit("")
    with pytest.raises(ValueError):
        BaseUnit("   ")


def test_base_units_satisfy_the_protocol():
    assert isinstance(METER, BaseUnitLike)
    assert not isinstance(3, BaseUnitLike)


def test_si_base_units():
    assert [unit.name for unit in SI_BASE_UNITS] == ["s", "m", "kg", "A", "K", "mol", "cd"]
    assert str(METER) == "m"


def test_default_registry_resolves_aliases():
    assert DEFAULT_REGISTRY.resolve("m") is METER
    assert DEFAULT_REGISTRY.resolve("metre") is METER
    assert DEFAULT_REGISTRY.resolve("seconds") is SECOND
    assert "kg" in DEFAULT_REGISTRY
    with pytest.raises(KeyError):
        DEFAULT_REGISTRY.resolve("furlong")


def test_register_is_idempotent():
    registry = UnitRegistry()
    eur = BaseUnit("EUR", "euro")
    registry.register(eur, aliases=["euro"])
    before = registry.snapshot()
    registry.register(BaseUnit("EUR"), aliases=["euro"])
    assert registry.snapshot() is before
    assert len(registry) == 2
    assert registry.names() == ("EUR", "euro")


def test_register_refuses_to_rebind_a_name():
    registry = UnitRegistry([BaseUnit("EUR")])
    with pytest.raises(RegistryError):
        registry.register(BaseUnit("USD"), aliases=["EUR"])
    assert "USD" not in registry


def test_register_requires_a_named_unit():
    with pytest.raises(TypeError):
        UnitRegistry().register(42)


def test_snapshots_are_read_only_and_stable():
    registry = UnitRegistry([BaseUnit("EUR")])
    snapshot = registry.snapshot()
    with pytest.raises(TypeError):
        snapshot["USD"] = BaseUnit("USD")
    registry.register(BaseUnit("USD"))
    assert "USD" not in snapshot
    assert registry.get("USD") == BaseUnit("USD")


def test_concurrent_registration():
    registry = UnitRegistry()
    units = [BaseUnit(f"u{index}") for index in range(100)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(registry.register, units))
    assert len(registry) == 100
    assert all(unit.name in registry for unit in units)
