# tests/unit/normalize/test_unit_address.py — v1
"""Tests for normalize/address.py — address resolution strategies."""

from __future__ import annotations

import random

import pytest

from passportscan.core.models import EnhancedFields
from passportscan.normalize.address import (
    ADDRESS_SENTINEL,
    SAMPLE_ADDRESSES,
    AIGeneratedStrategy,
    FailSentinelStrategy,
    StaticSampleStrategy,
    address_from_enhancement,
    create_address_strategy,
)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


class TestAddressFromEnhancement:
    def test_none_when_not_enhanced(self, rng):
        assert address_from_enhancement(None, "CHILE", rng) is None

    def test_none_when_no_address_fields(self, rng):
        assert address_from_enhancement(EnhancedFields(surname="X"), "CHILE", rng) is None

    def test_street_and_number_used(self, rng):
        enhanced = EnhancedFields(street_address="Avenida Providencia", address_number="42")
        address = address_from_enhancement(enhanced, "CHILE", rng)
        assert address.street == "AVENIDA PROVIDENCIA"
        assert address.number == "42"
        assert address.locality == "CHILE"

    def test_missing_number_generated_in_range(self, rng):
        enhanced = EnhancedFields(street_address="Calle Mayor")
        for _ in range(50):
            number = int(address_from_enhancement(enhanced, "ESPAÑA", rng).number)
            assert 1 <= number <= 150


class TestStrategies:
    def test_fail_sentinel_fallback(self, rng):
        address = FailSentinelStrategy().resolve("CHILE", "CHILE", None, rng)
        assert address.street == ADDRESS_SENTINEL
        assert address.number == ""
        assert address.locality == "CHILE"

    def test_enhancement_wins_over_fallback(self, rng):
        enhanced = EnhancedFields(street_address="Main Street", address_number="5")
        address = FailSentinelStrategy().resolve("CHILE", "CHILE", enhanced, rng)
        assert address.street == "MAIN STREET"

    def test_static_sample_uses_country_list(self, rng):
        address = StaticSampleStrategy().resolve("ALEMANIA", "ALEMANIA", None, rng)
        streets = {s.rpartition(" ")[0].upper() for s in SAMPLE_ADDRESSES["ALEMANIA"]}
        assert address.street in streets
        assert address.number.isdigit()

    def test_static_sample_default_list(self, rng):
        address = StaticSampleStrategy().resolve("ATLANTIS", "ATLANTIS", None, rng)
        streets = {s.rpartition(" ")[0].upper() for s in SAMPLE_ADDRESSES["DEFAULT"]}
        assert address.street in streets

    def test_ai_generated_requests_address(self):
        assert AIGeneratedStrategy().requests_ai_address is True
        assert FailSentinelStrategy().requests_ai_address is False

    def test_ai_generated_falls_back_to_sentinel(self, rng):
        address = AIGeneratedStrategy().resolve("CHILE", "CHILE", None, rng)
        assert address.street == ADDRESS_SENTINEL


class TestCreateAddressStrategy:
    @pytest.mark.parametrize(
        "name,cls",
        [
            ("static_sample", StaticSampleStrategy),
            ("ai_generated", AIGeneratedStrategy),
            ("fail_sentinel", FailSentinelStrategy),
        ],
    )
    def test_known(self, name, cls):
        assert isinstance(create_address_strategy(name), cls)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unsupported address strategy"):
            create_address_strategy("nope")
