# tests/unit/normalize/test_unit_normalizer.py — v1
"""Tests for normalize/normalizer.py — RawScanResult -> NormalizedRecord."""

from __future__ import annotations

import random

import pytest

from passportscan.core.models import EnhancedFields, RawScanResult
from passportscan.normalize.address import ADDRESS_SENTINEL, StaticSampleStrategy
from passportscan.normalize.normalizer import (
    Normalizer,
    format_expiry_id,
    split_name,
    standardize_gender,
)


class TestStandardizeGender:
    @pytest.mark.parametrize("value", ["M", "m", "MALE", "Masculino", "M/M", "masculine"])
    def test_male(self, value):
        assert standardize_gender(value) == "M"

    @pytest.mark.parametrize("value", ["F", "female", "FEMENINO", "F/F", "Feminin"])
    def test_female(self, value):
        assert standardize_gender(value) == "F"

    @pytest.mark.parametrize("value", ["", "X", "unknown"])
    def test_default_male(self, value):
        assert standardize_gender(value) == "M"


class TestSplitName:
    def test_both_present(self):
        assert split_name("MARIA JOSE", "GONZALEZ") == ("GONZALEZ", "MARIA JOSE")

    def test_single_field_split_first_token_is_surname(self):
        assert split_name("", "GONZALEZ MARIA JOSE") == ("GONZALEZ", "MARIA JOSE")
        assert split_name("GONZALEZ MARIA", "") == ("GONZALEZ", "MARIA")

    def test_single_token(self):
        assert split_name("", "GONZALEZ") == ("GONZALEZ", "")
        assert split_name("MARIA", "") == ("", "MARIA")

    def test_neither(self):
        assert split_name("", "") == ("", "")


class TestFormatExpiryId:
    def test_year_prefix(self):
        value = format_expiry_id("2031-03-02", random.Random(1))
        assert value.startswith("2031")
        assert value.isdigit()

    def test_missing_expiry_random(self):
        value = format_expiry_id("", random.Random(1))
        assert value.isdigit()
        assert int(value) < 10_000_000


class TestNormalizer:
    def test_full_record(self, raw_result, seeded_normalizer):
        record = seeded_normalizer.normalize(raw_result)
        assert record.id == "X1234567"
        assert record.expiry_id.startswith("2031")
        assert record.country_code == 9
        assert record.country_code_2 == 9
        assert record.surname == "GONZALEZ"
        assert record.given_name == "MARIA JOSE"
        assert record.street == ADDRESS_SENTINEL
        assert record.street_number == ""
        assert record.locality == "CHILE"
        assert record.sex == "F"
        assert record.marital_status == "SOLTERO"
        assert record.birth_date == "14051990"
        assert record.birthplace == "CHILE"
        assert record.profession == "NO INFORMA"

    def test_never_raises_on_empty_input(self, seeded_normalizer):
        record = seeded_normalizer.normalize(RawScanResult())
        assert record.id.isdigit()
        assert record.sex == "M"
        assert record.birth_date == ""
        assert record.country_code == ""

    def test_country_falls_back_to_issuing_country(self, seeded_normalizer, raw_factory):
        raw = raw_factory(nationality="", country="USA", place_of_birth="")
        record = seeded_normalizer.normalize(raw)
        assert record.country_code == 25
        assert record.birthplace == "ESTADOS UNIDOS"

    def test_two_country_codes_are_independent(self, seeded_normalizer, raw_factory):
        raw = raw_factory(nationality="CHILENA", place_of_birth="PERU")
        record = seeded_normalizer.normalize(raw)
        assert record.country_code == 9
        assert record.country_code_2 == 59

    def test_unknown_country_fails_open(self, seeded_normalizer, raw_factory):
        record = seeded_normalizer.normalize(raw_factory(nationality="ATLANTIS"))
        assert record.country_code == "ATLANTIS"

    def test_deterministic_with_same_seed(self, raw_factory):
        raw = raw_factory(document_id=None)
        first = Normalizer(rng=random.Random(3)).normalize(raw)
        second = Normalizer(rng=random.Random(3)).normalize(raw)
        assert first == second

    def test_idempotent_apart_from_random_fields(self, raw_result):
        normalizer = Normalizer(rng=random.Random(5))
        first = normalizer.normalize(raw_result).model_dump(exclude={"expiry_id"})
        second = normalizer.normalize(raw_result).model_dump(exclude={"expiry_id"})
        assert first == second

    def test_enhancement_overrides(self, seeded_normalizer, raw_result):
        enhanced = EnhancedFields(
            date_of_birth="15/06/1991",
            street_address="Avenida Providencia",
            address_number="42",
            locality="Chile",
            profession="ingeniera",
        )
        record = seeded_normalizer.normalize(raw_result, enhanced)
        assert record.birth_date == "15061991"
        assert record.street == "AVENIDA PROVIDENCIA"
        assert record.street_number == "42"
        assert record.locality == "CHILE"
        assert record.profession == "INGENIERA"

    def test_static_sample_strategy(self, raw_factory):
        normalizer = Normalizer(
            address_strategy=StaticSampleStrategy(), rng=random.Random(0),
        )
        record = normalizer.normalize(raw_factory(nationality="USA"))
        assert record.street != ADDRESS_SENTINEL
        assert record.street_number.isdigit()

    def test_custom_defaults(self, raw_result):
        normalizer = Normalizer(marital_status="CASADO", profession="ABOGADO")
        record = normalizer.normalize(raw_result)
        assert record.marital_status == "CASADO"
        assert record.profession == "ABOGADO"
