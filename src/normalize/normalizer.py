# src/normalize/normalizer.py — v1
"""RawScanResult (+ optional AI-enhanced fields) -> NormalizedRecord.

The transformation is pure apart from the randomized fallbacks (missing
document ID, expiry-derived ID suffix, street numbers), which all draw
from an injectable ``random.Random`` so tests can seed them.

Two country codes are derived independently:
  - ``country_code`` from the nationality (falling back to the issuing country),
  - ``country_code_2`` from the place of birth (falling back to the nationality).
They coincide for most holders and diverge for people born abroad.
"""

from __future__ import annotations

import logging
import random

from passportscan.core.models import (
    COUNTRY,
    DATE_OF_BIRTH,
    DATE_OF_EXPIRY,
    DOCUMENT_ID,
    GIVEN_NAME,
    NATIONALITY,
    PLACE_OF_BIRTH,
    SEX,
    SURNAME,
    EnhancedFields,
    NormalizedRecord,
    RawScanResult,
)
from passportscan.normalize.address import AddressStrategy, FailSentinelStrategy
from passportscan.normalize.countries import get_country_code, standardize_country
from passportscan.normalize.dates import standardize_date

logger = logging.getLogger(__name__)

DEFAULT_MARITAL_STATUS = "SOLTERO"
DEFAULT_PROFESSION = "NO INFORMA"


def standardize_gender(value: str) -> str:
    """M / MALE / MASCULIN* -> M; F / FEMALE / FEMENIN* -> F; anything else M.

    Bilingual passports print values like ``F/F``; only the first token counts.
    """
    upper = value.strip().upper()
    token = upper.split("/")[0].strip()
    if token in ("M", "MALE") or "MASCULIN" in upper:
        return "M"
    if token in ("F", "FEMALE") or "FEMENIN" in upper or "FEMININ" in upper:
        return "F"
    return "M"


def split_name(given_name: str, surname: str) -> tuple[str, str]:
    """Return (surname, given_name).

    When only one of the two is present and it holds several tokens, the
    first token is taken as the surname and the rest as the given name.
    """
    given_name = " ".join(given_name.split())
    surname = " ".join(surname.split())
    if given_name and surname:
        return surname, given_name
    single = given_name or surname
    tokens = single.split(" ")
    if len(tokens) > 1:
        return tokens[0], " ".join(tokens[1:])
    if surname:
        return surname, ""
    return "", given_name


def generate_random_id(rng: random.Random) -> str:
    return str(rng.randrange(100_000_000))


def format_expiry_id(expiry_date: str, rng: random.Random) -> str:
    """Derive the expiry ID: expiry year followed by a random suffix."""
    if expiry_date:
        standardized = standardize_date(expiry_date)
        if len(standardized) >= 8 and standardized[:8].isdigit():
            return standardized[4:8] + str(rng.randrange(10_000))
    return str(rng.randrange(10_000_000))


class Normalizer:
    """Build complete NormalizedRecords; never raises on odd input."""

    def __init__(
        self,
        address_strategy: AddressStrategy | None = None,
        rng: random.Random | None = None,
        marital_status: str = DEFAULT_MARITAL_STATUS,
        profession: str = DEFAULT_PROFESSION,
    ) -> None:
        self.address_strategy = address_strategy or FailSentinelStrategy()
        self._rng = rng or random.Random()
        self._marital_status = marital_status
        self._profession = profession

    def normalize(
        self,
        raw: RawScanResult,
        enhanced: EnhancedFields | None = None,
    ) -> NormalizedRecord:
        fields = enhanced.merged_with(raw) if enhanced else dict(raw.fields)

        def field(key: str) -> str:
            value = fields.get(key) or ""
            return value.strip() if isinstance(value, str) else ""

        nationality = standardize_country(field(NATIONALITY) or field(COUNTRY))
        birthplace = standardize_country(field(PLACE_OF_BIRTH)) or nationality

        locality = nationality
        if enhanced is not None and enhanced.locality:
            locality = standardize_country(enhanced.locality)

        address = self.address_strategy.resolve(
            country=nationality,
            locality=locality,
            enhanced=enhanced,
            rng=self._rng,
        )
        surname, given_name = split_name(field(GIVEN_NAME), field(SURNAME))

        profession = self._profession
        if enhanced is not None and enhanced.profession:
            profession = enhanced.profession.upper()

        record = NormalizedRecord(
            id=field(DOCUMENT_ID) or generate_random_id(self._rng),
            expiry_id=format_expiry_id(field(DATE_OF_EXPIRY), self._rng),
            country_code=get_country_code(nationality),
            surname=surname.upper(),
            given_name=given_name.upper(),
            street=address.street,
            street_number=address.number,
            locality=address.locality,
            country_code_2=get_country_code(birthplace),
            sex=standardize_gender(field(SEX)),
            marital_status=self._marital_status,
            birth_date=standardize_date(field(DATE_OF_BIRTH)),
            birthplace=birthplace,
            profession=profession,
        )
        logger.debug(
            "Normalized %s (country=%s, birthplace=%s, address=%s)",
            record.id, nationality, birthplace, self.address_strategy.name,
        )
        return record
