# src/normalize/address.py — v1
"""Pluggable address resolution.

Passports carry no address, so the export's street / number / locality
columns come from one of three strategies:

  - ``static_sample``: pick from a small per-country list of sample streets.
  - ``ai_generated``: use the street the AI-enhancement stage produced; the
    enhancement prompt is asked to generate one.
  - ``fail_sentinel``: emit a visible placeholder instead of inventing data.

Whatever the strategy, an address supplied by the enhancement stage wins.
When neither is available the sentinel is used, so "no address" is always
visible in the export.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from passportscan.core.models import Address, EnhancedFields

ADDRESS_SENTINEL = "SIN DIRECCION DISPONIBLE"
STREET_NUMBER_RANGE = (1, 150)

SAMPLE_ADDRESSES: dict[str, list[str]] = {
    "ALEMANIA": ["Rosenstrasse 84", "Bahnhofstrasse 66", "Hauptstrasse 124"],
    "ESPAÑA": ["Calle Mayor 73", "Avenida Central 17", "Calle Real 125"],
    "ESTADOS UNIDOS": ["Main Street 35", "Park Avenue 140", "Lake Road 77"],
    "BRASIL": ["Rua Central 92", "Avenida Principal 123", "Rua Comercial 88"],
    "IRLANDA": ["Church Avenue 126", "Lake Road 115", "Park Road 123"],
    "AUSTRALIA": ["School Road 123", "Main Street 85", "Boulevard Central 22"],
    "DEFAULT": ["Street Central 100", "Main Avenue 50", "Central Boulevard 75"],
}


def random_street_number(rng: random.Random) -> str:
    low, high = STREET_NUMBER_RANGE
    return str(rng.randint(low, high))


def sentinel_address(locality: str) -> Address:
    return Address(street=ADDRESS_SENTINEL, number="", locality=locality)


def address_from_enhancement(
    enhanced: EnhancedFields | None,
    default_locality: str,
    rng: random.Random,
) -> Address | None:
    """Address supplied by the enhancement stage, or None if it gave none."""
    if enhanced is None or not (enhanced.street_address or enhanced.locality):
        return None
    street = (enhanced.street_address or ADDRESS_SENTINEL).upper()
    if enhanced.address_number:
        number = enhanced.address_number
    elif enhanced.street_address:
        number = random_street_number(rng)
    else:
        number = ""
    return Address(street=street, number=number, locality=default_locality)


class AddressStrategy(ABC):
    """Fallback used when the enhancement stage supplied no address."""

    name: str = ""

    @property
    def requests_ai_address(self) -> bool:
        """Whether the enhancement prompt should ask for an invented address."""
        return False

    @abstractmethod
    def fallback(self, country: str, locality: str, rng: random.Random) -> Address:
        """Address to use when none was supplied."""

    def resolve(
        self,
        country: str,
        locality: str,
        enhanced: EnhancedFields | None,
        rng: random.Random,
    ) -> Address:
        supplied = address_from_enhancement(enhanced, locality, rng)
        if supplied is not None:
            return supplied
        return self.fallback(country, locality, rng)


class StaticSampleStrategy(AddressStrategy):
    name = "static_sample"

    def __init__(self, samples: dict[str, list[str]] | None = None) -> None:
        self._samples = samples or SAMPLE_ADDRESSES

    def fallback(self, country: str, locality: str, rng: random.Random) -> Address:
        choices = self._samples.get(country) or self._samples["DEFAULT"]
        street, _, number = rng.choice(choices).rpartition(" ")
        return Address(street=street.upper(), number=number, locality=locality)


class AIGeneratedStrategy(AddressStrategy):
    name = "ai_generated"

    @property
    def requests_ai_address(self) -> bool:
        return True

    def fallback(self, country: str, locality: str, rng: random.Random) -> Address:
        return sentinel_address(locality)


class FailSentinelStrategy(AddressStrategy):
    name = "fail_sentinel"

    def fallback(self, country: str, locality: str, rng: random.Random) -> Address:
        return sentinel_address(locality)


_STRATEGIES: dict[str, type[AddressStrategy]] = {
    StaticSampleStrategy.name: StaticSampleStrategy,
    AIGeneratedStrategy.name: AIGeneratedStrategy,
    FailSentinelStrategy.name: FailSentinelStrategy,
}


def create_address_strategy(name: str) -> AddressStrategy:
    """Instantiate an address strategy by configuration name.

    Raises:
        ValueError: If the name is not registered.
    """
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unsupported address strategy: {name!r}. "
            f"Available: {', '.join(sorted(_STRATEGIES))}"
        ) from None
