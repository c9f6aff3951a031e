# src/core/models.py — v2
"""Core data models shared across modules.

RawScanResult is the flat field map produced by the OCR boundary,
EnhancedFields is the validated shape of an AI-enhancement response, and
NormalizedRecord is the fixed 14-column row that gets exported.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Well-known entity types emitted by the passport processor.
DOCUMENT_ID = "document_id"
SURNAME = "surname"
GIVEN_NAME = "given_name"
NATIONALITY = "nationality"
COUNTRY = "country"
PLACE_OF_BIRTH = "place_of_birth"
DATE_OF_BIRTH = "date_of_birth"
DATE_OF_EXPIRY = "date_of_expiry"
DATE_OF_ISSUE = "date_of_issue"
SEX = "sex"

PASSPORT_FIELDS: tuple[str, ...] = (
    COUNTRY,
    DATE_OF_BIRTH,
    DATE_OF_EXPIRY,
    DATE_OF_ISSUE,
    DOCUMENT_ID,
    GIVEN_NAME,
    NATIONALITY,
    PLACE_OF_BIRTH,
    SEX,
    SURNAME,
)


class RawScanResult(BaseModel):
    """Flat mapping entity-type -> extracted text for one document."""

    model_config = ConfigDict(frozen=True)

    fields: dict[str, str] = Field(default_factory=dict)
    processing_ms: int = 0

    def get(self, key: str, default: str = "") -> str:
        """Return the stripped value for key, or default when absent/blank."""
        value = self.fields.get(key, "")
        value = value.strip() if isinstance(value, str) else ""
        return value or default

    @property
    def document_id(self) -> str | None:
        return self.get(DOCUMENT_ID) or None


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


class EnhancedFields(BaseModel):
    """Fields returned by the AI-enhancement collaborator for one record.

    Unknown keys are dropped; values of the wrong type become None rather
    than failing the whole response.
    """

    model_config = ConfigDict(extra="ignore")

    document_id: str | None = None
    surname: str | None = None
    given_name: str | None = None
    nationality: str | None = None
    country: str | None = None
    place_of_birth: str | None = None
    date_of_birth: str | None = None
    date_of_expiry: str | None = None
    date_of_issue: str | None = None
    sex: str | None = None
    street_address: str | None = None
    address_number: str | None = None
    locality: str | None = None
    profession: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> str | None:  # noqa: N805
        return _coerce_optional_str(v)

    def merged_with(self, raw: RawScanResult) -> dict[str, str]:
        """Raw passport fields overlaid with every non-empty enhanced value."""
        merged = dict(raw.fields)
        for key in PASSPORT_FIELDS:
            value = getattr(self, key)
            if value:
                merged[key] = value
        return merged


class Address(BaseModel):
    """Resolved street/number/locality triple."""

    model_config = ConfigDict(frozen=True)

    street: str
    number: str
    locality: str


class NormalizedRecord(BaseModel):
    """Canonical fixed-schema export row.

    Field aliases are the export column headers, so a bulk AI response
    keyed by column names validates directly into this model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="ID")
    expiry_id: str = Field(alias="Vto_ID")
    country_code: int | str = Field(alias="NUMERO_DE_PAIS")
    surname: str = Field(alias="Apellido")
    given_name: str = Field(alias="Nombre")
    street: str = Field(alias="Dirección")
    street_number: str = Field(alias="N°")
    locality: str = Field(alias="Localidad")
    country_code_2: int | str = Field(alias="NUMERO_DE_PAIS_2")
    sex: Literal["M", "F"] = Field(alias="Sexo")
    marital_status: str = Field(alias="Estado_Civil")
    birth_date: str = Field(alias="Fecha_de_Nacimiento")
    birthplace: str = Field(alias="Lugar_de_nacimiento")
    profession: str = Field(alias="Profesión")

    @field_validator("country_code", "country_code_2", mode="before")
    @classmethod
    def numeric_code(cls, v: Any) -> Any:  # noqa: N805
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v

    @field_validator(
        "id", "expiry_id", "street_number", "birth_date", mode="before",
    )
    @classmethod
    def digits_as_text(cls, v: Any) -> Any:  # noqa: N805
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_row(self) -> list[int | str]:
        """Values in export column order."""
        return [getattr(self, name) for name in NormalizedRecord.model_fields]


EXPORT_COLUMNS: tuple[str, ...] = tuple(
    field.alias or name for name, field in NormalizedRecord.model_fields.items()
)
