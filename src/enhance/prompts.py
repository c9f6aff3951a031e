# src/enhance/prompts.py — v1
"""Prompt templates for the AI-enhancement stage."""

from __future__ import annotations

import json
from typing import Any

SYSTEM_PROMPT = (
    "Eres un asistente especializado en procesar datos de pasaportes. "
    "Devuelve SOLO datos en formato JSON, sin explicaciones ni bloques de "
    "código markdown."
)

_RECORD_TEMPLATE = """\
Analiza estos datos de pasaporte y mejóralos:
1. Rellena campos faltantes con valores plausibles basados en el contexto.
2. Estandariza las fechas a DD/MM/YYYY.
3. Escribe los nombres de país en CASTELLANO, en mayúsculas y SIN TILDES
   (por ejemplo: United States -> ESTADOS UNIDOS, France -> FRANCIA).
{address_block}
Datos del pasaporte:
{payload}

Devuelve SOLO un objeto JSON con los campos originales mejorados{extra_fields}.
"""

_ADDRESS_BLOCK = """\
4. Genera una dirección ÚNICA Y REALISTA para una persona que vive en {country}:
   una calle real de {country}, sin número, formateada según las
   convenciones locales. No uses direcciones genéricas o muy conocidas.
"""

_ADDRESS_FIELDS = (
    ' y estos campos adicionales: "street_address" (solo el nombre de la calle),'
    ' "address_number" (número entre 1 y 150) y "locality" (país de residencia)'
)

_BULK_TEMPLATE = """\
Convierte cada registro de pasaporte de la lista en un objeto con EXACTAMENTE
estas claves, en este orden: {columns}.

Reglas:
- Fechas como DDMMYYYY sin separadores.
- Países en CASTELLANO, en mayúsculas y SIN TILDES.
- "Sexo" es "M" o "F".
- "Estado_Civil" es "{marital_status}" y "Profesión" es "{profession}" si no hay dato.
- Si no hay dirección, usa "{address_sentinel}" en "Dirección".
- Devuelve un objeto JSON {{"records": [...]}} con un elemento por registro,
  en el mismo orden que la entrada.

Registros:
{payload}
"""


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def build_record_prompt(fields: dict[str, str], request_address: bool) -> str:
    """Prompt for one passport's field map."""
    country = fields.get("nationality") or fields.get("country") or "su país"
    return _RECORD_TEMPLATE.format(
        address_block=_ADDRESS_BLOCK.format(country=country) if request_address else "",
        payload=_dump(fields),
        extra_fields=_ADDRESS_FIELDS if request_address else "",
    )


def build_bulk_prompt(
    records: list[dict[str, str]],
    columns: list[str],
    marital_status: str,
    profession: str,
    address_sentinel: str,
) -> str:
    """Prompt asking for every record in the export schema at once."""
    return _BULK_TEMPLATE.format(
        columns=", ".join(columns),
        marital_status=marital_status,
        profession=profession,
        address_sentinel=address_sentinel,
        payload=_dump(records),
    )
