"""Field alias resolution for spreadsheet-imported roster rows.

The roster came from a bilingual spreadsheet, so one concept (say, the
barcode) may sit under ``barcode``, ``Barcode`` or the phone-number column.
``resolve_fields`` turns any such row into one ``CanonicalFields`` view using
the ordered table in ``checkin.core.constants.FIELD_ALIASES``.  Reading never
mutates the row; writers call ``backfill_canonical`` to decide what to persist.
"""

from __future__ import annotations

from typing import Any

from checkin.core.constants import FIELD_ALIASES
from checkin.models.candidate import CanonicalFields

# canonical roster key -> CanonicalFields attribute
_CANONICAL_ATTRS: dict[str, str] = {
    "barcode": "barcode",
    "phoneNumber": "phone_number",
    "candidateName": "candidate_name",
    "school": "school",
    "timeslot": "timeslot",
}


def _as_text(value: Any) -> str:
    """Stringify a spreadsheet cell; ``None`` and blanks become ``""``."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        # Phone numbers often come back from the sheet as 91234567.0
        value = int(value)
    return str(value).strip()


def resolve_field(record: dict[str, Any], key: str) -> str:
    """Return the first non-empty value for canonical *key*, or ``""``."""
    for candidate_key in (key, *FIELD_ALIASES.get(key, ())):
        text = _as_text(record.get(candidate_key))
        if text:
            return text
    return ""


def resolve_fields(record: dict[str, Any]) -> CanonicalFields:
    """Build the canonical view of a raw roster row."""
    return CanonicalFields(
        **{attr: resolve_field(record, key) for key, attr in _CANONICAL_ATTRS.items()}
    )


def backfill_canonical(record: dict[str, Any]) -> dict[str, str]:
    """Canonical keys a writer may add to *record*.

    Only keys whose canonical column is currently empty are returned, so an
    existing ``barcode`` is never replaced by an alias value.
    """
    updates: dict[str, str] = {}
    for key in _CANONICAL_ATTRS:
        if _as_text(record.get(key)):
            continue
        value = resolve_field(record, key)
        if value:
            updates[key] = value
    return updates
