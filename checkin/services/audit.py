"""Roster integrity audit.

Flags identifiers (resolved barcode or phone number) shared by more than one
roster record.  The matcher copes with such duplicates by picking the lowest
canonical id, so this audit is how operators find out the import is faulty.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from checkin.db.store import CandidateStore, get_store
from checkin.services.aliases import resolve_fields

logger = logging.getLogger(__name__)


def find_duplicate_identifiers(store: CandidateStore | None = None) -> dict[str, list[str]]:
    """Map each identifier claimed by several records to those record ids."""
    store = store or get_store()
    owners: dict[str, set[str]] = defaultdict(set)
    for record in store.list_records():
        fields = resolve_fields(record.data)
        for identifier in {fields.barcode, fields.phone_number}:
            if identifier:
                owners[identifier].add(record.id)

    return {
        identifier: sorted(ids)
        for identifier, ids in sorted(owners.items())
        if len(ids) > 1
    }


def audit_roster_integrity(store: CandidateStore | None = None) -> dict[str, list[str]]:
    """Log every duplicate identifier and return the duplicate map."""
    duplicates = find_duplicate_identifiers(store)
    for identifier, record_ids in duplicates.items():
        logger.warning(
            "roster_duplicate_identifier",
            extra={"identifier": identifier, "record_ids": record_ids},
        )
    logger.info("roster_audit_complete", extra={"duplicates": len(duplicates)})
    return duplicates
