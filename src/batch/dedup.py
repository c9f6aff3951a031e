# src/batch/dedup.py — v2
"""Duplicate detection by document identifier within one batch session.

Decision flow per completed scan:
  - no document ID -> novel (nothing to key on)
  - ID already seen -> duplicate
  - ID new -> record it, novel

The check and the record happen in one synchronous step, so when two
scans of the same passport race, whichever network call resolves first
wins and the other is the duplicate.
"""

from __future__ import annotations

import logging

from passportscan.core.models import RawScanResult

logger = logging.getLogger(__name__)


class DuplicateDetector:
    """Tracks seen document IDs; the set only grows until reset()."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    @staticmethod
    def _key(document_id: str) -> str:
        return "".join(document_id.split()).upper()

    def check_and_record(self, raw: RawScanResult) -> bool:
        """Return True if raw is a duplicate; otherwise remember its ID."""
        document_id = raw.document_id
        if not document_id:
            return False

        key = self._key(document_id)
        if key in self._seen:
            logger.info("Duplicate document ID %s", document_id)
            return True

        self._seen.add(key)
        return False

    def __contains__(self, document_id: object) -> bool:
        return isinstance(document_id, str) and self._key(document_id) in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    @property
    def seen_ids(self) -> frozenset[str]:
        return frozenset(self._seen)

    def reset(self) -> None:
        self._seen.clear()


class NoDuplicateDetection(DuplicateDetector):
    """Pass-through stage: every scan is treated as novel."""

    def check_and_record(self, raw: RawScanResult) -> bool:
        return False
