"""Per-date revenue entries, one per location, and their totals."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Mapping, Sequence

from .. import schemas
from ..date_keys import format_date_key, is_in_month, month_key
from .document_store import REVENUES_COLLECTION, DocumentStore
from .revenue_engine import compute_total_for_date

LOGGER = logging.getLogger(__name__)

RevenueData = Dict[str, List[schemas.DailyRevenueEntry]]


def merge_entry(
    entries: Sequence[schemas.DailyRevenueEntry], entry: schemas.DailyRevenueEntry
) -> List[schemas.DailyRevenueEntry]:
    """Replace the entry for ``entry.location_id`` (if any) and append the new one."""

    kept = [item for item in entries if item.location_id != entry.location_id]
    return [*kept, entry]


def remove_entry(
    entries: Sequence[schemas.DailyRevenueEntry], location_id: str
) -> List[schemas.DailyRevenueEntry]:
    return [item for item in entries if item.location_id != location_id]


def daily_total(revenues: Mapping[str, Sequence[schemas.DailyRevenueEntry]], key: str) -> int:
    entries = revenues.get(key)
    if not isinstance(entries, (list, tuple)):
        return 0
    return sum(entry.total for entry in entries)


def monthly_total(
    revenues: Mapping[str, Sequence[schemas.DailyRevenueEntry]], year: int, month: int
) -> int:
    return sum(
        daily_total(revenues, key) for key in revenues if is_in_month(key, year, month)
    )


def build_entry(
    value: date,
    profile: schemas.RateProfileRead,
    counts: schemas.LessonCounts,
    duration: int,
) -> schemas.DailyRevenueEntry:
    """Snapshot the profile name and the engine total for ``value``."""

    return schemas.DailyRevenueEntry(
        location_id=profile.id,
        location_name=profile.name,
        counts=counts,
        duration=duration,
        total=compute_total_for_date(counts, profile.rates, value, duration),
    )


def _parse_entries(document: Mapping | None) -> List[schemas.DailyRevenueEntry]:
    raw_entries = (document or {}).get("entries")
    if not isinstance(raw_entries, list):
        return []
    return [schemas.DailyRevenueEntry.model_validate(raw) for raw in raw_entries]


class RevenueLedgerService:
    """Read-modify-write access to the ``revenues`` collection of one user."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def load_all(self) -> RevenueData:
        documents = self.store.get_all(REVENUES_COLLECTION)
        return {key: _parse_entries(document) for key, document in documents.items()}

    def list_for_date(self, key: str) -> List[schemas.DailyRevenueEntry]:
        return _parse_entries(self.store.get(REVENUES_COLLECTION, key))

    def record(
        self,
        value: date,
        profile: schemas.RateProfileRead,
        counts: schemas.LessonCounts,
        duration: int = schemas.DEFAULT_LESSON_DURATION,
    ) -> List[schemas.DailyRevenueEntry]:
        entry = build_entry(value, profile, counts, duration)
        return self.upsert(format_date_key(value), entry)

    def upsert(
        self, key: str, entry: schemas.DailyRevenueEntry
    ) -> List[schemas.DailyRevenueEntry]:
        entries = merge_entry(self.list_for_date(key), entry)
        self._write(key, entries)
        LOGGER.debug("Saved revenue for %s at %s: %s", key, entry.location_id, entry.total)
        return entries

    def delete_for_location(self, key: str, location_id: str) -> List[schemas.DailyRevenueEntry]:
        entries = remove_entry(self.list_for_date(key), location_id)
        self._write(key, entries)
        return entries

    def daily_total(self, key: str) -> int:
        return sum(entry.total for entry in self.list_for_date(key))

    def monthly_total(self, year: int, month: int) -> int:
        return monthly_total(self.load_all(), year, month)

    def monthly_summary(self, year: int, month: int) -> schemas.MonthlyRevenueSummary:
        revenues = self.load_all()
        daily_totals = {
            key: daily_total(revenues, key)
            for key in sorted(revenues)
            if is_in_month(key, year, month)
        }
        return schemas.MonthlyRevenueSummary(
            month_key=month_key(year, month),
            daily_totals=daily_totals,
            total=sum(daily_totals.values()),
        )

    def _write(self, key: str, entries: List[schemas.DailyRevenueEntry]) -> None:
        if not entries:
            self.store.delete(REVENUES_COLLECTION, key)
            return
        self.store.set(
            REVENUES_COLLECTION,
            key,
            {"entries": [entry.model_dump(mode="json") for entry in entries]},
        )
