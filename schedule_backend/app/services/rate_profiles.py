"""Rate profiles: one named tariff sheet per teaching location."""

from __future__ import annotations

import logging
from typing import List, Optional

from .. import schemas
from .document_store import RATE_PROFILES_COLLECTION, DocumentStore
from .errors import MissingReferenceError, ScheduleValidationError

LOGGER = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ScheduleValidationError("지점명을 입력해주세요.")
    return cleaned


def _to_document(name: str, rates: schemas.RateSettings) -> dict:
    return {"name": name, "rates": rates.model_dump(mode="json")}


def _from_document(profile_id: str, document: dict) -> schemas.RateProfileRead:
    return schemas.RateProfileRead(id=profile_id, **document)


class RateProfileService:
    """CRUD over the ``rateProfiles`` collection of one user."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def list_profiles(self) -> List[schemas.RateProfileRead]:
        documents = self.store.get_all(RATE_PROFILES_COLLECTION)
        return [_from_document(key, document) for key, document in documents.items()]

    def get_profile(self, profile_id: str) -> Optional[schemas.RateProfileRead]:
        document = self.store.get(RATE_PROFILES_COLLECTION, profile_id)
        if document is None:
            return None
        return _from_document(profile_id, document)

    def create_profile(self, data: schemas.RateProfileBase) -> schemas.RateProfileRead:
        name = _clean_name(data.name)
        rates = data.rates
        profile_id = self.store.add(RATE_PROFILES_COLLECTION, _to_document(name, rates))
        LOGGER.info("Created rate profile %s (%s)", profile_id, name)
        return schemas.RateProfileRead(id=profile_id, name=name, rates=rates)

    def update_profile(
        self, profile_id: str, data: schemas.RateProfileBase
    ) -> schemas.RateProfileRead:
        name = _clean_name(data.name)
        if self.store.get(RATE_PROFILES_COLLECTION, profile_id) is None:
            raise MissingReferenceError(f"Rate profile {profile_id} not found")
        rates = data.rates
        self.store.set(RATE_PROFILES_COLLECTION, profile_id, _to_document(name, rates))
        return schemas.RateProfileRead(id=profile_id, name=name, rates=rates)

    def delete_profile(self, profile_id: str) -> None:
        """Remove the profile; saved revenue entries keep their location snapshot."""

        if self.store.get(RATE_PROFILES_COLLECTION, profile_id) is None:
            raise MissingReferenceError(f"Rate profile {profile_id} not found")
        self.store.delete(RATE_PROFILES_COLLECTION, profile_id)
        LOGGER.info("Deleted rate profile %s; revenue history left untouched", profile_id)
