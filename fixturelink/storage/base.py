from abc import ABC, abstractmethod
from typing import List

from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType


class AliasStoreError(Exception):
    """Raised when the alias store is unreachable or rejects a request."""

    pass


class AliasStore(ABC):
    """Persistent home of league/team alias records.

    The resolver only reads whole tables and writes single records; schema
    and migrations belong to the store's owner.
    """

    @abstractmethod
    async def fetch_records(self, entity_type: EntityType) -> List[CanonicalNameRecord]:
        """Returns every record of ``entity_type`` in a stable order."""
        pass

    @abstractmethod
    async def upsert_record(
        self, entity_type: EntityType, record: CanonicalNameRecord
    ) -> CanonicalNameRecord:
        """Inserts or replaces the record with the same canonical key."""
        pass

    @abstractmethod
    async def delete_record(self, entity_type: EntityType, canonical_key: str) -> bool:
        """Deletes by canonical key. Returns False if nothing was deleted."""
        pass
