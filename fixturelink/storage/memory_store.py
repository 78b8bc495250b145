from typing import Dict, Iterable, List, Mapping, Optional

from loguru import logger

from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType
from fixturelink.storage.base import AliasStore


class InMemoryAliasStore(AliasStore):
    """Alias store kept in process memory, in insertion order.

    Used when no Supabase project is configured, typically seeded with the
    built-in alias table.
    """

    def __init__(
        self,
        records: Optional[Mapping[EntityType, Iterable[CanonicalNameRecord]]] = None,
    ):
        self._tables: Dict[EntityType, Dict[str, CanonicalNameRecord]] = {
            entity_type: {} for entity_type in EntityType
        }
        for entity_type, items in (records or {}).items():
            for record in items:
                self._tables[entity_type][record.canonical_key] = record
        logger.debug(
            "InMemoryAliasStore initialized with "
            + ", ".join(f"{len(t)} {et.value}s" for et, t in self._tables.items())
        )

    async def fetch_records(self, entity_type: EntityType) -> List[CanonicalNameRecord]:
        return list(self._tables[entity_type].values())

    async def upsert_record(
        self, entity_type: EntityType, record: CanonicalNameRecord
    ) -> CanonicalNameRecord:
        self._tables[entity_type][record.canonical_key] = record
        return record

    async def delete_record(self, entity_type: EntityType, canonical_key: str) -> bool:
        return self._tables[entity_type].pop(canonical_key, None) is not None
