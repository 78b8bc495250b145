from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from loguru import logger

from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType
from fixturelink.normalization.normalizer import NameNormalizer, default_normalizer


class AliasIndex:
    """Read-only table mapping every known spelling to its canonical record.

    Built once from a list of records and never mutated afterwards; callers
    that need fresh data build a new index and swap the reference.
    """

    __slots__ = (
        "entity_type",
        "records",
        "normalizer",
        "_alias_sets",
        "_by_alias",
        "_by_key",
    )

    def __init__(
        self,
        entity_type: EntityType,
        records: Iterable[CanonicalNameRecord] = (),
        normalizer: Optional[NameNormalizer] = None,
    ):
        self.entity_type = entity_type
        self.normalizer = normalizer or default_normalizer

        alias_sets: Dict[str, FrozenSet[str]] = {}
        by_alias: Dict[str, List[CanonicalNameRecord]] = {}
        by_key: Dict[str, CanonicalNameRecord] = {}

        for record in records:
            if record.canonical_key in by_key:
                logger.warning(
                    f"Duplicate canonical key {record.canonical_key!r} in "
                    f"{entity_type.value} records; keeping the first."
                )
                continue
            names = self._normalized(record.name_fields)
            alias_set = names | self._normalized(record.aliases)
            alias_sets[record.canonical_key] = alias_set
            by_key[record.canonical_key] = record
            for key in alias_set:
                by_alias.setdefault(key, []).append(record)

        self.records: Tuple[CanonicalNameRecord, ...] = tuple(by_key.values())
        self._alias_sets = MappingProxyType(alias_sets)
        self._by_alias = MappingProxyType({k: tuple(v) for k, v in by_alias.items()})
        self._by_key = MappingProxyType(by_key)

        logger.debug(
            f"Built {entity_type.value} alias index: {len(self.records)} records, "
            f"{len(self._by_alias)} spellings."
        )

    def _normalized(self, values: Iterable[str]) -> FrozenSet[str]:
        keys = (self.normalizer.normalize(value) for value in values)
        return frozenset(key for key in keys if key)

    def __len__(self) -> int:
        return len(self.records)

    def get(self, canonical_key: str) -> Optional[CanonicalNameRecord]:
        return self._by_key.get(canonical_key)

    def alias_set(self, canonical_key: str) -> FrozenSet[str]:
        return self._alias_sets.get(canonical_key, frozenset())

    def records_for(self, normalized: str) -> Tuple[CanonicalNameRecord, ...]:
        return self._by_alias.get(normalized, ())

    def lookup(self, normalized: str) -> Optional[CanonicalNameRecord]:
        """First record (in load order) whose alias set holds ``normalized``."""
        matches = self.records_for(normalized)
        return matches[0] if matches else None

    def variants_for(self, normalized: str) -> Set[str]:
        variants: Set[str] = set()
        for record in self.records_for(normalized):
            variants.update(self._alias_sets[record.canonical_key])
        return variants

    def search(self, text: Optional[str] = None) -> List[CanonicalNameRecord]:
        """Records whose key, names or aliases contain ``text`` (case-insensitive)."""
        if not text or not text.strip():
            return list(self.records)
        needle = text.strip().lower()
        normalized = self.normalizer.normalize(text)
        found = []
        for record in self.records:
            haystack = [record.canonical_key, *record.name_fields, *record.aliases]
            if any(needle in value.lower() for value in haystack):
                found.append(record)
            elif normalized and any(
                normalized in key for key in self._alias_sets[record.canonical_key]
            ):
                found.append(record)
        return found
