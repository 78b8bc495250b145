import asyncio
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from fixturelink.aliases.index import AliasIndex
from fixturelink.config.settings import settings
from fixturelink.models.alias import (
    AliasMutation,
    CanonicalNameRecord,
    ResolvedName,
    ResolvedNameMeta,
)
from fixturelink.models.enums import EntityType, MatchSource
from fixturelink.normalization.normalizer import NameNormalizer, default_normalizer
from fixturelink.storage.base import AliasStore, AliasStoreError

MutationPayload = Union[AliasMutation, Mapping[str, Any]]


class AliasError(Exception):
    """Base exception for alias record operations."""

    pass


class AliasValidationError(AliasError, ValueError):
    """Raised when a create/update payload is rejected before any write."""

    pass


class AliasNotFoundError(AliasError):
    """Raised when updating or deleting a canonical key that does not exist."""

    pass


class AliasConflictError(AliasError):
    """Raised when creating a record whose canonical key is already taken."""

    pass


class AliasSnapshot(BaseModel):
    """One consistent generation of the alias indexes."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    indexes: Dict[EntityType, AliasIndex]
    loaded_at: float

    def index(self, entity_type: EntityType) -> AliasIndex:
        return self.indexes[entity_type]


class AliasResolver:
    """Resolves raw league/team names to canonical keys and display names.

    Serves from an in-memory snapshot that is rebuilt from the alias store at
    most once per TTL window. The snapshot is replaced as a whole after a
    successful rebuild; readers never see a half-built index. If the store
    cannot be read, the previous snapshot keeps serving.
    """

    def __init__(
        self,
        store: AliasStore,
        ttl_seconds: Optional[float] = None,
        normalizer: Optional[NameNormalizer] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.ttl_seconds = (
            settings.alias_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self.normalizer = normalizer or default_normalizer
        self._clock = clock
        self._snapshot: Optional[AliasSnapshot] = None
        self._refresh_lock = asyncio.Lock()
        logger.info(f"AliasResolver initialized (ttl={self.ttl_seconds}s).")

    # --- Snapshot management ---

    def _is_fresh(self) -> bool:
        snapshot = self._snapshot
        if snapshot is None:
            return False
        return self._clock() - snapshot.loaded_at < self.ttl_seconds

    def _empty_snapshot(self, loaded_at: float) -> AliasSnapshot:
        return AliasSnapshot(
            indexes={
                entity_type: AliasIndex(entity_type, (), self.normalizer)
                for entity_type in EntityType
            },
            loaded_at=loaded_at,
        )

    async def refresh(self, force: bool = True) -> AliasSnapshot:
        """Rebuilds the snapshot from the store.

        Only one rebuild runs at a time; callers that queued behind it reuse
        its result unless ``force`` is set.
        """
        async with self._refresh_lock:
            if not force and self._is_fresh():
                return self._snapshot

            try:
                indexes = {}
                for entity_type in EntityType:
                    records = await self.store.fetch_records(entity_type)
                    indexes[entity_type] = AliasIndex(
                        entity_type, records, self.normalizer
                    )
            except AliasStoreError as e:
                now = self._clock()
                if self._snapshot is None:
                    logger.warning(f"Alias store unavailable, no snapshot yet: {e}")
                    self._snapshot = self._empty_snapshot(now)
                else:
                    logger.warning(f"Alias store unavailable, serving stale snapshot: {e}")
                    # Back off for one TTL window before hitting the store again
                    self._snapshot = AliasSnapshot(
                        indexes=self._snapshot.indexes, loaded_at=now
                    )
                return self._snapshot

            self._snapshot = AliasSnapshot(indexes=indexes, loaded_at=self._clock())
            logger.info(
                f"Alias snapshot refreshed: {len(indexes[EntityType.LEAGUE])} leagues, "
                f"{len(indexes[EntityType.TEAM])} teams."
            )
            return self._snapshot

    async def _current(self) -> AliasSnapshot:
        snapshot = self._snapshot
        if snapshot is not None and self._is_fresh():
            return snapshot
        return await self.refresh(force=False)

    def invalidate(self) -> None:
        """Marks the snapshot stale; the next read reloads from the store."""
        snapshot = self._snapshot
        if snapshot is not None:
            self._snapshot = AliasSnapshot(
                indexes=snapshot.indexes, loaded_at=float("-inf")
            )

    async def index_for(self, entity_type: EntityType) -> AliasIndex:
        snapshot = await self._current()
        return snapshot.index(entity_type)

    # --- Resolution ---

    def normalize_key(self, entity_type: EntityType, name: Optional[str]) -> str:
        return entity_type.key_for(self.normalizer.normalize(name))

    def resolve_with_index(
        self, raw_name: Optional[str], index: AliasIndex
    ) -> ResolvedName:
        raw = raw_name or ""
        normalized = self.normalizer.normalize(raw)
        record = index.lookup(normalized) if normalized else None

        if record is None:
            return ResolvedName(
                canonical_key=index.entity_type.key_for(normalized),
                display_name=raw,
                fallback_name=raw,
                match_source=MatchSource.FALLBACK,
                raw=raw,
            )

        # Canonical whenever the record carries a name field, whichever spelling hit
        source = MatchSource.CANONICAL if record.name_fields else MatchSource.ALIAS
        return ResolvedName(
            canonical_key=record.canonical_key,
            display_name=record.display_name or raw,
            fallback_name=raw,
            match_source=source,
            raw=raw,
            meta=ResolvedNameMeta(
                en=record.name_en, zh_cn=record.name_zh_cn, zh_tw=record.name_zh_tw
            ),
        )

    async def resolve(
        self, raw_name: Optional[str], entity_type: EntityType
    ) -> ResolvedName:
        index = await self.index_for(entity_type)
        return self.resolve_with_index(raw_name, index)

    async def resolve_league(self, name: Optional[str]) -> ResolvedName:
        return await self.resolve(name, EntityType.LEAGUE)

    async def resolve_team(self, name: Optional[str]) -> ResolvedName:
        return await self.resolve(name, EntityType.TEAM)

    # --- Mutations ---

    def _parse_mutation(self, payload: MutationPayload) -> AliasMutation:
        if isinstance(payload, AliasMutation):
            return payload
        try:
            return AliasMutation.model_validate(dict(payload))
        except ValidationError as e:
            raise AliasValidationError(str(e)) from e

    def _dedupe_aliases(self, aliases: List[str]) -> List[str]:
        seen = set()
        kept = []
        for alias in aliases:
            key = self.normalizer.normalize(alias)
            if not key or key in seen:
                continue
            seen.add(key)
            kept.append(alias)
        return kept

    def _build_record(
        self, canonical_key: str, mutation: AliasMutation
    ) -> CanonicalNameRecord:
        try:
            return CanonicalNameRecord(
                canonical_key=canonical_key,
                name_en=mutation.name_en,
                name_zh_cn=mutation.name_zh_cn,
                name_zh_tw=mutation.name_zh_tw,
                aliases=self._dedupe_aliases(mutation.aliases),
            )
        except ValidationError as e:
            raise AliasValidationError(str(e)) from e

    async def _exists(self, entity_type: EntityType, canonical_key: str) -> bool:
        # Read the store, not the snapshot: it may lag by up to one TTL
        records = await self.store.fetch_records(entity_type)
        return any(r.canonical_key == canonical_key for r in records)

    async def create_record(
        self, entity_type: EntityType, payload: MutationPayload
    ) -> CanonicalNameRecord:
        mutation = self._parse_mutation(payload)
        canonical_key = mutation.canonical_key
        if not canonical_key:
            canonical_key = self.normalize_key(entity_type, mutation.primary_name)
            if canonical_key == entity_type.unknown_key:
                raise AliasValidationError(
                    f"Cannot derive a canonical key from {mutation.primary_name!r}; "
                    "supply canonical_key explicitly"
                )
        record = self._build_record(canonical_key, mutation)
        if await self._exists(entity_type, canonical_key):
            raise AliasConflictError(
                f"{entity_type.value} record {canonical_key!r} already exists; update it instead"
            )
        saved = await self.store.upsert_record(entity_type, record)
        self.invalidate()
        logger.info(f"Created {entity_type.value} alias record {saved.canonical_key}.")
        return saved

    async def update_record(
        self, entity_type: EntityType, canonical_key: str, payload: MutationPayload
    ) -> CanonicalNameRecord:
        mutation = self._parse_mutation(payload)
        if mutation.canonical_key and mutation.canonical_key != canonical_key:
            raise AliasValidationError(
                f"canonical_key is immutable ({canonical_key!r} -> "
                f"{mutation.canonical_key!r}); recreate the record instead"
            )
        if not await self._exists(entity_type, canonical_key):
            raise AliasNotFoundError(f"No {entity_type.value} record {canonical_key!r}")

        record = self._build_record(canonical_key, mutation)
        saved = await self.store.upsert_record(entity_type, record)
        self.invalidate()
        logger.info(f"Updated {entity_type.value} alias record {canonical_key}.")
        return saved

    async def delete_record(self, entity_type: EntityType, canonical_key: str) -> None:
        deleted = await self.store.delete_record(entity_type, canonical_key)
        if not deleted:
            raise AliasNotFoundError(f"No {entity_type.value} record {canonical_key!r}")
        self.invalidate()
        logger.info(f"Deleted {entity_type.value} alias record {canonical_key}.")

    async def list_records(
        self, entity_type: EntityType, search: Optional[str] = None
    ) -> List[CanonicalNameRecord]:
        index = await self.index_for(entity_type)
        return index.search(search)
