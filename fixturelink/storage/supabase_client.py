# fixturelink/storage/supabase_client.py
import json
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from postgrest import APIResponse
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import AsyncClient, create_async_client
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fixturelink.config.settings import settings
from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType
from fixturelink.storage.base import AliasStore, AliasStoreError


def parse_aliases(value: Any) -> List[str]:
    """Reads the ``aliases`` column whichever way it was serialized.

    Accepts a JSON array, a JSON-encoded string of an array, or an object
    with a ``values`` array. Anything else reads as no aliases.
    """
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if isinstance(value, dict):
        value = value.get("values")
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str) and item.strip()]
    return []


def record_from_row(row: Dict[str, Any]) -> Optional[CanonicalNameRecord]:
    canonical_key = (row.get("canonical_key") or "").strip()
    if not canonical_key:
        logger.warning(f"Skipping alias row without canonical_key: {row}")
        return None
    try:
        return CanonicalNameRecord(
            canonical_key=canonical_key,
            name_en=row.get("name_en"),
            name_zh_cn=row.get("name_zh_cn"),
            name_zh_tw=row.get("name_zh_tw"),
            aliases=parse_aliases(row.get("aliases")),
        )
    except ValidationError as e:
        logger.warning(f"Skipping invalid alias row {row.get('canonical_key')!r}: {e}")
        return None


def row_from_record(record: CanonicalNameRecord) -> Dict[str, Any]:
    return {
        "canonical_key": record.canonical_key,
        "name_en": record.name_en,
        "name_zh_cn": record.name_zh_cn,
        "name_zh_tw": record.name_zh_tw,
        "aliases": list(record.aliases),
    }


class SupabaseAliasStore(AliasStore):
    """Alias store backed by the ``league_aliases``/``team_aliases`` tables."""

    def __init__(self, client: Optional[AsyncClient] = None):
        self._client = client

    async def _get_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client

        if not settings.supabase_url or not settings.supabase_key:
            raise AliasStoreError("Supabase URL or Key not configured in settings.")

        logger.debug(f"Initializing Async Supabase client for {settings.supabase_url}")
        try:
            self._client = await create_async_client(
                str(settings.supabase_url), settings.supabase_key
            )
        except Exception as e:
            raise AliasStoreError(f"Failed to initialize Supabase client: {e}") from e
        logger.success("Async Supabase client initialized successfully.")
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _select_all(self, table_name: str) -> List[Dict[str, Any]]:
        client = await self._get_client()
        response: APIResponse = (
            await client.table(table_name).select("*").order("canonical_key").execute()
        )
        return response.data or []

    async def fetch_records(self, entity_type: EntityType) -> List[CanonicalNameRecord]:
        table_name = entity_type.table_name
        try:
            rows = await self._select_all(table_name)
        except APIError as e:
            raise AliasStoreError(f"Error reading {table_name}: {e.message}") from e
        except httpx.HTTPError as e:
            raise AliasStoreError(f"Supabase unreachable reading {table_name}: {e}") from e

        records = [r for r in (record_from_row(row) for row in rows) if r is not None]
        logger.debug(f"Fetched {len(records)}/{len(rows)} valid rows from {table_name}.")
        return records

    async def upsert_record(
        self, entity_type: EntityType, record: CanonicalNameRecord
    ) -> CanonicalNameRecord:
        table_name = entity_type.table_name
        client = await self._get_client()
        try:
            response: APIResponse = (
                await client.table(table_name)
                .upsert(row_from_record(record), on_conflict="canonical_key")
                .execute()
            )
        except APIError as e:
            raise AliasStoreError(f"Error upserting into {table_name}: {e.message}") from e
        except httpx.HTTPError as e:
            raise AliasStoreError(f"Supabase unreachable writing {table_name}: {e}") from e

        logger.success(f"Upserted {record.canonical_key} into {table_name}.")
        if response.data:
            return record_from_row(response.data[0]) or record
        return record

    async def delete_record(self, entity_type: EntityType, canonical_key: str) -> bool:
        table_name = entity_type.table_name
        client = await self._get_client()
        try:
            response: APIResponse = (
                await client.table(table_name)
                .delete()
                .eq("canonical_key", canonical_key)
                .execute()
            )
        except APIError as e:
            raise AliasStoreError(f"Error deleting from {table_name}: {e.message}") from e
        except httpx.HTTPError as e:
            raise AliasStoreError(f"Supabase unreachable writing {table_name}: {e}") from e
        return bool(response.data)
