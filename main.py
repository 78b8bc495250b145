import sys
import asyncio

# --- Settings/Logging ---
from fixturelink.logging.setup import setup_logging
from fixturelink.config.settings import settings

setup_logging()

from loguru import logger

from fixturelink.aliases.resolver import AliasResolver
from fixturelink.aliases.seed import seed_records
from fixturelink.matching.orchestrator import MatchOrchestrator
from fixturelink.matching.output import (
    FixtureFileError,
    load_api_fixtures,
    load_crown_batch,
    write_mapping_document,
)
from fixturelink.models.mapping import MappingDocument
from fixturelink.storage.base import AliasStore
from fixturelink.storage.memory_store import InMemoryAliasStore
from fixturelink.storage.supabase_client import SupabaseAliasStore

from rich import print
from rich.panel import Panel
from rich.table import Table


def build_alias_store() -> AliasStore:
    if settings.supabase_url and settings.supabase_key:
        logger.info("Using Supabase alias store.")
        return SupabaseAliasStore()
    logger.warning("Supabase not configured; using the built-in alias seed in memory.")
    return InMemoryAliasStore(seed_records())


def print_summary(document: MappingDocument) -> None:
    rate = (
        document.matched_count / document.crown_count * 100
        if document.crown_count
        else 0.0
    )
    print(
        Panel(
            f"Crown fixtures: {document.crown_count}\n"
            f"API fixtures:   {document.api_count}\n"
            f"Matched:        {document.matched_count} ({rate:.1f}%)\n"
            f"Unmatched:      {document.unmatched_count}",
            title="Crown → API mapping",
        )
    )

    if document.matches:
        table = Table(title="Top matches")
        for column in ("Score", "Δmin", "Crown", "API"):
            table.add_column(column)
        for mapping in document.matches[:10]:
            table.add_row(
                f"{mapping.similarity_score:.3f}",
                str(mapping.time_difference_minutes),
                f"{mapping.crown.home} vs {mapping.crown.away}",
                f"{mapping.api.home} vs {mapping.api.away}",
            )
        print(table)


async def main() -> None:
    """Loads both fixture batches, links them and writes the mapping document."""
    logger.info("Starting Crown → API fixture mapping run")

    try:
        crown_batch = load_crown_batch(settings.crown_input_path)
        api_fixtures = load_api_fixtures(settings.api_input_path)
    except FixtureFileError as e:
        logger.error(f"Cannot start mapping run: {e}")
        return

    if not crown_batch.fixtures:
        logger.warning("Crown batch has no fixtures. Nothing to map.")
        return

    resolver = AliasResolver(build_alias_store())
    orchestrator = await MatchOrchestrator.from_resolver(resolver)

    document = orchestrator.build_document(
        crown_batch.fixtures, api_fixtures, crown_batch.generated_at
    )

    try:
        write_mapping_document(document, settings.mapping_output_path)
    except OSError as e:
        logger.error(f"Failed to write mapping document to {settings.mapping_output_path}: {e}")
        return

    print_summary(document)
    if document.unmatched_count:
        logger.warning(
            f"{document.unmatched_count} Crown fixtures unmatched; the first "
            f"{len(document.unmatched)} are listed in the document's 'unmatched' field."
        )


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
