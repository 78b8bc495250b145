import json
from datetime import datetime
from pathlib import Path
from typing import Any, List, NamedTuple, Optional, Type, TypeVar, Union

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from fixturelink.models.fixture import ApiFixture, CrownFixture
from fixturelink.models.mapping import MappingDocument

ModelT = TypeVar("ModelT", bound=BaseModel)
PathLike = Union[str, Path]


class FixtureFileError(Exception):
    """Raised when a fixture batch file cannot be read or has the wrong shape."""

    pass


class CrownBatch(NamedTuple):
    generated_at: Optional[datetime]
    fixtures: List[CrownFixture]


def _read_json(path: PathLike) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise FixtureFileError(f"Fixture file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise FixtureFileError(f"Could not read fixture file {path}: {e}") from e


def _validate_rows(rows: Any, model: Type[ModelT], label: str) -> List[ModelT]:
    """Validates rows one by one, skipping (and logging) the invalid ones."""
    if not isinstance(rows, list):
        raise FixtureFileError(f"Expected a list of {label} rows, got {type(rows).__name__}")

    valid: List[ModelT] = []
    for position, row in enumerate(rows):
        try:
            valid.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {label} row #{position}: {e.error_count()} error(s)")
            logger.debug(f"Invalid {label} row #{position}: {e}")
    if len(valid) < len(rows):
        logger.warning(f"Kept {len(valid)}/{len(rows)} {label} rows.")
    return valid


def load_crown_batch(path: PathLike) -> CrownBatch:
    """Reads ``{"generatedAt": ..., "matches": [...]}`` as written by the Crown fetcher."""
    data = _read_json(path)
    if not isinstance(data, dict):
        raise FixtureFileError(f"Crown batch {path} must be a JSON object")

    generated_at = None
    raw_generated_at = data.get("generatedAt") or data.get("generated_at")
    if raw_generated_at:
        try:
            generated_at = TypeAdapter(datetime).validate_python(raw_generated_at)
        except ValidationError:
            logger.warning(f"Ignoring unparsable generatedAt {raw_generated_at!r} in {path}")

    fixtures = _validate_rows(data.get("matches", []), CrownFixture, "Crown")
    logger.info(f"Loaded {len(fixtures)} Crown fixtures from {path}")
    return CrownBatch(generated_at=generated_at, fixtures=fixtures)


def load_api_fixtures(path: PathLike) -> List[ApiFixture]:
    """Reads a bare list of API fixtures or an object with a ``matches`` list."""
    data = _read_json(path)
    rows = data.get("matches", []) if isinstance(data, dict) else data
    fixtures = _validate_rows(rows, ApiFixture, "API")
    logger.info(f"Loaded {len(fixtures)} API fixtures from {path}")
    return fixtures


def write_mapping_document(document: MappingDocument, path: PathLike) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = document.model_dump(mode="json", by_alias=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.success(f"Mapping document saved to {output_path}")
    return output_path
