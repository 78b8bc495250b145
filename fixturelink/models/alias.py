import re
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import MatchSource

ALIAS_SPLIT_RE = re.compile(r"[\n,;，；]+")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class CanonicalNameRecord(BaseModel):
    """A league or team with its known spellings.

    ``canonical_key`` has the form ``"<type>:<normalized-primary-name>"`` and
    never changes once assigned.
    """

    model_config = ConfigDict(frozen=True)

    canonical_key: str
    name_en: Optional[str] = None
    name_zh_cn: Optional[str] = None
    name_zh_tw: Optional[str] = None
    aliases: Tuple[str, ...] = ()

    @field_validator("name_en", "name_zh_cn", "name_zh_tw", mode="before")
    @classmethod
    def blank_names(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def check_has_name(self) -> "CanonicalNameRecord":
        if not self.name_fields and not any(a.strip() for a in self.aliases):
            raise ValueError(
                f"Record {self.canonical_key!r} needs at least one name or alias"
            )
        return self

    @property
    def name_fields(self) -> Tuple[str, ...]:
        """Present name fields, in display priority order."""
        return tuple(
            name
            for name in (self.name_zh_cn, self.name_zh_tw, self.name_en)
            if name
        )

    @property
    def display_name(self) -> Optional[str]:
        # Downstream readers use Simplified Chinese first
        return self.name_zh_cn or self.name_zh_tw or self.name_en


class AliasMutation(BaseModel):
    """Create/update payload for an alias record."""

    canonical_key: Optional[str] = None
    name_en: Optional[str] = None
    name_zh_cn: Optional[str] = None
    name_zh_tw: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)

    @field_validator("canonical_key", mode="before")
    @classmethod
    def trim_key(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("canonical_key must be a string")
        value = value.strip()
        if not value:
            raise ValueError("canonical_key must not be empty")
        return value

    @field_validator("name_en", "name_zh_cn", "name_zh_tw", mode="before")
    @classmethod
    def blank_names(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("aliases", mode="before")
    @classmethod
    def split_aliases(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = ALIAS_SPLIT_RE.split(value)
        if isinstance(value, (list, tuple, set)):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        raise ValueError("aliases must be a list of strings or a delimited string")

    @model_validator(mode="after")
    def check_has_name(self) -> "AliasMutation":
        if not (self.name_en or self.name_zh_cn or self.name_zh_tw or self.aliases):
            raise ValueError("At least one name or alias is required")
        return self

    @property
    def primary_name(self) -> Optional[str]:
        """Name the canonical key is derived from when none is supplied."""
        for name in (self.name_en, self.name_zh_cn, self.name_zh_tw):
            if name:
                return name
        return self.aliases[0] if self.aliases else None


class ResolvedNameMeta(BaseModel):
    en: Optional[str] = None
    zh_cn: Optional[str] = None
    zh_tw: Optional[str] = None


class ResolvedName(BaseModel):
    """Outcome of resolving one raw league/team name."""

    canonical_key: str
    display_name: str
    fallback_name: str
    match_source: MatchSource
    raw: str
    meta: Optional[ResolvedNameMeta] = None
