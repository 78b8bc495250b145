from enum import Enum


class EntityType(str, Enum):
    LEAGUE = "league"
    TEAM = "team"

    @property
    def table_name(self) -> str:
        """Alias-store table holding records of this type."""
        return f"{self.value}_aliases"

    @property
    def unknown_key(self) -> str:
        return f"{self.value}:unknown"

    def key_for(self, normalized_name: str) -> str:
        """Builds a canonical key from an already-normalized name."""
        if not normalized_name:
            return self.unknown_key
        return f"{self.value}:{normalized_name}"


class MatchSource(str, Enum):
    CANONICAL = "canonical"  # Matched record carries at least one name field
    ALIAS = "alias"  # Matched record is known only by free-text aliases
    FALLBACK = "fallback"  # No record matched; key synthesized from the input
