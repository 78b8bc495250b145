import re
import unicodedata
from functools import lru_cache
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional, Set

from loguru import logger
from unidecode import unidecode

from fixturelink.config.settings import settings

if TYPE_CHECKING:
    from fixturelink.aliases.index import AliasIndex

CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uac00-\ud7af]")
TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def contains_cjk(text: str) -> bool:
    return bool(text) and CJK_RE.search(text) is not None


class NameNormalizer:
    """Reduces a free-text league/team name to a compact comparison key.

    Steps, in order:
        1. NFKD decomposition and removal of combining marks (diacritics)
        2. Transliteration of remaining non-ASCII text (CJK -> pinyin) via unidecode
        3. Lower-casing
        4. Removal of stop-list tokens, matched as whole tokens
        5. Removal of every remaining non-alphanumeric character

    The result contains only ``[a-z0-9]`` and is a fixed point of
    ``normalize``.
    """

    def __init__(
        self, stop_words: Optional[Iterable[str]] = None, cache_size: int = 8192
    ):
        words = settings.stop_words if stop_words is None else stop_words
        self.stop_words: FrozenSet[str] = frozenset(
            w.strip().lower() for w in words if w and w.strip()
        )
        self._normalize_cached = lru_cache(maxsize=cache_size)(self._normalize)
        logger.debug(
            f"NameNormalizer initialized with {len(self.stop_words)} stop words."
        )

    def normalize(self, text: Optional[str]) -> str:
        if not text or not isinstance(text, str):
            return ""
        return self._normalize_cached(text)

    __call__ = normalize

    def _normalize(self, text: str) -> str:
        decomposed = unicodedata.normalize("NFKD", text)
        stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
        if not stripped.isascii():
            # Ideographs come back as space-separated, tone-less syllables
            stripped = unidecode(stripped)

        tokens = [
            token
            for token in TOKEN_SPLIT_RE.split(stripped.lower())
            if token and token not in self.stop_words
        ]
        key = "".join(tokens)
        # "u 21" joins to "u21": a joined stop token must not survive
        return "" if key in self.stop_words else key

    def variants_of(
        self, name: Optional[str], alias_index: Optional["AliasIndex"] = None
    ) -> Set[str]:
        """Expands a name into every normalized spelling it is known by.

        Besides the name's own key, this includes the full alias set of every
        record in ``alias_index`` that already knows the name, so "Spurs" and
        "Tottenham Hotspur" share candidates despite a large edit distance.
        """
        normalized = self.normalize(name)
        if not normalized:
            return set()
        variants = {normalized}
        if alias_index is not None:
            variants.update(alias_index.variants_for(normalized))
        return variants

    def cache_info(self):
        return self._normalize_cached.cache_info()


default_normalizer = NameNormalizer()


def normalize(text: Optional[str]) -> str:
    """Normalizes ``text`` with the settings-configured stop-list."""
    return default_normalizer.normalize(text)


def variants_of(
    name: Optional[str], alias_index: Optional["AliasIndex"] = None
) -> Set[str]:
    return default_normalizer.variants_of(name, alias_index)
