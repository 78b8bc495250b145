from itertools import product
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional

from loguru import logger
from rapidfuzz.distance import Levenshtein

from fixturelink.config.settings import settings
from fixturelink.normalization.normalizer import NameNormalizer, default_normalizer

if TYPE_CHECKING:
    from fixturelink.aliases.index import AliasIndex

CONTAINMENT_BASE = 0.85
CONTAINMENT_SPAN = 0.15


def char_ngrams(text: str, n: int) -> FrozenSet[str]:
    """Overlapping substrings of length ``n``; a shorter string is its own gram."""
    if not text:
        return frozenset()
    if len(text) < n:
        return frozenset((text,))
    return frozenset(text[i : i + n] for i in range(len(text) - n + 1))


def ngram_jaccard(a: str, b: str, n: int = 3) -> float:
    grams_a = char_ngrams(a, n)
    grams_b = char_ngrams(b, n)
    union = grams_a | grams_b
    if not union:
        return 0.0
    return len(grams_a & grams_b) / len(union)


def containment_score(a: str, b: str) -> float:
    """Rewards abbreviations such as "dortmund" inside "borussiadortmund"."""
    if not a or not b:
        return 0.0
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if shorter not in longer:
        return 0.0
    return CONTAINMENT_BASE + CONTAINMENT_SPAN * (len(shorter) / len(longer))


def edit_similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return 1.0 - Levenshtein.distance(a, b) / longest


def score_normalized(a: str, b: str, ngram_size: int = 3) -> float:
    """Similarity of two already-normalized keys.

    The strongest signal wins; signals are never averaged.
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    return max(
        containment_score(a, b),
        ngram_jaccard(a, b, ngram_size),
        edit_similarity(a, b),
    )


class SimilarityEngine:
    """Bounded [0, 1] similarity between free-text league/team names."""

    def __init__(
        self,
        normalizer: Optional[NameNormalizer] = None,
        ngram_size: Optional[int] = None,
    ):
        self.normalizer = normalizer or default_normalizer
        self.ngram_size = ngram_size or settings.ngram_size
        logger.debug(f"SimilarityEngine initialized (ngram_size={self.ngram_size}).")

    def similarity(self, a: Optional[str], b: Optional[str]) -> float:
        return score_normalized(
            self.normalizer.normalize(a), self.normalizer.normalize(b), self.ngram_size
        )

    def similarity_across_variants(
        self,
        name1: Optional[str],
        name2: Optional[str],
        alias_index: Optional["AliasIndex"] = None,
    ) -> float:
        """Best score over every known spelling of both names."""
        variants1 = self.normalizer.variants_of(name1, alias_index)
        variants2 = self.normalizer.variants_of(name2, alias_index)
        best = 0.0
        for v1, v2 in product(variants1, variants2):
            score = score_normalized(v1, v2, self.ngram_size)
            if score > best:
                best = score
                if best >= 1.0:
                    break
        return best

    def best_across_names(
        self,
        name: Optional[str],
        candidates: Iterable[str],
        alias_index: Optional["AliasIndex"] = None,
    ) -> float:
        """Best score of ``name`` against any of several spellings of one entity."""
        best = 0.0
        for candidate in candidates:
            best = max(best, self.similarity_across_variants(name, candidate, alias_index))
            if best >= 1.0:
                break
        return best


default_engine = SimilarityEngine()


def similarity(a: Optional[str], b: Optional[str]) -> float:
    return default_engine.similarity(a, b)


def similarity_across_variants(
    name1: Optional[str],
    name2: Optional[str],
    alias_index: Optional["AliasIndex"] = None,
) -> float:
    return default_engine.similarity_across_variants(name1, name2, alias_index)
