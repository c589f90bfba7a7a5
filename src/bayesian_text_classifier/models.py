"""Data models for the Naive Bayes text classifier."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ClassifierConfig:
    """Validated model configuration.

    Args:
        stopwords: Lower-case tokens dropped before stemming.
        ngram_depth: Maximum n-gram order (1 = unigrams only).
        alpha: Additive smoothing constant, strictly positive.

    Raises:
        ConfigurationError: If ``stopwords`` is a string, ``ngram_depth < 1``
            or ``alpha <= 0``.
    """

    stopwords: frozenset[str] = frozenset()
    ngram_depth: int = 1
    alpha: float = 1.0

    def __post_init__(self) -> None:
        if isinstance(self.stopwords, str):
            raise ConfigurationError(
                f"stopwords must be a collection of words, not the string {self.stopwords!r}"
            )
        if not isinstance(self.stopwords, frozenset):
            object.__setattr__(self, "stopwords", frozenset(self.stopwords))

        if isinstance(self.ngram_depth, bool) or not isinstance(self.ngram_depth, int):
            raise ConfigurationError(
                f"ngram_depth must be an integer, got {self.ngram_depth!r}"
            )
        if self.ngram_depth < 1:
            raise ConfigurationError(f"ngram_depth must be >= 1, got {self.ngram_depth}")

        if isinstance(self.alpha, bool) or not isinstance(self.alpha, (int, float)):
            raise ConfigurationError(f"alpha must be a number, got {self.alpha!r}")
        if not math.isfinite(self.alpha) or self.alpha <= 0:
            raise ConfigurationError(f"alpha must be a finite number > 0, got {self.alpha}")
        object.__setattr__(self, "alpha", float(self.alpha))

    def to_dict(self) -> dict:
        return {
            "stopwords": sorted(self.stopwords),
            "ngram_depth": self.ngram_depth,
            "alpha": self.alpha,
        }


@dataclass
class Category:
    """Per-category counts owned by a ``ClassifierModel``.

    ``feature_likelihoods`` and ``prior_probability`` are only populated by
    ``ClassifierModel.finalize_training()``.
    """

    name: str
    document_count: int = 0
    total_feature_count: int = 0
    feature_counts: dict[str, int] = field(default_factory=dict, repr=False)
    feature_likelihoods: dict[str, float] = field(default_factory=dict, repr=False)
    prior_probability: Optional[float] = None

    def add_features(self, features: Iterable[str]) -> None:
        """Count every feature occurrence in ``features``."""
        counts = self.feature_counts
        for feature in features:
            counts[feature] = counts.get(feature, 0) + 1
            self.total_feature_count += 1

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "document_count": self.document_count,
            "total_feature_count": self.total_feature_count,
            "distinct_features": len(self.feature_counts),
            "prior_probability": self.prior_probability,
        }


@dataclass(frozen=True)
class PartialCount:
    """Counts computed for one training shard, independent of any model.

    Attributes:
        category: Category label the counts belong to.
        document_count: Number of documents in the shard.
        total_feature_count: Sum of all ``feature_counts`` values.
        feature_counts: Read-only mapping of feature to occurrence count.
    """

    category: str
    document_count: int
    total_feature_count: int
    feature_counts: Mapping[str, int]

    def __post_init__(self) -> None:
        if not isinstance(self.feature_counts, MappingProxyType):
            object.__setattr__(
                self, "feature_counts", MappingProxyType(dict(self.feature_counts))
            )

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild from a plain dict
        return (
            PartialCount,
            (
                self.category,
                self.document_count,
                self.total_feature_count,
                dict(self.feature_counts),
            ),
        )

    def validate(self) -> None:
        """Check the count invariants.

        Raises:
            ValueError: If any count is negative or the total does not match.
        """
        if self.document_count < 0 or self.total_feature_count < 0:
            raise ValueError(f"Negative counts in partial for category {self.category!r}")
        if any(count < 0 for count in self.feature_counts.values()):
            raise ValueError(f"Negative feature count in partial for category {self.category!r}")
        total = sum(self.feature_counts.values())
        if total != self.total_feature_count:
            raise ValueError(
                f"Partial for category {self.category!r} has total_feature_count "
                f"{self.total_feature_count} but its feature counts sum to {total}"
            )


@dataclass(frozen=True)
class Shard:
    """A unit of training input: documents that all share one category."""

    documents: tuple[str, ...]
    category: str

    def __post_init__(self) -> None:
        if not isinstance(self.documents, tuple):
            object.__setattr__(self, "documents", tuple(self.documents))

    def __len__(self) -> int:
        return len(self.documents)
