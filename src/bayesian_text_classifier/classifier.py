"""Multinomial Naive Bayes model over stemmed n-gram features.

Provides a count-based classifier that can be trained document by document
or from independent shards counted in parallel, with additive (Laplace)
smoothing and log-probability scoring.

Features:
- Stemmed unigram to n-gram features with configurable depth
- Additive smoothing with a configurable alpha
- Parallel shard counting with an all-or-nothing merge
- Deterministic argmax (first-seen category wins ties)

Example::

    model = ClassifierModel(ngram_depth=2)
    model.train_text("run run fast", "sports")
    model.train_text("bake bake slow", "cooking")
    model.finalize_training()

    scores = model.classify("run fast")
    model.most_likely(scores)  # "sports"
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence
from types import MappingProxyType
from typing import Optional

from . import aggregation, scoring
from .models import Category, ClassifierConfig, PartialCount, Shard
from .parallel import TaskRunner
from .scoring import ScoreTransform
from .tokenizer import extract_features

logger = logging.getLogger(__name__)


class ClassifierModel:
    """Per-category feature counts, vocabulary and (after finalization)
    priors and likelihoods.

    Args:
        stopwords: Lower-case tokens removed before stemming.
        ngram_depth: Maximum n-gram order, at least 1.
        alpha: Additive smoothing constant, greater than 0.
        config: A ready-made ``ClassifierConfig``; overrides the other
            arguments when given.

    Raises:
        ConfigurationError: If ``ngram_depth < 1`` or ``alpha <= 0``.
    """

    def __init__(
        self,
        stopwords: Optional[Collection[str]] = None,
        ngram_depth: int = 1,
        alpha: float = 1.0,
        config: Optional[ClassifierConfig] = None,
    ) -> None:
        self.config = config or ClassifierConfig(
            stopwords=frozenset() if stopwords is None else stopwords,
            ngram_depth=ngram_depth,
            alpha=alpha,
        )
        self._categories: dict[str, Category] = {}
        self.total_document_count = 0
        self.vocabulary: set[str] = set()
        self.finalized = False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(categories={self.category_names!r}, "
            f"documents={self.total_document_count}, vocabulary={len(self.vocabulary)}, "
            f"finalized={self.finalized})"
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def alpha(self) -> float:
        return self.config.alpha

    @property
    def ngram_depth(self) -> int:
        return self.config.ngram_depth

    @property
    def stopwords(self) -> frozenset[str]:
        return self.config.stopwords

    @property
    def category_names(self) -> list[str]:
        """Category names in the order they were first seen."""
        return list(self._categories)

    @property
    def categories(self) -> Mapping[str, Category]:
        """Categories keyed by name, in first-seen order."""
        return MappingProxyType(self._categories)

    def get_category(self, name: str) -> Category:
        """Return a category by name.

        Raises:
            KeyError: If the category is unknown.
        """
        try:
            return self._categories[name]
        except KeyError:
            raise KeyError(f"Unknown category: {name!r}. Known: {self.category_names}") from None

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def _category(self, name: str) -> Category:
        category = self._categories.get(name)
        if category is None:
            category = self._categories[name] = Category(name=name)
            logger.debug("Created category %r", name)
        return category

    def train_text(self, document: str, category: str) -> None:
        """Count one labeled document.

        Marks the model as not finalized; call ``finalize_training()`` before
        classifying again.

        Args:
            document: Raw document text.
            category: Label of the document.
        """
        self.finalized = False
        features = extract_features(document, self.config.stopwords, self.config.ngram_depth)

        cat = self._category(category)
        cat.document_count += 1
        self.total_document_count += 1

        cat.add_features(features)
        self.vocabulary.update(features)

    def _absorb(self, partial: PartialCount) -> None:
        """Add a validated partial count to the model."""
        self.finalized = False
        cat = self._category(partial.category)
        cat.document_count += partial.document_count
        cat.total_feature_count += partial.total_feature_count
        self.total_document_count += partial.document_count

        counts = cat.feature_counts
        for feature, count in partial.feature_counts.items():
            counts[feature] = counts.get(feature, 0) + count
        self.vocabulary.update(partial.feature_counts)

    def finalize_training(self) -> None:
        """Compute priors and smoothed likelihoods from the current counts.

        For every category, ``prior = document_count / total_document_count``
        and, for every counted feature,
        ``likelihood = (count + alpha) / (total_feature_count + alpha * |V|)``.
        Calling it again with unchanged counts gives identical results.
        """
        alpha = self.config.alpha
        vocab_size = len(self.vocabulary)

        total_documents = self.total_document_count

        for cat in self._categories.values():
            cat.prior_probability = cat.document_count / total_documents if total_documents else 0.0
            denominator = cat.total_feature_count + alpha * vocab_size
            cat.feature_likelihoods = {
                feature: (count + alpha) / denominator
                for feature, count in cat.feature_counts.items()
            }

        self.finalized = True
        logger.debug(
            "Finalized %d categories over %d documents, vocabulary size %d",
            len(self._categories),
            self.total_document_count,
            vocab_size,
        )

    def merge(self, partials: Sequence[PartialCount]) -> None:
        """Fold precomputed partial counts in and finalize; see ``aggregation.merge_all``."""
        aggregation.merge_all(self, partials)

    def train_parallel(
        self,
        shards: Sequence[Shard],
        runner: Optional[TaskRunner] = None,
    ) -> list[PartialCount]:
        """Count shards independently, then merge them all and finalize.

        The model is only modified if every shard succeeds.

        Args:
            shards: Training shards, one unit of work each.
            runner: Task runner, e.g. ``PoolRunner()``. Defaults to serial.

        Returns:
            The merged partial counts, in shard order.

        Raises:
            ShardFailure: If any shard failed. The model is left unchanged.
        """
        return aggregation.train_parallel(self, shards, runner)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(
        self,
        document: str,
        transform: Optional[ScoreTransform] = None,
    ) -> dict[str, float]:
        """Score a document against every category.

        Args:
            document: Raw document text.
            transform: Optional ``fn(score, all_scores)`` applied to every
                raw log-score, e.g. ``scoring.softmax``.

        Returns:
            Mapping of category name to (transformed) score.

        Raises:
            NotTrainedError: If the model is empty or not finalized.
        """
        return scoring.score_document(self, document, transform)

    def most_likely(self, scores: Mapping[str, float]) -> str:
        """Return the top-scoring category; ties go to the first-seen category."""
        return scoring.most_likely(scores, order=self._categories)

    def predict(self, document: str) -> str:
        """Classify a document and return its most likely category."""
        return self.most_likely(self.classify(document))

    def to_dict(self) -> dict:
        """Summary of the model state."""
        return {
            "config": self.config.to_dict(),
            "finalized": self.finalized,
            "total_document_count": self.total_document_count,
            "vocabulary_size": len(self.vocabulary),
            "categories": [cat.to_dict() for cat in self._categories.values()],
        }
