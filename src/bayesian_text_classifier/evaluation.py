"""Held-out evaluation of ``ClassifierModel`` over shard folds.

Every category's documents are shuffled and dealt into ``k`` folds. Each fold
trains a fresh model in parallel on the other folds and scores the held-out
documents with ``classify``. Besides accuracy, a fold reports how much
probability the model puts on the true category (mean log-likelihood) and
how sure it is of its picks (mean confidence). Confidence above accuracy
means the model is overconfident.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from .classifier import ClassifierModel
from .models import ClassifierConfig, Shard
from .parallel import TaskRunner
from .scoring import log_softmax, softmax

logger = logging.getLogger(__name__)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


@dataclass
class FoldResult:
    """Scores of one model on its held-out documents.

    Attributes:
        fold: Index of the held-out fold.
        train_documents: Documents the model was trained on.
        test_documents: Held-out documents scored.
        correct: Held-out documents whose most likely category is the true one.
        log_likelihoods: Per document, the log softmax probability of the
            true category (``-inf`` if the model never saw that category).
        confidences: Per document, the softmax probability of the pick.
        unknown_categories: Held-out documents whose category had no
            training documents in this fold.
    """

    fold: int
    train_documents: int = 0
    test_documents: int = 0
    correct: int = 0
    log_likelihoods: list[float] = field(default_factory=list, repr=False)
    confidences: list[float] = field(default_factory=list, repr=False)
    unknown_categories: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.test_documents if self.test_documents else 0.0

    @property
    def mean_log_likelihood(self) -> float:
        return _mean(self.log_likelihoods)

    @property
    def mean_confidence(self) -> float:
        return _mean(self.confidences)

    @property
    def calibration_gap(self) -> float:
        """Mean confidence minus accuracy; positive when overconfident."""
        return self.mean_confidence - self.accuracy

    def to_dict(self) -> dict:
        return {
            "fold": self.fold,
            "train_documents": self.train_documents,
            "test_documents": self.test_documents,
            "accuracy": round(self.accuracy, 4),
            "mean_log_likelihood": round(self.mean_log_likelihood, 4),
            "mean_confidence": round(self.mean_confidence, 4),
            "calibration_gap": round(self.calibration_gap, 4),
            "unknown_categories": self.unknown_categories,
        }


def split_folds(
    shards: Sequence[Shard],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[Shard], list[Shard]]]:
    """Deal the documents of every shard into ``k`` folds.

    A shard's documents are shuffled with ``seed`` and dealt round-robin, so
    each fold holds about ``1/k`` of every category. Empty pieces are left
    out, which keeps every returned shard trainable.

    Args:
        shards: Labeled training shards.
        k: Number of folds, at least 2.
        seed: Shuffle seed.

    Returns:
        For each fold, ``(train_shards, test_shards)``.

    Raises:
        ValueError: If ``k < 2``.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    rng = random.Random(seed)
    dealt: list[tuple[str, list[list[str]]]] = []
    for shard in shards:
        documents = list(shard.documents)
        rng.shuffle(documents)
        dealt.append((shard.category, [documents[fold::k] for fold in range(k)]))

    folds: list[tuple[list[Shard], list[Shard]]] = []
    for fold in range(k):
        train: list[Shard] = []
        test: list[Shard] = []
        for category, piles in dealt:
            held_out = piles[fold]
            kept = [doc for other, pile in enumerate(piles) if other != fold for doc in pile]
            if kept:
                train.append(Shard(documents=tuple(kept), category=category))
            if held_out:
                test.append(Shard(documents=tuple(held_out), category=category))
        folds.append((train, test))
    return folds


def evaluate_model(model: ClassifierModel, shards: Sequence[Shard], fold: int = 0) -> FoldResult:
    """Score a finalized model on labeled held-out shards.

    Raises:
        NotTrainedError: If the model is not finalized or has nothing counted.
    """
    result = FoldResult(fold=fold, train_documents=model.total_document_count)
    for shard in shards:
        for document in shard.documents:
            scores = model.classify(document)
            best = model.most_likely(scores)
            raw = list(scores.values())

            result.test_documents += 1
            result.confidences.append(softmax(scores[best], raw))
            if best == shard.category:
                result.correct += 1
            if shard.category in scores:
                result.log_likelihoods.append(log_softmax(scores[shard.category], raw))
            else:
                result.unknown_categories += 1
                result.log_likelihoods.append(-math.inf)
    return result


def cross_validate(
    shards: Sequence[Shard],
    k: int = 5,
    seed: int = 42,
    config: Optional[ClassifierConfig] = None,
    runner: Optional[TaskRunner] = None,
) -> list[FoldResult]:
    """Run k-fold cross-validation with a fresh model per fold.

    Args:
        shards: Labeled shards, e.g. from ``load_corpus``.
        k: Number of folds.
        seed: Shuffle seed for ``split_folds``.
        config: Configuration of every fold's model.
        runner: Task runner used to count each fold's training shards.

    Returns:
        One result per fold that had both training and held-out documents.
    """
    results: list[FoldResult] = []
    for fold, (train, test) in enumerate(split_folds(shards, k=k, seed=seed)):
        if not train or not test:
            logger.debug("Skipping fold %d: nothing to train on or to score", fold)
            continue

        model = ClassifierModel(config=config)
        model.train_parallel(train, runner=runner)
        result = evaluate_model(model, test, fold=fold)
        logger.info(
            "Fold %d: accuracy %.4f, mean log-likelihood %.4f",
            fold, result.accuracy, result.mean_log_likelihood,
        )
        results.append(result)
    return results
