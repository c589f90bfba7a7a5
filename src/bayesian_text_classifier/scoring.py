"""Log-probability scoring against a finalized model."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Optional

from .exceptions import NotTrainedError
from .tokenizer import extract_features

if TYPE_CHECKING:
    from .classifier import ClassifierModel

ScoreTransform = Callable[[float, Sequence[float]], float]


def softmax(score: float, scores: Sequence[float]) -> float:
    """Normalize one log-score against all of them into a probability.

    Uses max-subtraction, so very negative log-scores do not underflow.
    Pass as the ``transform`` of ``classify`` to get class probabilities.
    """
    top = max(scores)
    if top == -math.inf:
        return 1.0 / len(scores)
    total = sum(math.exp(s - top) for s in scores)
    return math.exp(score - top) / total


def log_softmax(score: float, scores: Sequence[float]) -> float:
    """Log of ``softmax``, computed without leaving log space."""
    top = max(scores)
    if top == -math.inf:
        return -math.log(len(scores))
    return score - top - math.log(sum(math.exp(s - top) for s in scores))


def score_document(
    model: ClassifierModel,
    document: str,
    transform: Optional[ScoreTransform] = None,
) -> dict[str, float]:
    """Compute per-category scores of ``document``.

    Each raw score is ``ln(prior)`` plus, for every extracted feature, the
    log likelihood of the feature in the category. Features a category never
    counted contribute ``ln(alpha / (total_feature_count + alpha * |V|))``.

    Args:
        model: A finalized model.
        document: Raw document text.
        transform: Optional ``fn(score, all_scores)`` applied to every raw
            score, e.g. ``softmax``.

    Returns:
        Mapping of category name to score, in category insertion order.

    Raises:
        NotTrainedError: If the model has no vocabulary, no documents, or is
            not finalized.
    """
    if not model.vocabulary or model.total_document_count == 0 or not model.finalized:
        raise NotTrainedError("Model not yet trained and finalized. Call finalize_training() first.")

    config = model.config
    features = extract_features(document, config.stopwords, config.ngram_depth)
    alpha = config.alpha
    vocab_size = len(model.vocabulary)

    scores: dict[str, float] = {}
    for name, category in model.categories.items():
        likelihoods = category.feature_likelihoods
        unseen_log = math.log(alpha / (category.total_feature_count + alpha * vocab_size))

        prior = category.prior_probability
        score = math.log(prior) if prior > 0 else -math.inf
        for feature in features:
            if feature in category.feature_counts:
                score += math.log(likelihoods[feature])
            else:
                score += unseen_log
        scores[name] = score

    if transform is None:
        return scores

    raw = list(scores.values())
    return {name: transform(score, raw) for name, score in scores.items()}


def most_likely(
    scores: Mapping[str, float],
    order: Optional[Iterable[str]] = None,
) -> str:
    """Return the category with the highest score.

    Ties go to the category that comes first in ``order`` (defaults to the
    iteration order of ``scores``).

    Raises:
        ValueError: If ``scores`` is empty.
    """
    if not scores:
        raise ValueError("Cannot pick a category from an empty score mapping")

    names = list(scores)
    if order is not None:
        ranked = [name for name in dict.fromkeys(order) if name in scores]
        seen = set(ranked)
        names = ranked + [name for name in names if name not in seen]

    best = names[0]
    for name in names[1:]:
        if scores[name] > scores[best]:
            best = name
    return best
