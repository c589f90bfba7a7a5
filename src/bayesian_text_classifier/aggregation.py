"""Parallel training: per-shard partial counts and their merge into a model.

Shard computation is a pure function of its input, so any number of shards
can be counted concurrently. Merging is the single point where a model is
mutated and happens only after every shard has been counted successfully.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence
from typing import TYPE_CHECKING, Optional

from .exceptions import ShardFailure
from .models import Category, PartialCount, Shard
from .parallel import SerialRunner, TaskError, TaskRunner
from .tokenizer import extract_features

if TYPE_CHECKING:
    from .classifier import ClassifierModel

logger = logging.getLogger(__name__)


def compute_partial(
    documents: Iterable[str],
    category: str,
    stopwords: Collection[str] = frozenset(),
    depth: int = 1,
) -> PartialCount:
    """Count features for one shard without touching any model.

    Equivalent to training each document into a fresh, empty category and
    reading back its counts.

    Args:
        documents: Raw document texts, all labeled ``category``.
        category: Category label of the shard.
        stopwords: Lower-case tokens removed before stemming.
        depth: Maximum n-gram order.

    Returns:
        The shard's PartialCount.
    """
    local = Category(name=category)
    for document in documents:
        local.document_count += 1
        local.add_features(extract_features(document, stopwords, depth))

    return PartialCount(
        category=category,
        document_count=local.document_count,
        total_feature_count=local.total_feature_count,
        feature_counts=local.feature_counts,
    )


def merge_all(model: ClassifierModel, partials: Sequence[PartialCount]) -> None:
    """Fold partial counts into ``model`` and finalize it.

    Every partial is validated before the model is touched, so a bad partial
    leaves the model unchanged. Categories missing from the model are created
    in the order the partials are given. ``finalize_training()`` is called
    once, after all partials are folded in.

    Args:
        model: Target model. The caller must hold exclusive access to it.
        partials: Counts produced by ``compute_partial``.

    Raises:
        ValueError: If any partial violates the count invariants.
    """
    for partial in partials:
        partial.validate()

    for partial in partials:
        model._absorb(partial)

    logger.info(
        "Merged %d partial counts (%d documents total, vocabulary size %d)",
        len(partials),
        model.total_document_count,
        len(model.vocabulary),
    )
    model.finalize_training()


def train_parallel(
    model: ClassifierModel,
    shards: Sequence[Shard],
    runner: Optional[TaskRunner] = None,
) -> list[PartialCount]:
    """Count every shard through ``runner``, then merge all of them into ``model``.

    Waits for every shard to finish before merging. If any shard fails the
    call raises and nothing is merged.

    Args:
        model: Target model.
        shards: Training shards; each shard is one unit of work.
        runner: Task runner. Defaults to ``SerialRunner``.

    Returns:
        The partial counts that were merged, in shard order.

    Raises:
        ShardFailure: If counting any shard raised.
    """
    runner = runner or SerialRunner()
    config = model.config
    arg_list = [
        (shard.documents, shard.category, config.stopwords, config.ngram_depth)
        for shard in shards
    ]

    logger.info("Counting %d shards with %s", len(shards), type(runner).__name__)
    try:
        partials = runner.run(compute_partial, arg_list)
    except TaskError as exc:
        shard = shards[exc.index]
        logger.warning(
            "Shard %d (category %r) failed, model left unchanged: %r",
            exc.index,
            shard.category,
            exc.error,
        )
        raise ShardFailure(
            f"Training shard {exc.index} (category {shard.category!r}) failed: {exc.error!r}",
            category=shard.category,
            shard_index=exc.index,
        ) from exc.error

    merge_all(model, partials)
    return partials
