"""Shared test fixtures for bayesian-text-classifier tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from bayesian_text_classifier.classifier import ClassifierModel
from bayesian_text_classifier.models import Shard

SPORTS_DOCS = [
    "run ball goal",
    "ball goal team",
    "run team goal",
    "goal ball run",
]

COOKING_DOCS = [
    "bake oven bread",
    "oven bread flour",
    "bake flour oven",
    "bread bake oven",
]


@pytest.fixture
def trained_model() -> ClassifierModel:
    """The two-document sports/cooking model, finalized."""
    model = ClassifierModel()
    model.train_text("run run fast", "sports")
    model.train_text("bake bake slow", "cooking")
    model.finalize_training()
    return model


@pytest.fixture
def labeled_corpus() -> tuple[list[str], list[str]]:
    """Documents and labels for two categories with disjoint vocabularies."""
    docs = SPORTS_DOCS + COOKING_DOCS
    labels = ["sports"] * len(SPORTS_DOCS) + ["cooking"] * len(COOKING_DOCS)
    return docs, labels


@pytest.fixture
def labeled_shards() -> list[Shard]:
    """One shard per category, with disjoint vocabularies."""
    return [
        Shard(documents=tuple(SPORTS_DOCS), category="sports"),
        Shard(documents=tuple(COOKING_DOCS), category="cooking"),
    ]


@pytest.fixture
def shards() -> list[Shard]:
    """Three shards, two of which share the ``sports`` category."""
    return [
        Shard(documents=tuple(SPORTS_DOCS[:2]), category="sports"),
        Shard(documents=tuple(COOKING_DOCS), category="cooking"),
        Shard(documents=tuple(SPORTS_DOCS[2:]) + ("ball oven",), category="sports"),
    ]


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """A corpus directory mixing both supported category layouts.

    ``sports/`` holds one document per file; ``cooking.txt`` holds one
    document per line.
    """
    root = tmp_path / "corpus"
    sports = root / "sports"
    sports.mkdir(parents=True)
    for i, doc in enumerate(SPORTS_DOCS):
        (sports / f"doc{i}.txt").write_text(doc, encoding="utf-8")
    (sports / ".hidden").write_text("bake bake bake", encoding="utf-8")

    (root / "cooking.txt").write_text(
        "\n".join(COOKING_DOCS[:2]) + "\n\n" + "\n".join(COOKING_DOCS[2:]) + "\n",
        encoding="utf-8",
    )
    return root
