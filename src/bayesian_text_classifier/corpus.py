"""Loading labeled corpora and stopword lists from disk.

A corpus directory holds one entry per category:

- a sub-directory, where every file inside is one document, or
- a plain file, where every non-blank line is one document and the
  category is named after the file stem (``sports.txt`` -> ``sports``).

Hidden entries (names starting with ``.``) are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .exceptions import CorpusError
from .models import Shard
from .parallel import TaskRunner
from .tokenizer import tokenize

if TYPE_CHECKING:
    from .classifier import ClassifierModel

logger = logging.getLogger(__name__)


def read_document(path: str | Path) -> str:
    """Read a text document as UTF-8, replacing undecodable bytes.

    Raises:
        CorpusError: If ``path`` is not an existing file.
    """
    path = Path(path)
    if not path.is_file():
        raise CorpusError(f"{path.resolve()} is not a file.")
    return path.read_text(encoding="utf-8", errors="replace")


def load_stopwords(path: str | Path) -> frozenset[str]:
    """Read a stopword list; any non-word characters separate entries."""
    return frozenset(tokenize(read_document(path)))


def _visible_entries(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if not p.name.startswith("."))


def load_corpus(path: str | Path) -> list[Shard]:
    """Build one training shard per category entry of a corpus directory.

    Args:
        path: Corpus directory.

    Returns:
        Shards sorted by entry name.

    Raises:
        CorpusError: If ``path`` is not a directory.
    """
    root = Path(path)
    if not root.is_dir():
        raise CorpusError(f"{root.resolve()} is not a directory.")

    shards: list[Shard] = []
    for entry in _visible_entries(root):
        if entry.is_dir():
            documents = [read_document(f) for f in _visible_entries(entry) if f.is_file()]
            shards.append(Shard(documents=tuple(documents), category=entry.name))
        elif entry.is_file():
            lines = read_document(entry).splitlines()
            documents = [line for line in lines if line.strip()]
            shards.append(Shard(documents=tuple(documents), category=entry.stem))

    logger.info(
        "Loaded %d categories (%d documents) from %s",
        len(shards),
        sum(len(s) for s in shards),
        root,
    )
    return shards


def train_file(model: ClassifierModel, path: str | Path, category: str) -> None:
    """Train ``model`` on a single document file labeled ``category``."""
    model.train_text(read_document(path), category)


def train_directory(
    model: ClassifierModel,
    path: str | Path,
    runner: Optional[TaskRunner] = None,
) -> ClassifierModel:
    """Load a corpus directory and train ``model`` on it shard by shard.

    The model is finalized on success and unchanged on failure.

    Raises:
        CorpusError: If the corpus cannot be read.
        ShardFailure: If counting any shard fails.
    """
    model.train_parallel(load_corpus(path), runner=runner)
    return model
