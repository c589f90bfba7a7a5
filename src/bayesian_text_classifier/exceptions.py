"""Exception types raised by the classifier."""

from __future__ import annotations

from typing import Optional


class ClassifierError(Exception):
    """Base class for all classifier errors."""


class ConfigurationError(ClassifierError, ValueError):
    """Raised when a model is configured with invalid parameters."""


class NotTrainedError(ClassifierError, RuntimeError):
    """Raised when classifying with a model that is empty or not finalized."""


class CorpusError(ClassifierError, ValueError):
    """Raised when a corpus path is missing or has the wrong shape."""


class ShardFailure(ClassifierError, RuntimeError):
    """A unit of parallel training work failed.

    The whole parallel training call fails with this error and the model is
    left exactly as it was before the call.

    Attributes:
        category: Category label of the failed shard.
        shard_index: Position of the failed shard in the submitted sequence.
    """

    def __init__(
        self,
        message: str,
        category: Optional[str] = None,
        shard_index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.shard_index = shard_index
