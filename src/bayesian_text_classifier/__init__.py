"""Bayesian Text Classifier -- multinomial Naive Bayes over stemmed n-grams."""

__version__ = "0.1.0"

from .aggregation import compute_partial, merge_all, train_parallel
from .classifier import ClassifierModel
from .corpus import (
    load_corpus,
    load_stopwords,
    read_document,
    train_directory,
    train_file,
)
from .evaluation import FoldResult, cross_validate, evaluate_model, split_folds
from .exceptions import (
    ClassifierError,
    ConfigurationError,
    CorpusError,
    NotTrainedError,
    ShardFailure,
)
from .models import Category, ClassifierConfig, PartialCount, Shard
from .parallel import PoolRunner, SerialRunner, TaskRunner
from .scoring import log_softmax, most_likely, score_document, softmax
from .stemmer import stem
from .tokenizer import extract_features

__all__ = [
    # Core
    "ClassifierModel",
    "ClassifierConfig",
    "Category",
    "PartialCount",
    "Shard",
    # Features
    "stem",
    "extract_features",
    # Training
    "compute_partial",
    "merge_all",
    "train_parallel",
    "TaskRunner",
    "SerialRunner",
    "PoolRunner",
    # Scoring
    "score_document",
    "most_likely",
    "softmax",
    "log_softmax",
    # Corpus
    "load_corpus",
    "load_stopwords",
    "read_document",
    "train_directory",
    "train_file",
    # Evaluation
    "FoldResult",
    "cross_validate",
    "evaluate_model",
    "split_folds",
    # Errors
    "ClassifierError",
    "ConfigurationError",
    "CorpusError",
    "NotTrainedError",
    "ShardFailure",
]
