"""Command-line interface for the Bayesian text classifier.

Provides ``stem``, ``classify``, and ``evaluate`` commands with rich
terminal output using the ``click`` and ``rich`` libraries. Options can also
be set through environment variables or a ``.env`` file in the working
directory.

Usage::

    bayes-text stem running caresses agreed
    bayes-text classify corpus/ --text "run fast" --softmax
    bayes-text evaluate corpus/ --folds 5
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .classifier import ClassifierModel
from .corpus import load_corpus, load_stopwords, read_document, train_directory
from .evaluation import cross_validate
from .exceptions import ClassifierError
from .models import ClassifierConfig
from .parallel import PoolRunner, SerialRunner, TaskRunner
from .scoring import softmax
from .stemmer import stem

console = Console()

_model_options = [
    click.option("--stopwords", "stopwords_file", envvar="BAYES_STOPWORDS",
                 type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
                 help="File of stopwords, separated by any non-word characters."),
    click.option("--depth", "-d", envvar="BAYES_NGRAM_DEPTH", type=int, default=1,
                 show_default=True, help="Maximum n-gram order."),
    click.option("--alpha", "-a", envvar="BAYES_ALPHA", type=float, default=1.0,
                 show_default=True, help="Additive smoothing constant."),
]


def model_options(fn):
    for option in reversed(_model_options):
        fn = option(fn)
    return fn


workers_option = click.option(
    "--workers", "-w", envvar="BAYES_WORKERS", type=click.IntRange(min=1), default=1,
    show_default=True, help="Worker processes used to count the corpus.",
)


def _setup_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("bayesian_text_classifier")
    package_logger.handlers.clear()
    package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _build_config(stopwords_file: Optional[Path], depth: int, alpha: float) -> ClassifierConfig:
    stopwords = load_stopwords(stopwords_file) if stopwords_file else frozenset()
    return ClassifierConfig(stopwords=stopwords, ngram_depth=depth, alpha=alpha)


def _make_runner(workers: int) -> TaskRunner:
    return PoolRunner(max_workers=workers) if workers > 1 else SerialRunner()


@click.group()
@click.version_option(package_name="bayesian-text-classifier")
@click.option("--verbose", "-v", is_flag=True, help="Log training progress.")
def main(verbose: bool) -> None:
    """Naive Bayes text classification with stemmed n-gram features."""
    load_dotenv(find_dotenv(usecwd=True))
    _setup_logging(verbose)


@main.command("stem")
@click.argument("words", nargs=-1, required=True)
def stem_command(words: tuple[str, ...]) -> None:
    """Show the stemmed root of each WORD.

    Example: bayes-text stem running caresses
    """
    table = Table(title="Stems")
    table.add_column("Word", style="cyan")
    table.add_column("Stem", style="bold")
    for word in words:
        table.add_row(word, stem(word))
    console.print(table)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("document")
@click.option("--text", "-t", "is_text", is_flag=True,
              help="Treat DOCUMENT as literal text instead of a file path.")
@model_options
@workers_option
@click.option("--softmax", "use_softmax", is_flag=True,
              help="Report softmax probabilities instead of raw log-scores.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(
    corpus: Path,
    document: str,
    is_text: bool,
    stopwords_file: Optional[Path],
    depth: int,
    alpha: float,
    workers: int,
    use_softmax: bool,
    output: str,
) -> None:
    """Train on CORPUS and classify DOCUMENT.

    CORPUS holds one sub-directory (one document per file) or one file
    (one document per line) per category.

    Example: bayes-text classify corpus/ --text "run fast"
    """
    try:
        text = document if is_text else read_document(document)
        model = ClassifierModel(config=_build_config(stopwords_file, depth, alpha))
        with console.status("[bold blue]Training...", spinner="dots"):
            train_directory(model, corpus, runner=_make_runner(workers))
        scores = model.classify(text, transform=softmax if use_softmax else None)
        best = model.most_likely(scores)
    except (ClassifierError, OSError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}", soft_wrap=True)
        sys.exit(1)

    if output == "json":
        click.echo(json.dumps({"most_likely": best, "scores": scores}, indent=2))
        return

    table = Table(title="Probabilities" if use_softmax else "Log-scores")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    for name, score in sorted(scores.items(), key=lambda x: x[1], reverse=True):
        value = f"{score:.2%}" if use_softmax else f"{score:.4f}"
        style = "bold green" if name == best else ""
        table.add_row(name, value, style=style)
    console.print(table)
    console.print(Panel(f"[bold]{best}[/]", title="Most likely", border_style="green"))


@main.command()
@click.argument("corpus", type=click.Path(exists=True, file_okay=False, path_type=Path))
@model_options
@workers_option
@click.option("--folds", "-k", type=click.IntRange(min=2), default=5, show_default=True,
              help="Number of cross-validation folds.")
@click.option("--seed", type=int, default=42, show_default=True, help="Fold shuffling seed.")
def evaluate(
    corpus: Path,
    stopwords_file: Optional[Path],
    depth: int,
    alpha: float,
    workers: int,
    folds: int,
    seed: int,
) -> None:
    """Cross-validate the classifier on CORPUS.

    Reports accuracy, the mean log-likelihood of the true category and the
    mean confidence of each pick for every held-out fold.

    Example: bayes-text evaluate corpus/ --folds 5
    """
    try:
        config = _build_config(stopwords_file, depth, alpha)
        shards = load_corpus(corpus)
        with console.status("[bold blue]Cross-validating...", spinner="dots"):
            results = cross_validate(
                shards, k=folds, seed=seed, config=config, runner=_make_runner(workers)
            )
    except (ClassifierError, OSError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}", soft_wrap=True)
        sys.exit(1)

    if not results:
        console.print("[bold red]Error:[/] Corpus too small for the requested number of folds.")
        sys.exit(1)

    table = Table(title=f"{folds}-fold cross-validation")
    table.add_column("Fold", justify="right")
    table.add_column("Held out", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Log-likelihood", justify="right")
    table.add_column("Confidence", justify="right")
    for result in results:
        table.add_row(
            str(result.fold + 1),
            str(result.test_documents),
            f"{result.accuracy:.2%}",
            f"{result.mean_log_likelihood:.4f}",
            f"{result.mean_confidence:.2%}",
        )

    n = len(results)
    mean_acc = sum(r.accuracy for r in results) / n
    mean_ll = sum(r.mean_log_likelihood for r in results) / n
    mean_conf = sum(r.mean_confidence for r in results) / n
    table.add_row(
        "mean", str(sum(r.test_documents for r in results)),
        f"{mean_acc:.2%}", f"{mean_ll:.4f}", f"{mean_conf:.2%}", style="bold",
    )
    console.print(table)

    gap = mean_conf - mean_acc
    if gap > 0:
        console.print(f"[yellow]Overconfident by {gap:.2%} on average.[/]")


if __name__ == "__main__":
    main()
