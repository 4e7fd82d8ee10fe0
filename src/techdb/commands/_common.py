"""Shared utilities used across CLI command modules."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click


def _configure_logging(verbose: bool) -> None:
    """Configure logging for techdb."""
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    # Set level for techdb loggers
    for logger_name in [
        "techdb",
        "techdb.store",
        "techdb.links",
        "techdb.ranking",
        "techdb.search",
        "techdb.server",
    ]:
        logging.getLogger(logger_name).setLevel(level)

    # Suppress noisy third-party loggers
    for noisy_logger in [
        "httpcore",
        "httpx",
        "uvicorn.access",
        "asyncio",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


def _resolve_corpus_path(corpus_path: Optional[str] = None) -> Path:
    """Resolve the corpus path from an explicit --db value, the group option or the environment."""
    if corpus_path is not None:
        return Path(corpus_path)
    ctx = click.get_current_context(silent=True)
    group_path = ctx.obj.get("corpus_path") if ctx and ctx.obj else None
    if group_path is not None:
        return Path(group_path)
    from techdb.store import default_corpus_path
    return default_corpus_path()


def _load_store(corpus_path: Optional[str]):
    """Load the store for a command, turning load errors into a clean CLI error."""
    from techdb.store import CorpusLoadError, get_store

    path = _resolve_corpus_path(corpus_path)
    try:
        return get_store(path)
    except CorpusLoadError as e:
        raise click.ClickException(str(e))
