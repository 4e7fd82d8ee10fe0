"""Serve command - start the rank/search server."""

import logging

import click

from ._common import _resolve_corpus_path

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option("--port", default=8233, help="Port to listen on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option("--no-warmup", is_flag=True, help="Skip eager loading of the corpus and ranks.")
@click.option("--db", "corpus_path", default=None, help="Corpus file or directory.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def serve_cmd(port: int, host: str, no_warmup: bool, corpus_path: str, verbose: bool):
    """Start the techdb server."""
    from techdb.server import run_server

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(name)s %(message)s")

    run_server(
        host=host,
        port=port,
        do_warmup=not no_warmup,
        corpus_path=str(_resolve_corpus_path(corpus_path)),
        verbose=verbose,
    )
