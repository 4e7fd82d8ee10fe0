"""Entity search command."""

from typing import Optional

import click

from ._common import _configure_logging, _load_store


@click.command("search")
@click.argument("query")
@click.option("--db", "corpus_path", type=click.Path(), help="Corpus file or directory")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def db_search(query: str, corpus_path: Optional[str], verbose: bool):
    """
    Resolve a name, alias or Wikipedia title to an entry id.

    \b
    Examples:
        techdb search Python
        techdb search "C++"
        techdb search "JavaScript_(programming_language)"
    """
    _configure_logging(verbose)

    store = _load_store(corpus_path)
    entry_id = store.search_for_entity(query)

    if entry_id is None:
        raise click.ClickException(f"No entry found for '{query}'")

    entry = store.get_entry(entry_id)
    click.echo(entry_id)
    if verbose and entry is not None:
        click.echo(f"  Title: {entry.title}", err=True)
        click.echo(f"  Type: {entry.type_name or 'unknown'}", err=True)
        if entry.aliases:
            click.echo(f"  Aliases: {', '.join(entry.aliases)}", err=True)
