"""CLI commands package — main click group and command registration."""

import click

from techdb import __version__


@click.group()
@click.version_option(version=__version__)
@click.option("--db", "corpus_path", type=click.Path(), default=None, help="Corpus file or directory (default: $TECHDB_CORPUS)")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx: click.Context, corpus_path: str | None, verbose: bool):
    """
    Rank and search a knowledge base of technical entities.

    \b
    Commands:
        status        Show corpus statistics
        search        Resolve a name or alias to an entry id
        rank          Show the rank breakdown of an entry
        top           List the top ranked entries
        links         Show entries linking to an entry
        broken-links  List permalinks that don't resolve
        serve         Start the rank/search server

    \b
    Examples:
        techdb --db entries.json status
        techdb search "C++"
        techdb rank python
        techdb top --limit 20 --languages
        techdb links c
    """
    ctx.ensure_object(dict)
    ctx.obj["corpus_path"] = corpus_path
    ctx.obj["verbose"] = verbose


# Register all commands
from .search import db_search

main.add_command(db_search)

from .ranking import db_rank, db_top

main.add_command(db_rank)
main.add_command(db_top)

from .management import db_broken_links, db_links, db_status

main.add_command(db_status)
main.add_command(db_links)
main.add_command(db_broken_links)

from .serve import serve_cmd

main.add_command(serve_cmd)
