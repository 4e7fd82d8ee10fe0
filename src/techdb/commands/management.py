"""Corpus inspection commands."""

from typing import Optional

import click

from ._common import _configure_logging, _load_store


@click.command("status")
@click.option("--db", "corpus_path", type=click.Path(), help="Corpus file or directory")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def db_status(corpus_path: Optional[str], verbose: bool):
    """
    Show corpus status and statistics.

    \b
    Examples:
        techdb status
        techdb status --db /path/to/entries.json
    """
    _configure_logging(verbose)

    store = _load_store(corpus_path)
    stats = store.get_stats()

    click.echo("\nKnowledge Base Status")
    click.echo("=" * 40)
    click.echo(f"Corpus: {stats.corpus_path}")
    click.echo(f"Total entries: {stats.total_entries:,}")
    click.echo(f"Languages: {stats.total_languages:,}")
    click.echo(f"Broken links: {stats.broken_links:,}")

    if stats.by_type:
        click.echo("\n=== Entries by Type ===")
        click.echo(f"{'Type':<20} {'Entries':>15}")
        click.echo("-" * 36)
        for type_code, count in stats.by_type.items():
            click.echo(f"{type_code:<20} {count:>15,}")


@click.command("links")
@click.argument("name")
@click.option("--db", "corpus_path", type=click.Path(), help="Corpus file or directory")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def db_links(name: str, corpus_path: Optional[str], verbose: bool):
    """
    Show the entries that link to an entry.

    \b
    Examples:
        techdb links c
    """
    _configure_logging(verbose)

    store = _load_store(corpus_path)
    entry_id = store.search_for_entity(name)
    if entry_id is None:
        raise click.ClickException(f"No entry found for '{name}'")

    referrers = store.inbound_links.referrers(entry_id)
    click.echo(f"{len(referrers)} inbound links to '{entry_id}'")
    for referrer in referrers:
        click.echo(f"  {referrer}")


@click.command("broken-links")
@click.option("--db", "corpus_path", type=click.Path(), help="Corpus file or directory")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def db_broken_links(corpus_path: Optional[str], verbose: bool):
    """
    List permalinks that don't resolve to an entry.

    Exits with status 1 if any are found.
    """
    _configure_logging(verbose)

    store = _load_store(corpus_path)
    broken = store.inbound_links.broken_links

    if not broken:
        click.echo("No broken links.", err=True)
        return

    for link in broken:
        click.echo(f"{link.source_id} -> {link.target}")
    raise click.ClickException(f"{len(broken)} broken links")
