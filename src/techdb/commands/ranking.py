"""Rank inspection commands."""

from typing import Optional

import click

from ._common import _configure_logging, _load_store


@click.command("rank")
@click.argument("name")
@click.option("--db", "corpus_path", type=click.Path(), help="Corpus file or directory")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def db_rank(name: str, corpus_path: Optional[str], verbose: bool):
    """
    Show how an entry's rank is composed.

    NAME may be an id, title or alias.

    \b
    Examples:
        techdb rank python
        techdb rank "C++"
    """
    _configure_logging(verbose)

    store = _load_store(corpus_path)
    entry_id = store.search_for_entity(name)
    entry = store.get_entry(entry_id) if entry_id else None
    if entry is None:
        raise click.ClickException(f"No entry found for '{name}'")

    record = store.get_rank_record(entry)
    language_rank = store.get_language_rank(entry)

    click.echo(f"\n{entry.title} ({entry.primary_key})")
    click.echo("=" * 40)
    click.echo(f"Type: {entry.type_name or 'unknown'}")
    click.echo(f"Rank: #{record.rank + 1} of {len(store)} (percentile {store.predict_percentile(entry):.3f})")
    if language_rank is not None:
        click.echo(f"Language rank: #{language_rank + 1}")

    click.echo(f"\n{'Dimension':<20} {'Value':>12} {'Rank':>8}")
    click.echo("-" * 42)
    click.echo(f"{'Jobs':<20} {record.jobs:>12,} {record.job_rank:>8}")
    click.echo(f"{'Users':<20} {record.users:>12,} {record.user_rank:>8}")
    click.echo(f"{'Facts':<20} {record.fact_count:>12,} {record.fact_count_rank:>8}")
    click.echo(f"{'Inbound links':<20} {record.inbound_link_count:>12,} {record.inbound_link_rank:>8}")
    click.echo(f"{'Total':<20} {'':>12} {record.total_rank:>8}")

    previous_entry = store.previous_ranked(entry)
    next_entry = store.next_ranked(entry)
    click.echo(f"\nPrevious: {previous_entry.primary_key if previous_entry else '-'}")
    click.echo(f"Next: {next_entry.primary_key if next_entry else '-'}")


@click.command("top")
@click.option("--db", "corpus_path", type=click.Path(), help="Corpus file or directory")
@click.option("--limit", type=int, default=25, help="Number of entries to show")
@click.option("--languages", is_flag=True, help="Only rank languages")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def db_top(corpus_path: Optional[str], limit: int, languages: bool, verbose: bool):
    """
    List the top ranked entries.

    \b
    Examples:
        techdb top
        techdb top --limit 100 --languages
    """
    _configure_logging(verbose)

    store = _load_store(corpus_path)
    rows = store.ranked_entries(languages_only=languages)[:limit]

    if not rows:
        click.echo("Corpus is empty.", err=True)
        return

    click.echo(f"{'#':>5}  {'ID':<24} {'Type':<30} {'Users':>12} {'Jobs':>10}")
    click.echo("-" * 86)
    for row in rows:
        position = row.language_rank if languages else row.rank
        click.echo(f"{position + 1:>5}  {row.id:<24} {row.type_name:<30} {row.users:>12,} {row.jobs:>10,}")
