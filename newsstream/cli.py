import json
import sys

import click

from .config import Settings
from .core import NewsStream
from .exceptions import AlreadyInProgress, RateLimited
from .log import setup_logger
from .preferences import PreferenceStore


@click.command()
@click.option("--category", "-c", default="all", show_default=True, help="Only show articles from this category key.")
@click.option("--limit", "-n", type=int, default=None, help="Print at most this many articles.")
@click.option("--json", "as_json", is_flag=True, help="Print the aggregation result as JSON.")
@click.option("--preferences", "prefs_path", type=click.Path(dir_okay=False), default=None,
              help="Preferences file (defaults to NEWSSTREAM_PREFERENCES_PATH).")
def main(category, limit, as_json, prefs_path):
    """Fetch the selected feeds once and print the aggregated articles."""
    settings = Settings.from_env()
    if prefs_path:
        settings.preferences_path = prefs_path
    setup_logger(settings.log_level)

    preferences = PreferenceStore(settings.preferences_path).load()
    with NewsStream(settings, preferences=preferences) as stream:
        try:
            result = stream.refresh()
        except (RateLimited, AlreadyInProgress) as e:
            click.echo(str(e), err=True)
            sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    articles = stream.switch_category(category)
    if limit is not None:
        articles = articles[:limit]
    if not articles:
        click.echo("No articles found.")
        return

    for a in articles:
        mark = " ✓" if a.source.verified else ""
        click.echo(f"{a.published_at:%Y-%m-%d %H:%M} [{a.category}] {a.title}")
        click.echo(f"    {a.source.name}{mark} <{a.url}>")


if __name__ == "__main__":
    main()
