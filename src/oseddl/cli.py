"""oseddl CLI - open-source event deadlines."""

import json
import logging
import sys
import time

import click

from .board import DeadlineBoard
from .config import Config, load_config
from .core.catalogue import (
    CATEGORIES,
    format_deadline,
    format_timeline_date,
    next_deadline,
    timeline_status,
)
from .core.countdown import format_time_left, time_left
from .core.ranking import FlatEvent, available_locations, available_tags
from .store import FetchStatus
from .timer import CountdownTimer
from .workflows import build_store, find_event, get_display_zone, load_board

STATUS_MARKERS = {"active": ">", "upcoming": "+", "past": " "}


def _load_or_exit(config: Config) -> DeadlineBoard:
    board = load_board(config)
    state = board.store.state
    if state.status is FetchStatus.FAILED and not state.items:
        click.echo(f"Error: {state.last_error}", err=True)
        sys.exit(1)
    return board


def _format_line(record: FlatEvent, favorites: frozenset[str], tz) -> str:
    star = "*" if record.event.id in favorites else " "
    head = f"{star} [{record.item.category}] {record.item.title} {record.event.year} ({record.event.place})"
    upcoming = next_deadline(record.event)
    if record.ended or upcoming is None:
        return f"{head}\n    ended"
    remaining = format_time_left(time_left(upcoming.due))
    return f"{head}\n    {upcoming.comment}: {format_deadline(upcoming.due, tz)}, in {remaining}"


@click.group()
@click.version_option(package_name="oseddl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """oseddl - Open-source conference, competition and activity deadlines."""
    if verbose:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("list")
@click.option("--category", type=click.Choice(CATEGORIES), help="Only this category")
@click.option("--tag", "tags", multiple=True, help="Match any of these tags")
@click.option("--location", "locations", multiple=True, help="Match any of these places")
@click.option("--search", "query", default="", help="Fuzzy search title, description, tags and place")
@click.option("--favorites", is_flag=True, help="Only favorite events")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_events(category, tags, locations, query, favorites, as_json):
    """List events, most urgent deadline first."""
    config = load_config()
    board = _load_or_exit(config)
    store = board.store
    store.set_category(category)
    for tag in tags:
        store.toggle_tag(tag)
    for location in locations:
        store.toggle_location(location)
    store.set_search_query(query)
    store.set_show_only_favorites(favorites)

    records = board.view()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": r.event.id,
                        "title": r.item.title,
                        "year": r.event.year,
                        "category": r.item.category,
                        "place": r.event.place,
                        "link": r.event.link,
                        "ended": r.ended,
                        "seconds_remaining": int(r.time_remaining.total_seconds()),
                    }
                    for r in records
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not records:
        click.echo("No events found. Try adjusting the filters or search.")
        return

    tz = get_display_zone(config)
    for record in records:
        click.echo(_format_line(record, store.state.favorites, tz))


@main.command()
def tags():
    """List all tags in the catalogue."""
    board = _load_or_exit(load_config())
    for tag in available_tags(board.store.state.items):
        click.echo(tag)


@main.command()
def locations():
    """List all event places in the catalogue."""
    board = _load_or_exit(load_config())
    for place in available_locations(board.store.state.items):
        click.echo(place)


@main.command()
@click.argument("event_id")
def fav(event_id: str):
    """Toggle an event in favorites."""
    store = build_store(load_config())
    if not store.toggle_favorite(event_id):
        click.echo(f"Error: could not save favorites to {store.favorites_store.path}", err=True)
        sys.exit(1)
    if event_id in store.state.favorites:
        click.echo(f"Added {event_id} to favorites.")
    else:
        click.echo(f"Removed {event_id} from favorites.")


@main.command()
@click.argument("event_id")
def show(event_id: str):
    """Show an event's details and full timeline."""
    config = load_config()
    board = _load_or_exit(config)
    record = find_event(board, event_id)
    if record is None:
        click.echo(f"Error: no event with id {event_id}", err=True)
        sys.exit(1)

    tz = get_display_zone(config)
    now = board.clock()
    item, event = record.item, record.event
    star = " *" if event.id in board.store.state.favorites else ""
    click.echo(f"[{item.category}] {item.title} {event.year}{star}")
    click.echo(f"  {item.description}")
    if item.tags:
        click.echo(f"  Tags:     {', '.join(item.tags)}")
    click.echo(f"  Date:     {event.date}")
    click.echo(f"  Timezone: {event.timezone}")
    click.echo(f"  Place:    {event.place}")
    click.echo(f"  Link:     {event.link}")

    click.echo("  Timeline:")
    for index, entry in enumerate(event.timeline):
        status = timeline_status(event, index, now)
        click.echo(
            f"  {STATUS_MARKERS[status]} {format_timeline_date(entry.due, tz)}  {entry.comment}"
            f" ({format_deadline(entry.due, tz)})"
        )

    upcoming = next_deadline(event, now)
    if upcoming is None:
        click.echo("  Ended: all deadlines have passed")
    else:
        remaining = format_time_left(time_left(upcoming.due, now))
        click.echo(f"  Next:     {upcoming.comment}, in {remaining}")


@main.command()
@click.argument("event_id")
@click.option("--once", is_flag=True, help="Print the countdown once and exit")
def countdown(event_id: str, once: bool):
    """Live countdown to an event's next deadline."""
    board = _load_or_exit(load_config())
    record = find_event(board, event_id)
    if record is None:
        click.echo(f"Error: no event with id {event_id}", err=True)
        sys.exit(1)

    upcoming = next_deadline(record.event)
    if upcoming is None:
        click.echo(f"{record.item.title} {record.event.year}: all deadlines have passed")
        return

    click.echo(f"{record.item.title} {record.event.year} - {upcoming.comment}")
    if once:
        click.echo(format_time_left(time_left(upcoming.due)))
        return

    def render(remaining):
        click.echo(f"\r{format_time_left(remaining):<20}", nl=False)

    try:
        with CountdownTimer(upcoming.due, render) as timer:
            while timer.current is not None:
                time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    click.echo()
