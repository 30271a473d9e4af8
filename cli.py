"""CLI commands for EventLink event management."""

import asyncio

import typer
from pydantic import ValidationError

from src.config.logging import setup_logging
from src.events.dtos import (
    EventNotFoundError,
    EventValidationError,
    PersistenceError,
)
from src.events.features.create_event.router import CreateEventRequest
from src.events.features.suggest_tags.suggester import TagSuggestionInput, get_tag_suggester
from src.events.repository import EventRepository, OwnerEventCache, SqlEventStore
from src.events.schemas import share_url_for

app = typer.Typer(help="CLI commands for EventLink event management")


def _repository() -> EventRepository:
    return EventRepository(SqlEventStore())


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(1)


@app.command()
def create_event(
    owner_id: str = typer.Option(..., help="Owner (actor) id"),
    name: str = typer.Option(..., help="Event name"),
    date: str = typer.Option(..., help="Date, YYYY-MM-DD"),
    time: str = typer.Option(..., help="Time, HH:mm"),
    location: str = typer.Option(..., help="Location"),
    description: str = typer.Option("", help="Free-text description"),
    tags: list[str] = typer.Option([], "--tag", help="Tag (repeatable)"),
    collect_email: bool = typer.Option(False, help="Ask guests for their email"),
    collect_phone: bool = typer.Option(False, help="Ask guests for their phone number"),
):
    """Create an event."""
    try:
        request = CreateEventRequest(
            name=name,
            date=date,
            time=time,
            location=location,
            description=description,
            tags=tags,
            collect_fields={"name": True, "email": collect_email, "phone": collect_phone},
        )
    except ValidationError as e:
        _fail(str(e))

    try:
        event = asyncio.run(_repository().create(request.to_profile(), owner_id=owner_id))
    except (EventValidationError, PersistenceError) as e:
        _fail(str(e))

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Link: {share_url_for(event.id)}", fg=typer.colors.CYAN)


@app.command()
def list_events(owner_id: str = typer.Argument(..., help="Owner (actor) id")):
    """List an owner's events, most recent first."""
    cache = OwnerEventCache(_repository())
    try:
        events = asyncio.run(cache.refresh(owner_id))
    except PersistenceError as e:
        _fail(str(e))

    if not events:
        typer.secho("No events found.", fg=typer.colors.YELLOW)
        return
    for event in events:
        premium = " [premium]" if event.is_premium else ""
        typer.secho(f"{event.id}  {event.date} {event.time}  {event.name}{premium}", fg=typer.colors.BLUE)


@app.command()
def show_stats(event_id: str = typer.Argument(..., help="Event UUID")):
    """Print views and response tallies for an event."""
    try:
        event = asyncio.run(_repository().get_by_id(event_id))
    except (EventNotFoundError, PersistenceError) as e:
        _fail(str(e))

    typer.secho(f"Statistics for: {event.name}", fg=typer.colors.GREEN)
    typer.secho(f"  Views: {event.views}", fg=typer.colors.BLUE)
    for category, count in event.tally.items():
        typer.secho(f"  {category.value}: {count}", fg=typer.colors.BLUE)
    typer.secho(f"  Total responses: {event.total_responses}", fg=typer.colors.CYAN)


@app.command()
def mark_premium(event_id: str = typer.Argument(..., help="Event UUID")):
    """Mark an event premium (same effect as a completed checkout)."""
    try:
        event = asyncio.run(_repository().mark_premium(event_id))
    except (EventNotFoundError, PersistenceError) as e:
        _fail(str(e))

    typer.secho(f"Event {event.id} is premium.", fg=typer.colors.GREEN)


@app.command()
def suggest_tags(
    name: str = typer.Option(..., help="Event name"),
    description: str = typer.Option("", help="Description"),
    date: str = typer.Option("", help="Date"),
    location: str = typer.Option("", help="Location"),
):
    """Ask the text model for tag suggestions."""
    suggester = get_tag_suggester()
    tags = asyncio.run(
        suggester(TagSuggestionInput(name=name, description=description, date=date, location=location))
    )
    if not tags:
        typer.secho("No suggestions available.", fg=typer.colors.YELLOW)
        return
    for tag in tags:
        typer.secho(f"  - {tag}", fg=typer.colors.BLUE)


if __name__ == "__main__":
    setup_logging()
    app()
