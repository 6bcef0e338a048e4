"""Click CLI for people_dao — manage person records through the cached DAO."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from people_dao.config.schema import Settings, load_settings
from people_dao.core import PeopleService
from people_dao.errors import PeopleDaoError
from people_dao.storage.sqlite import seed_sample_people
from people_dao.types import Person, SearchField

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str) -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level)
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
        force=True,
    )


@contextmanager
def _service(ctx: click.Context) -> Iterator[PeopleService]:
    settings: Settings = ctx.obj["settings"]
    try:
        service = PeopleService.from_settings(settings)
    except PeopleDaoError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    try:
        yield service
    except PeopleDaoError as e:
        error_console.print(f"[red]Error ({e.error_type}):[/red] {e}")
        sys.exit(1)
    finally:
        service.close()


def _people_table(people: list[Person], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Phone")
    table.add_column("Birth date")
    table.add_column("Address")
    for person in people:
        table.add_row(
            person.id,
            person.name,
            person.email,
            person.phone or "-",
            person.birth_date.isoformat() if person.birth_date else "-",
            person.address or "-",
        )
    return table


def _print_person(person: Person | None) -> None:
    if person is None:
        console.print("[yellow]No person found.[/yellow]")
        return
    console.print_json(person.model_dump_json())


def _fields(**options: Any) -> dict[str, Any]:
    return {key: value for key, value in options.items() if value is not None}


def _birth_date(_ctx: click.Context, _param: click.Parameter, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter("expected YYYY-MM-DD") from e


@click.group()
@click.version_option(package_name="people-dao")
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="SQLite database path.")
@click.option("--ttl", "cache_ttl", type=float, default=None, help="Cache TTL in seconds.")
@click.option("--no-cache", is_flag=True, default=False, help="Disable the lookup cache.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    db_path: str | None,
    cache_ttl: float | None,
    no_cache: bool,
    verbose: int,
) -> None:
    """people-dao — person records behind a time-boxed lookup cache."""
    try:
        settings = load_settings(
            db_path=db_path,
            cache_ttl_seconds=cache_ttl,
            cache_disabled=no_cache or None,
        )
    except ValueError as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e
    _setup_logging(verbose, settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("init-db")
@click.option("--seed", is_flag=True, default=False, help="Insert sample people.")
@click.pass_context
def init_db(ctx: click.Context, seed: bool) -> None:
    """Create the person table if it does not exist."""
    with _service(ctx) as service:
        console.print(f"[green]Database ready:[/green] {service.store.db_path}")
        if seed:
            created = seed_sample_people(service.store)
            console.print(f"[green]Seeded {len(created)} sample people.[/green]")


@cli.command()
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.option("--phone", default=None)
@click.option("--birth-date", default=None, callback=_birth_date, help="YYYY-MM-DD")
@click.option("--address", default=None)
@click.pass_context
def create(
    ctx: click.Context,
    name: str,
    email: str,
    phone: str | None,
    birth_date: date | None,
    address: str | None,
) -> None:
    """Create a person."""
    with _service(ctx) as service:
        person = service.dao.create(
            _fields(name=name, email=email, phone=phone, birth_date=birth_date, address=address)
        )
        console.print("[green]Created.[/green]")
        _print_person(person)


@cli.command()
@click.argument("record_id")
@click.pass_context
def get(ctx: click.Context, record_id: str) -> None:
    """Show one person by id."""
    with _service(ctx) as service:
        _print_person(service.dao.get_by_id(record_id))


@cli.command()
@click.argument("record_id")
@click.option("--name", default=None)
@click.option("--phone", default=None)
@click.option("--birth-date", default=None, callback=_birth_date, help="YYYY-MM-DD")
@click.option("--address", default=None)
@click.pass_context
def update(
    ctx: click.Context,
    record_id: str,
    name: str | None,
    phone: str | None,
    birth_date: date | None,
    address: str | None,
) -> None:
    """Update fields of a person. Email cannot change."""
    with _service(ctx) as service:
        person = service.dao.update(
            record_id, _fields(name=name, phone=phone, birth_date=birth_date, address=address)
        )
        console.print("[green]Updated.[/green]")
        _print_person(person)


@cli.command()
@click.argument("record_id")
@click.confirmation_option(prompt="Are you sure you want to delete this person?")
@click.pass_context
def delete(ctx: click.Context, record_id: str) -> None:
    """Delete a person."""
    with _service(ctx) as service:
        service.dao.delete(record_id)
        console.print(f"[green]Deleted {record_id}.[/green]")


@cli.command("list")
@click.pass_context
def list_people(ctx: click.Context) -> None:
    """List everyone, ordered by name."""
    with _service(ctx) as service:
        people = service.dao.list_all()
        console.print(_people_table(people, f"People ({len(people)})"))


@cli.command()
@click.argument("field", type=click.Choice([f.value for f in SearchField]))
@click.argument("value")
@click.option(
    "--repeat", type=click.IntRange(min=1), default=1, help="Run the lookup N times in-process."
)
@click.pass_context
def search(ctx: click.Context, field: str, value: str, repeat: int) -> None:
    """Search by name (partial), email or phone (exact, cached)."""
    with _service(ctx) as service:
        dao = service.dao
        for _ in range(repeat):
            if field == SearchField.NAME:
                people = dao.find_by_name(value)
            elif field == SearchField.EMAIL:
                found = dao.find_by_email(value)
                people = [found] if found else []
            else:
                found = dao.find_by_phone(value)
                people = [found] if found else []

        if people:
            console.print(_people_table(people, f"Matches for {field} '{value}'"))
        else:
            console.print("[yellow]No person found.[/yellow]")
        console.print(_cache_table(service))


def _cache_table(service: PeopleService) -> Table:
    stats = service.cache.stats()
    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Enabled", "yes" if service.cache.enabled else "no")
    table.add_row("TTL (s)", f"{service.cache.default_ttl_seconds:g}")
    table.add_row("Entries", str(stats.size))
    table.add_row("Hits", str(stats.hits))
    table.add_row("Misses", str(stats.misses))
    table.add_row("Hit rate", f"{stats.hit_rate:.1%}")
    if stats.keys:
        table.add_row("Keys", "\n".join(stats.keys))
    return table


@cli.group()
def cache() -> None:
    """Cache inspection commands."""


@cache.command("stats")
@click.pass_context
def cache_stats(ctx: click.Context) -> None:
    """Show cache settings and statistics for a fresh process."""
    with _service(ctx) as service:
        console.print(_cache_table(service))


@cli.command()
@click.argument("method", type=click.Choice(
    ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"], case_sensitive=False
))
@click.argument("path")
@click.option("-q", "--query", multiple=True, help="Query parameter as key=value.")
@click.option("--body", default=None, help="JSON request body.")
@click.pass_context
def request(
    ctx: click.Context,
    method: str,
    path: str,
    query: tuple[str, ...],
    body: str | None,
) -> None:
    """Dispatch one request through the router and print the response."""
    params: dict[str, str] = {}
    for item in query:
        key, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"'{item}' is not key=value", param_hint="--query")
        params[key] = value
    try:
        payload = json.loads(body) if body is not None else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint="--body") from e

    with _service(ctx) as service:
        response = service.router.dispatch(method, path, query=params, body=payload)
    console.print(f"HTTP {response.status}")
    if response.body is not None:
        console.print_json(data=response.body)
    if response.status >= 400:
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli()
