"""Command-line interface for PadGroups.

This module provides commands for initializing the store and managing
groups from a shell.
"""

import asyncio
import json
import sys
from collections.abc import Awaitable
from typing import Any, NoReturn, TypeVar

import click

from padgroups import api
from padgroups.core.config import get_settings
from padgroups.core.logging import bind_correlation_id, configure_logging, get_logger
from padgroups.domain.entities.group import Group, Visibility
from padgroups.domain.exceptions import IndexPropagationError, PadGroupsError
from padgroups.domain.schemas import GroupResponse
from padgroups.infrastructure.persistence.database import get_db_manager, init_database

logger = get_logger(__name__)

T = TypeVar("T")


def _run(coro: Awaitable[T]) -> T:
    """Run one async operation and release database connections afterwards."""

    async def runner() -> T:
        try:
            return await coro
        finally:
            await get_db_manager().disconnect()

    try:
        return asyncio.run(runner())
    except IndexPropagationError as e:
        click.echo(f"Error: {e.message}", err=True)
        click.echo(f"  Updated users: {', '.join(e.succeeded) or '-'}", err=True)
        click.echo(f"  Failed users:  {', '.join(e.failed) or '-'}", err=True)
        raise SystemExit(1)
    except PadGroupsError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)


def _echo_group(group: Group) -> None:
    click.echo(GroupResponse.model_validate(group).model_dump_json(indent=2))


def _group_params(
    raw_json: str | None,
    name: str | None,
    admin: str | None,
    admins: tuple[str, ...],
    users: tuple[str, ...],
    pads: tuple[str, ...],
    visibility: str | None,
    password: str | None,
    readonly: bool | None,
) -> dict[str, Any]:
    """Merge a raw JSON document with explicit options (options win)."""
    params: dict[str, Any] = {}
    if raw_json:
        try:
            loaded = json.loads(raw_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"invalid JSON: {e}", param_hint="--json")
        if not isinstance(loaded, dict):
            raise click.BadParameter("expected a JSON object", param_hint="--json")
        params.update(loaded)
    options = {
        "name": name,
        "admin": admin,
        "admins": list(admins) or None,
        "users": list(users) or None,
        "pads": list(pads) or None,
        "visibility": visibility,
        "password": password,
        "readonly": readonly,
    }
    params.update({k: v for k, v in options.items() if v is not None})
    return params


def group_options(func: Any) -> Any:
    """Options shared by ``group add`` and ``group set``."""
    decorators = [
        click.option("--json", "raw_json", default=None, help="Group parameters as a JSON object"),
        click.option("--name", default=None, help="Group name"),
        click.option("--admin", default=None, help="Creating administrator id"),
        click.option("--admins", multiple=True, help="Additional administrator id (repeatable)"),
        click.option("--users", multiple=True, help="Invited user id (repeatable)"),
        click.option("--pads", multiple=True, help="Attached pad id (repeatable)"),
        click.option(
            "--visibility",
            type=click.Choice([v.value for v in Visibility]),
            default=None,
            help="Group visibility (default: restricted)",
        ),
        click.option("--password", default=None, help="Password for private groups"),
        click.option("--readonly/--no-readonly", default=None, help="Read-only mode for pads"),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="PadGroups")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides PADGROUPS_LOG_LEVEL)",
)
@click.option("--correlation-id", default=None, help="Correlation id attached to every log entry")
def cli(log_level: str | None, correlation_id: str | None) -> None:
    """PadGroups - groups of users and pads over a key-value store."""
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    if correlation_id:
        bind_correlation_id(correlation_id)


@cli.command()
def info() -> None:
    """Display PadGroups configuration."""
    settings = get_settings()

    click.echo(f"""
PadGroups v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Store:
  Backend:      {settings.store_backend}
  URL:          {settings.database_url}
  Group prefix: {settings.group_prefix}

Operations:
  Index concurrency:     {settings.index_concurrency}
  Existence concurrency: {settings.existence_check_concurrency}
  Timeout:               {settings.operation_timeout_seconds}
  Compensate on failure: {settings.compensate_on_failure}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create the store table."""
    settings = get_settings()
    if settings.store_backend != "sql":
        click.echo("ERROR: init-db only applies to the sql store backend.", err=True)
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create the store table. Continue?",
            abort=True,
            default=False,
        )

    _run(init_database())
    click.echo("Database initialized successfully.")


@cli.group()
def group() -> None:
    """Manage groups."""


@group.command("add")
@group_options
def group_add(**options: Any) -> None:
    """Create a group."""
    params = _group_params(**options)
    created = _run(api.add_group(params))
    logger.info("Group created via CLI", group_id=created.id)
    _echo_group(created)


@group.command("set")
@click.argument("group_id")
@group_options
def group_set(group_id: str, **options: Any) -> None:
    """Replace an existing group (all fields must be given again)."""
    params = _group_params(**options)
    params["_id"] = group_id
    _echo_group(_run(api.set_group(params)))


@group.command("get")
@click.argument("group_id")
def group_get(group_id: str) -> None:
    """Show a group."""
    _echo_group(_run(api.get_group(group_id)))


@group.command("delete")
@click.argument("group_id")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
def group_delete(group_id: str, yes: bool) -> None:
    """Delete a group and detach it from its users."""
    if not yes:
        click.confirm(f"Delete group {group_id}?", abort=True, default=False)
    deleted = _run(api.delete_group(group_id))
    click.echo(f"Group {deleted.id} deleted.")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()
    sys.exit(0)


if __name__ == "__main__":
    main()
