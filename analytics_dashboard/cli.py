"""Click CLI for the analytics dashboard."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from .analytics import aggregate_users
from .config import get_settings
from .dashboard import load_dashboard
from .flask_ui import create_app
from .models import AggregateResult
from .token_store import JsonFileTokenStore, build_token_store

load_dotenv()


@click.group()
@click.option("--log-level", default=None, help="Override DASHBOARD_LOG_LEVEL")
def cli(log_level: str | None) -> None:
    """Site analytics dashboard CLI."""
    logging.basicConfig(level=(log_level or get_settings().log_level).upper())


def _format_result(result: AggregateResult) -> str:
    """Format the four tables as plain text sections."""
    if result.is_empty:
        return "No data available."

    def _section(title: str, rows: list[tuple[str, int]]) -> str:
        return "\n".join([title, *(f"  {name}: {count}" for name, count in rows)])

    return "\n\n".join(
        [
            _section("User Activity", [(e.name, e.value) for e in result.user_stats]),
            _section(
                "Monthly Registrations",
                [(e.name, e.registrations) for e in result.registration_stats],
            ),
            _section(
                "Gender Distribution", [(e.name, e.value) for e in result.gender_stats]
            ),
            _section(
                "Approval Status", [(e.name, e.value) for e in result.approval_stats]
            ),
        ]
    )


def _echo_result(result: AggregateResult, output_json: bool) -> None:
    if output_json:
        click.echo(json.dumps(result.to_payload(), indent=2))
    else:
        click.echo(_format_result(result))


@cli.command("summary")
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output raw JSON instead of formatted text",
)
def summary_cmd(output_json: bool) -> None:
    """Fetch users from the admin API and print the four tables."""
    settings = get_settings()
    token_store = build_token_store(settings)
    result = asyncio.run(load_dashboard(token_store, settings))
    _echo_result(result, output_json)


@cli.command("aggregate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output raw JSON instead of formatted text",
)
def aggregate_cmd(path: Path, output_json: bool) -> None:
    """Aggregate a local JSON array of user records."""
    try:
        users = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(users, list):
        raise click.ClickException(f"{path} must contain a JSON array of users")
    records = [user if isinstance(user, dict) else {} for user in users]
    _echo_result(aggregate_users(records), output_json)


@cli.command("store-token")
@click.argument("token")
@click.option(
    "--path",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Storage file (defaults to DASHBOARD_TOKEN_FILE)",
)
def store_token_cmd(token: str, store_path: Path | None) -> None:
    """Place a bearer token into the local JSON storage file."""
    settings = get_settings()
    target = store_path or Path(settings.token_file).expanduser()
    JsonFileTokenStore(target).set(settings.token_key, token)
    click.echo(f"Token stored under '{settings.token_key}' in {target}")


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=5000, show_default=True, type=int)
@click.option("--debug", is_flag=True, help="Enable the Flask debugger")
def serve_cmd(host: str, port: int, debug: bool) -> None:
    """Run the analytics page with the Flask development server."""
    create_app().run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    cli()
