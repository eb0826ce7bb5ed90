"""Quire CLI - Personal diary."""

import json
import sys

import click

from .config import load_config
from .core.entries import format_entry_date, group_by_date, preview, strip_html
from .editor import get_repository
from .errors import DiaryError


@click.group()
@click.version_option()
def main():
    """Quire - Personal diary CLI."""
    pass


@main.command()
@click.option("--email", prompt=True)
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in to the diary service."""
    repo = get_repository(load_config())
    try:
        tokens = repo.login(email, password)
    except DiaryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    tokens.save()
    click.echo("Logged in.")


@main.command()
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.password_option()
def register(name: str, email: str, password: str):
    """Create an account on the diary service."""
    repo = get_repository(load_config())
    try:
        tokens = repo.register(name, email, password)
    except DiaryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    tokens.save()
    click.echo(f"Account created. Logged in as {email}.")


@main.command()
def logout():
    """Log out and forget the stored token."""
    get_repository(load_config()).logout()
    click.echo("Logged out.")


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_entries(as_json: bool):
    """List your diary entries, newest first."""
    try:
        entries = get_repository(load_config()).list_entries()
    except DiaryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "title": e.title,
                        "date": e.date.isoformat(),
                        "content": e.content,
                    }
                    for e in entries
                ],
                indent=2,
            )
        )
        return

    if not entries:
        click.echo("No entries yet.")
        return

    first = True
    for day, day_entries in group_by_date(entries):
        if not first:
            click.echo()
        first = False
        click.echo(f"### {format_entry_date(day)}")
        for entry in day_entries:
            click.echo(f"  #{entry.id:<5} {entry.title}")
            text = preview(entry.content, length=70)
            if text:
                click.echo(f"         {text}")


@main.command()
@click.argument("entry_id", type=int)
def show(entry_id: int):
    """Show one diary entry."""
    try:
        entry = get_repository(load_config()).get(entry_id)
    except DiaryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"{entry.title}")
    click.echo(f"{format_entry_date(entry.date)}\n")
    click.echo(strip_html(entry.content) or "(empty)")


@main.command()
@click.argument("entry_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def delete(entry_id: int, yes: bool):
    """Delete a diary entry."""
    if not yes and not click.confirm(f"Delete entry #{entry_id}? This cannot be undone."):
        return

    try:
        get_repository(load_config()).delete(entry_id)
    except DiaryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Entry #{entry_id} deleted.")


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    import logging

    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    try:
        from .telegram_bot import run_bot
        click.echo("Starting Quire Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ImportError as e:
        click.echo(f"Error: Missing dependencies. Run 'pip install python-telegram-bot apscheduler'", err=True)
        click.echo(f"Details: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")


if __name__ == "__main__":
    main()
