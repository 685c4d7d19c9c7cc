"""
Command-line interface using Click.

Provides commands for delivering, validating and fingerprinting
issue-based messages.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console

from . import __version__
from .core import InvalidInputError, RepositoryContext, preview_message, send_message
from .fingerprint import fingerprint_marker, generate_fingerprint
from .github_client import GitHubClient, TransportError
from .interactive import display_preview_panel, display_result_panel
from .utils import load_config, setup_logging, substitute_placeholders
from .validator import ValidationError, options_from_descriptor, validate_message_file


console = Console()


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """
    GitHub Issue Messages.

    Deliver messages to repository maintainers as GitHub issues,
    without ever opening the same message twice.
    """
    pass


def _build_descriptor(
    input_file: Optional[Path],
    title: Optional[str],
    body: Optional[str],
    update: Optional[str],
    update_after_days: Optional[float],
    default_update_after_days: float,
) -> Dict[str, Any]:
    """Merge a descriptor file with command-line values (flags win)."""
    data: Dict[str, Any] = validate_message_file(input_file) if input_file else {}

    if title is not None:
        data["title"] = title
    if body is not None:
        data["body"] = body
    if update is not None:
        data["update"] = update
    if update_after_days is not None:
        data["update_after_days"] = update_after_days

    data.setdefault("update_after_days", default_update_after_days)
    return data


@main.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to message JSON file",
)
@click.option("--title", "-t", type=str, help="Issue title")
@click.option("--body", "-b", type=str, help="Issue content")
@click.option("--update", "-u", type=str, help="Comment to post on an existing issue")
@click.option(
    "--update-after-days",
    type=click.FloatRange(min=0),
    help="Only post the update after this many days without activity",
)
@click.option(
    "--repo",
    "-r",
    "repository",
    type=str,
    help="Target repository (owner/repo), defaults to the configured repository",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(path_type=Path),
    default="config.json",
    help="Path to configuration file (default: config.json)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would happen without creating issues or comments",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Logging level",
)
def send(
    input_file: Optional[Path],
    title: Optional[str],
    body: Optional[str],
    update: Optional[str],
    update_after_days: Optional[float],
    repository: Optional[str],
    config_file: Path,
    dry_run: bool,
    log_level: str,
) -> None:
    """
    Deliver a message as a GitHub issue.

    Examples:
        gh-issue-messages send --title "Report" --body "Something failed"
        gh-issue-messages send --input message.json --repo owner/repo
        gh-issue-messages send --input message.json --dry-run
    """
    config = load_config(config_file)

    if log_level:
        config["log_level"] = log_level

    log_dir = Path(config["log_directory"])
    log_dir.mkdir(parents=True, exist_ok=True)

    setup_logging(
        log_level=config["log_level"],
        log_file=log_dir / "gh-issue-messages.log",
        enable_color=config["enable_color"],
    )

    try:
        data = _build_descriptor(
            input_file, title, body, update, update_after_days, config["update_after_days"]
        )
        options = options_from_descriptor(data)
        context = RepositoryContext(repository or config["default_repository"])
        client = GitHubClient.from_config(config)

        if dry_run:
            preview = asyncio.run(
                preview_message(
                    client, context, client, data.get("title", ""), data.get("body", ""), options
                )
            )
            display_preview_panel(preview)
        else:
            result = asyncio.run(
                send_message(
                    client, context, client, data.get("title", ""), data.get("body", ""), options
                )
            )
            display_result_panel(result)

    except ValidationError as e:
        console.print(f"[red]✗ Validation Error:[/red] {e}")
        sys.exit(1)

    except InvalidInputError as e:
        console.print(f"[red]✗ Invalid Input:[/red] {e}")
        sys.exit(1)

    except TransportError as e:
        console.print(f"[red]✗ GitHub Error:[/red] {e}")
        sys.exit(1)

    sys.exit(0)


@main.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to message JSON file",
)
def validate(input_file: Path) -> None:
    """
    Validate a message JSON file against the schema.

    Examples:
        gh-issue-messages validate --input message.json
    """
    try:
        data = validate_message_file(input_file)
    except ValidationError as e:
        console.print(f"[red]✗[/red] Validation failed: {e}")
        sys.exit(1)

    console.print("[green]✓[/green] Validation passed")
    console.print(f"\nTitle: {data['title']}")
    if data.get("owner"):
        console.print(f"Repository: {data['owner']}/{data['repo']}")
    if data.get("update"):
        console.print(f"Update after: {data.get('update_after_days', 7)} days")

    sys.exit(0)


@main.command()
@click.option("--body", "-b", type=str, required=True, help="Message content")
@click.option("--app-name", type=str, help="Value substituted for {appName}")
@click.option("--app-url", type=str, help="Value substituted for {appUrl}")
def fingerprint(body: str, app_name: Optional[str], app_url: Optional[str]) -> None:
    """
    Print the fingerprint and hidden marker for a message.

    Placeholders are only substituted when --app-name or --app-url is given.

    Examples:
        gh-issue-messages fingerprint --body "Something failed"
        gh-issue-messages fingerprint --body "Ping from {appName}" --app-name Bot
    """
    if app_name is not None or app_url is not None:
        body = substitute_placeholders(body, app_name or "{appName}", app_url or "{appUrl}")

    digest = generate_fingerprint(body)
    console.print(f"Fingerprint: {digest}")
    console.print(f"Marker: {fingerprint_marker(digest)}", markup=False)


if __name__ == "__main__":
    main()
