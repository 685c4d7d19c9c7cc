"""
Rich console output for delivery results.
"""

from rich.console import Console
from rich.panel import Panel

from .models import Message, MessagePreview


console = Console()


def display_result_panel(result: Message) -> None:
    """
    Display a summary panel for a delivered message.

    Args:
        result: Delivery result
    """
    content = [f"[bold]Repository:[/bold] {result.owner}/{result.repo}"]

    if result.is_new:
        content.append(f"[green]✓[/green] Created issue #{result.issue_number}")
    else:
        content.append(f"[yellow]↺[/yellow] Reused issue #{result.issue_number}")

    if result.comment_id is not None:
        content.append(f"[blue]✎[/blue] Posted update comment {result.comment_id}")

    panel = Panel(
        "\n".join(content),
        title="Message delivered",
        border_style="bright_blue",
    )

    console.print(panel)


def display_preview_panel(preview: MessagePreview) -> None:
    """
    Display what a delivery would do.

    Args:
        preview: Dry-run outcome
    """
    content = [
        f"[bold]Repository:[/bold] {preview.owner}/{preview.repo}",
        f"[bold]Fingerprint:[/bold] {preview.fingerprint}",
    ]

    if preview.would_create:
        content.append("[green]+[/green] Would create a new issue")
    else:
        content.append(f"[yellow]↺[/yellow] Would reuse issue #{preview.issue_number}")
        if preview.would_update:
            content.append("[blue]✎[/blue] Would post an update comment")
        else:
            content.append("[dim]No update comment due[/dim]")

    panel = Panel(
        "\n".join(content),
        title="Dry run: message preview",
        border_style="yellow",
    )

    console.print(panel)
