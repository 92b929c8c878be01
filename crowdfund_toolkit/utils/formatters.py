"""Shared formatting and file utilities for commands."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from crowdfund_toolkit.campaigns.models import NormalizedCampaign
from crowdfund_toolkit.utils.campaign_utils import (
    DonationStatus,
    get_donation_status,
    get_progress_percentage,
)

# Shared console instance
console = Console()


def format_address(address: str) -> str:
    """
    Abbreviate an Ethereum address for display.

    Args:
        address: Ethereum address

    Returns:
        Formatted address like "0x12....................abcd"
    """
    if not address:
        return "N/A"
    if len(address) < 42:
        return address
    return f"{address[:4]}....................{address[38:42]}"


def format_timestamp(value: datetime, format_str: str = "%Y-%m-%d") -> str:
    """Format a datetime to a readable date string."""
    return value.strftime(format_str)


def save_json_output(
    data: Dict[str, Any],
    filename: str,
    output_dir: str = "output",
    print_path: bool = True,
) -> str:
    """
    Save data to a JSON file with automatic directory creation.

    Args:
        data: Data to save
        filename: Output filename (can include subdirectories)
        output_dir: Base output directory (default: 'output')
        print_path: Whether to print the saved file path

    Returns:
        Full path to saved file
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filepath = output_path / filename
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)

    if print_path:
        console.print(f"[cyan]Data saved to:[/cyan] {escape(str(filepath))}")

    return str(filepath)


def generate_timestamped_filename(prefix: str, extension: str = "json") -> str:
    """
    Generate a filename with timestamp.

    Returns:
        Filename like "prefix_20240315_123456.json"
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{extension}"


_STATUS_STYLES = {
    DonationStatus.OPEN: "green",
    DonationStatus.CLAIMED: "bold green",
    DonationStatus.AWAITING_CLAIM: "red",
}


def format_status_display(
    campaign: NormalizedCampaign,
    in_progress: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Rich-formatted status cell; an in-flight action takes precedence."""
    if in_progress:
        return f"[yellow]{in_progress}...[/yellow]"
    status = get_donation_status(campaign, now)
    style = _STATUS_STYLES[status]
    return f"[{style}]{status.value}[/{style}]"


def create_campaigns_table() -> Table:
    """
    Create a Rich table with standard campaign columns.

    Returns:
        Configured Rich Table for campaign display
    """
    table = Table(
        title="Active Campaigns",
        show_header=True,
        header_style="bold cyan",
        show_lines=False,
        pad_edge=False,
        box=None,
    )
    table.add_column("ID", width=4, justify="right")
    table.add_column("Title", max_width=28)
    table.add_column("Target (ETH)", justify="right")
    table.add_column("Collected (ETH)", justify="right")
    table.add_column("Progress", width=8, justify="right")
    table.add_column("Deadline", width=10)
    table.add_column("Owner", width=30)
    table.add_column("Status")
    return table


def add_campaign_to_table(
    table: Table,
    campaign: NormalizedCampaign,
    in_progress: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """Add a campaign row to the campaigns table."""
    progress = get_progress_percentage(campaign)

    table.add_row(
        str(campaign.id),
        escape(campaign.title),
        campaign.target,
        campaign.amount_collected,
        f"{progress:.1f}%",
        format_timestamp(campaign.deadline),
        escape(format_address(campaign.owner)),
        format_status_display(campaign, in_progress, now),
    )
