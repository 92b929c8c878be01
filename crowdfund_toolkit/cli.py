#!/usr/bin/env python3
"""
Unified CLI for Crowdfund Toolkit.

Examples:
  - Campaigns
    crowdfund campaigns-list
    crowdfund campaigns-list --json --output campaigns.json

  - Actions
    crowdfund donate --campaign-id 3 --amount 0.5
    crowdfund deactivate --campaign-id 7 [--yes]

Settings are read from the environment (or a .env file):
CROWDFUND_RPC_URL, CROWDFUND_CONTRACT_ADDRESS, CROWDFUND_PRIVATE_KEY.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich.markup import escape
from rich.prompt import Confirm

from crowdfund_toolkit.actions.state import ActionKind
from crowdfund_toolkit.campaigns.controller import CampaignListController
from crowdfund_toolkit.commands.validation import (
    validate_campaign_id,
    validate_donation_amount,
)
from crowdfund_toolkit.shared.logging import set_log_level
from crowdfund_toolkit.shared.services.http_client import aclose_async_client
from crowdfund_toolkit.utils.formatters import (
    add_campaign_to_table,
    console,
    create_campaigns_table,
    generate_timestamped_filename,
    save_json_output,
)

_IN_PROGRESS_LABELS = {
    ActionKind.DONATE: "Donating",
    ActionKind.DEACTIVATE: "Deleting",
}


def notify_failure(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def confirm_prompt(message: str) -> bool:
    return Confirm.ask(message, default=False)


def build_controller(assume_yes: bool = False) -> CampaignListController:
    confirm = (lambda _message: True) if assume_yes else confirm_prompt
    return CampaignListController(notify=notify_failure, confirm=confirm)


def render_campaigns(controller: CampaignListController) -> None:
    state = controller.state
    if state.error:
        console.print(
            f"[red]Error:[/red] {escape(state.error)} (rerun to retry)"
        )
        return

    if not state.campaigns:
        console.print("No active campaigns yet!")
        return

    table = create_campaigns_table()
    for campaign in state.campaigns:
        in_progress = None
        for kind, label in _IN_PROGRESS_LABELS.items():
            if controller.action_state.is_in_progress(kind, campaign.id):
                in_progress = label
        add_campaign_to_table(table, campaign, in_progress)
    console.print(table)

    summary = controller.last_summary
    if summary and summary.dropped:
        console.print(
            f"[dim]{summary.dropped} campaign(s) could not be processed[/dim]"
        )


async def _with_client_cleanup(coro):
    try:
        return await coro
    finally:
        await aclose_async_client()


def cmd_campaigns_list(args: argparse.Namespace) -> int:
    controller = build_controller()

    async def run() -> None:
        with console.status("Loading campaigns..."):
            await controller.refresh()

    asyncio.run(_with_client_cleanup(run()))

    if args.json and not controller.error:
        filename = args.output or generate_timestamped_filename("campaigns")
        payload = {"campaigns": [c.to_dict() for c in controller.campaigns]}
        if controller.last_summary:
            payload["summary"] = controller.last_summary.to_dict()
        save_json_output(payload, filename)
        return 0

    render_campaigns(controller)
    return 1 if controller.error else 0


def cmd_donate(args: argparse.Namespace) -> int:
    campaign_id = validate_campaign_id(args.campaign_id)
    amount = validate_donation_amount(args.amount)
    controller = build_controller()

    async def run() -> bool:
        status = f"Donating {amount} ETH to campaign #{campaign_id}..."
        with console.status(status):
            return await controller.donate(campaign_id, amount)

    ok = asyncio.run(_with_client_cleanup(run()))
    if ok:
        console.print(
            f"[green]Donated {amount} ETH to campaign #{campaign_id}[/green]"
        )
        render_campaigns(controller)
    return 0 if ok else 1


def cmd_deactivate(args: argparse.Namespace) -> int:
    campaign_id = validate_campaign_id(args.campaign_id)
    controller = build_controller(assume_yes=args.yes)

    ok = asyncio.run(_with_client_cleanup(controller.deactivate(campaign_id)))
    if ok:
        console.print(f"[green]Campaign #{campaign_id} deactivated[/green]")
        render_campaigns(controller)
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crowdfund",
        description="Unified CLI for Crowdfund Toolkit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override CROWDFUND_LOG_LEVEL",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # campaigns-list
    p_cl = sub.add_parser("campaigns-list", help="List active campaigns")
    p_cl.add_argument("--json", action="store_true", help="Output JSON")
    p_cl.add_argument("--output", type=str, help="Output filename")
    p_cl.set_defaults(func=cmd_campaigns_list)

    # donate
    p_do = sub.add_parser("donate", help="Donate ETH to a campaign")
    p_do.add_argument("--campaign-id", type=int, required=True)
    p_do.add_argument("--amount", type=str, required=True, help="ETH amount")
    p_do.set_defaults(func=cmd_donate)

    # deactivate
    p_de = sub.add_parser("deactivate", help="Deactivate a campaign")
    p_de.add_argument("--campaign-id", type=int, required=True)
    p_de.add_argument(
        "--yes", action="store_true", help="Skip the confirmation prompt"
    )
    p_de.set_defaults(func=cmd_deactivate)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_log_level(args.log_level)
    try:
        exit_code = args.func(args)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
