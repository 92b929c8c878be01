"""
ActionCoordinator - Donate/deactivate workflow for a single campaign

Each action follows the same shape:
1. Mark (action kind, campaign id) as in progress
2. Obtain the ledger client and submit one transaction
3. Wait for one confirmation
4. On success, refresh the campaign list; on failure, notify the user
5. Always clear the in-progress flag

There is no built-in retry: each invocation submits at most one transaction.
"""

from typing import Awaitable, Callable, Optional

from crowdfund_toolkit.actions.state import ActionKind, ActionState
from crowdfund_toolkit.ledger.client import (
    ClientProvider,
    TransactionHandle,
    get_ledger_client,
    obtain_client,
)
from crowdfund_toolkit.shared.constants import CampaignConstants
from crowdfund_toolkit.shared.logging import get_logger
from crowdfund_toolkit.utils.units import parse_ether

_logger = get_logger(__name__)

Notifier = Callable[[str], None]
Confirmer = Callable[[str], bool]


class ActionCoordinator:
    """
    Submits donate/deactivate transactions and tracks their progress.

    Attributes:
        client_provider: Async callable returning a LedgerClient
        refresh: Coroutine function run after a confirmed transaction
        notify: Blocking failure notification shown to the user
        confirm: Blocking yes/no prompt used before deactivation
        state: Shared ActionState with per-id flags
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[object]],
        notify: Notifier,
        confirm: Confirmer,
        client_provider: ClientProvider = get_ledger_client,
        state: Optional[ActionState] = None,
    ):
        self.refresh = refresh
        self.notify = notify
        self.confirm = confirm
        self.client_provider = client_provider
        self.state = state or ActionState()

    async def donate(self, campaign_id: int, amount: str) -> bool:
        """
        Donate ``amount`` ether to a campaign.

        Args:
            campaign_id: Campaign id from the current reconciliation pass
            amount: Positive decimal string, in ether

        Returns:
            True if the donation was confirmed and the list refreshed
        """
        try:
            value = parse_ether(amount)
        except ValueError as e:
            self.notify(str(e))
            return False

        _logger.info(
            f"Initiating donation for campaign {campaign_id}: {amount} ETH"
        )

        async def submit(client) -> TransactionHandle:
            return await client.donate_to_campaign(campaign_id, value)

        return await self._run(
            ActionKind.DONATE, campaign_id, submit, "Failed to donate"
        )

    async def deactivate(self, campaign_id: int) -> bool:
        """
        Deactivate a campaign after explicit user confirmation.

        Returns:
            True if the deactivation was confirmed and the list refreshed;
            False if it failed or the user declined
        """
        if not self.confirm(CampaignConstants.DEACTIVATE_PROMPT):
            _logger.info(f"Deactivation of campaign {campaign_id} declined")
            return False

        _logger.info(f"Initiating campaign deletion for ID: {campaign_id}")

        async def submit(client) -> TransactionHandle:
            return await client.delete_campaign(campaign_id)

        return await self._run(
            ActionKind.DEACTIVATE,
            campaign_id,
            submit,
            "Failed to deactivate campaign",
        )

    async def _run(
        self,
        kind: ActionKind,
        campaign_id: int,
        submit: Callable[..., Awaitable[TransactionHandle]],
        fallback_message: str,
    ) -> bool:
        self.state.start(kind, campaign_id)
        try:
            client = await obtain_client(self.client_provider)
            handle = await submit(client)
            _logger.info(f"{kind.value} transaction: {handle.tx_hash}")

            receipt = await handle.wait()
            _logger.debug(f"{kind.value} receipt: {receipt}")

            await self.refresh()
            return True
        except Exception as e:
            _logger.error(
                f"Error during {kind.value} for campaign {campaign_id}: {e}"
            )
            self.notify(str(e) or fallback_message)
            return False
        finally:
            self.state.finish(kind, campaign_id)
