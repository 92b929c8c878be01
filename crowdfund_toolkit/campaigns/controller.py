"""
Session state for the campaign list.

CampaignListController owns what the presentation layer renders: the
current campaign set, a loading flag, an error message (the retry
affordance) and the per-campaign action flags.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from crowdfund_toolkit.actions.coordinator import (
    ActionCoordinator,
    Confirmer,
    Notifier,
)
from crowdfund_toolkit.actions.state import ActionState
from crowdfund_toolkit.campaigns.models import NormalizedCampaign
from crowdfund_toolkit.campaigns.reconciler import CampaignReconciler
from crowdfund_toolkit.ledger.client import ClientProvider, get_ledger_client
from crowdfund_toolkit.metadata.fetcher import MetadataFetcher
from crowdfund_toolkit.shared.exceptions import FetchError
from crowdfund_toolkit.shared.logging import get_logger
from crowdfund_toolkit.shared.results import ReconciliationSummary

_logger = get_logger(__name__)


@dataclass
class CampaignListState:
    """Snapshot exposed to the presentation layer."""

    campaigns: List[NormalizedCampaign] = field(default_factory=list)
    loading: bool = False
    error: str = ""
    action_state: Dict[str, Dict[int, bool]] = field(
        default_factory=lambda: {"donate": {}, "deactivate": {}}
    )


class CampaignListController:
    """
    Wires reconciliation and actions together for one user session.

    The campaign set is always replaced wholesale; when several refreshes
    overlap, the last one to complete wins.
    """

    def __init__(
        self,
        notify: Notifier,
        confirm: Confirmer,
        client_provider: ClientProvider = get_ledger_client,
        fetcher: Optional[MetadataFetcher] = None,
        reconciler: Optional[CampaignReconciler] = None,
    ):
        self.reconciler = reconciler or CampaignReconciler(
            client_provider=client_provider, fetcher=fetcher
        )
        self.action_state = ActionState()
        self.coordinator = ActionCoordinator(
            refresh=self.refresh,
            notify=notify,
            confirm=confirm,
            client_provider=client_provider,
            state=self.action_state,
        )

        self.campaigns: List[NormalizedCampaign] = []
        self.loading = False
        self.error = ""
        self.last_summary: Optional[ReconciliationSummary] = None

    @property
    def state(self) -> CampaignListState:
        return CampaignListState(
            campaigns=list(self.campaigns),
            loading=self.loading,
            error=self.error,
            action_state=self.action_state.snapshot(),
        )

    async def refresh(self) -> None:
        """Reconcile and publish the result; errors land in ``error``."""
        self.loading = True
        self.error = ""
        try:
            result = await self.reconciler.reconcile()
            self.campaigns = result.campaigns
            self.last_summary = result.summary
        except FetchError as e:
            _logger.error(f"Error fetching campaigns: {e.message}")
            self.error = e.message or "Failed to fetch campaigns"
        except Exception as e:
            _logger.exception("Unexpected error fetching campaigns")
            self.error = str(e) or "Failed to fetch campaigns"
        finally:
            self.loading = False

    async def donate(self, campaign_id: int, amount: str) -> bool:
        return await self.coordinator.donate(campaign_id, amount)

    async def deactivate(self, campaign_id: int) -> bool:
        return await self.coordinator.deactivate(campaign_id)
