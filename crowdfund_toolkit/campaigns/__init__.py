"""Campaign reconciliation module for Crowdfund toolkit."""

from .controller import CampaignListController, CampaignListState
from .models import NormalizedCampaign, RawCampaign, ReconciliationResult
from .reconciler import CampaignReconciler

__all__ = [
    "CampaignListController",
    "CampaignListState",
    "CampaignReconciler",
    "NormalizedCampaign",
    "RawCampaign",
    "ReconciliationResult",
]
