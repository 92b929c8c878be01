"""Crowdfund Toolkit - campaign listing and actions for a crowdfunding contract."""

__version__ = "1.0.0"

from .actions import ActionCoordinator
from .campaigns import CampaignListController, CampaignReconciler
from .metadata import MetadataFetcher

__all__ = [
    "ActionCoordinator",
    "CampaignListController",
    "CampaignReconciler",
    "MetadataFetcher",
]
