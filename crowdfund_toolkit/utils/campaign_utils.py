"""Campaign display helpers: funding progress and donation status."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from crowdfund_toolkit.campaigns.models import NormalizedCampaign


class DonationStatus(Enum):
    """Whether a campaign can currently receive donations."""

    OPEN = "Accepting donations"
    CLAIMED = "Campaign funds claimed"
    AWAITING_CLAIM = "Campaign deadline passed, awaiting claim"


def get_progress_percentage(campaign: NormalizedCampaign) -> Decimal:
    """
    Collected amount as a percentage of the target, capped at 100.

    Computed from the exact decimal strings; a zero target counts as
    fully funded.
    """
    target = Decimal(campaign.target)
    collected = Decimal(campaign.amount_collected)
    if target <= 0:
        return Decimal(100)
    return min(collected / target * 100, Decimal(100))


def get_donation_status(
    campaign: NormalizedCampaign, now: Optional[datetime] = None
) -> DonationStatus:
    """Classify a campaign; donations are open until claim or deadline."""
    now = now or datetime.now(timezone.utc)
    if campaign.claimed:
        return DonationStatus.CLAIMED
    if now >= campaign.deadline:
        return DonationStatus.AWAITING_CLAIM
    return DonationStatus.OPEN


def accepts_donations(
    campaign: NormalizedCampaign, now: Optional[datetime] = None
) -> bool:
    return get_donation_status(campaign, now) is DonationStatus.OPEN
