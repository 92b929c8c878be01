"""
Type definitions for crowdfunding campaigns.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, TypedDict

from crowdfund_toolkit.shared.results import ReconciliationSummary

# Positional layout of the on-chain Campaign struct
CAMPAIGN_STRUCT_FIELDS = (
    "owner",
    "metadataHash",
    "target",
    "deadline",
    "amountCollected",
    "claimed",
    "isActive",
)

# =============================================================================
# TYPED DICTS (for JSON serialization)
# =============================================================================


class CampaignDict(TypedDict):
    """Normalized campaign dictionary for JSON export."""

    id: int
    owner: str
    target: str
    amount_collected: str
    deadline: str  # ISO 8601, UTC
    claimed: bool
    is_active: bool
    title: str
    description: str
    image: str


# =============================================================================
# DATACLASSES
# =============================================================================


def _as_amount(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class RawCampaign:
    """Campaign record as stored on-chain. Amounts are in wei."""

    owner: str
    target: int
    amount_collected: int
    deadline: int  # Unix seconds
    claimed: bool
    is_active: bool
    metadata_hash: str  # ipfs:// URI or bare hash

    @classmethod
    def from_chain(cls, entry: Any) -> "RawCampaign":
        """
        Decode a contract struct entry.

        Accepts an existing RawCampaign, a mapping keyed by struct field
        names, or a tuple in struct order.
        """
        if isinstance(entry, RawCampaign):
            return entry

        if isinstance(entry, Mapping):
            values = {name: entry[name] for name in CAMPAIGN_STRUCT_FIELDS}
        else:
            entry = tuple(entry)
            if len(entry) != len(CAMPAIGN_STRUCT_FIELDS):
                raise ValueError(
                    f"Expected {len(CAMPAIGN_STRUCT_FIELDS)} campaign fields, "
                    f"got {len(entry)}"
                )
            values = dict(zip(CAMPAIGN_STRUCT_FIELDS, entry))

        return cls(
            owner=str(values["owner"]),
            target=_as_amount(values["target"], "target"),
            amount_collected=_as_amount(
                values["amountCollected"], "amountCollected"
            ),
            deadline=_as_amount(values["deadline"], "deadline"),
            claimed=bool(values["claimed"]),
            is_active=bool(values["isActive"]),
            metadata_hash=values["metadataHash"] or "",
        )

    @property
    def deadline_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.deadline, tz=timezone.utc)


@dataclass(frozen=True)
class NormalizedCampaign:
    """
    UI-ready campaign combining on-chain fields with IPFS metadata.

    Rebuilt on every reconciliation pass; ``id`` is the ledger index and is
    only stable within one pass.
    """

    id: int
    owner: str
    target: str  # Ether, exact decimal string
    amount_collected: str  # Ether, exact decimal string
    deadline: datetime  # UTC
    claimed: bool
    is_active: bool
    title: str
    description: str
    image: str  # "" or an absolute URL

    def to_dict(self) -> CampaignDict:
        return {
            "id": self.id,
            "owner": self.owner,
            "target": self.target,
            "amount_collected": self.amount_collected,
            "deadline": self.deadline.isoformat(),
            "claimed": self.claimed,
            "is_active": self.is_active,
            "title": self.title,
            "description": self.description,
            "image": self.image,
        }


@dataclass
class ReconciliationResult:
    """Output of one reconciliation pass."""

    campaigns: List[NormalizedCampaign]
    summary: ReconciliationSummary = field(
        default_factory=ReconciliationSummary
    )

    def by_id(self) -> Dict[int, NormalizedCampaign]:
        return {c.id: c for c in self.campaigns}

    def get(self, campaign_id: int) -> Optional[NormalizedCampaign]:
        return self.by_id().get(campaign_id)
