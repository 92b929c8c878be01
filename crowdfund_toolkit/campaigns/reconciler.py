"""
CampaignReconciler - Merge on-chain campaigns with IPFS metadata

One reconciliation pass:
1. Obtains a ledger client (ClientUnavailable if it cannot be built)
2. Reads the full raw campaign set (LedgerError if the read fails)
3. Fans out one task per campaign: inactive entries are skipped, active
   ones resolve their metadata and are normalized
4. Settles all tasks, then keeps successful records in ledger order

Per-campaign failures never abort the batch: the campaign is dropped and
the error is recorded in the pass summary. Only steps 1-2 raise.
"""

import asyncio
from typing import Any, Dict, Optional

from crowdfund_toolkit.campaigns.models import (
    NormalizedCampaign,
    RawCampaign,
    ReconciliationResult,
)
from crowdfund_toolkit.ledger.client import (
    ClientProvider,
    get_ledger_client,
    obtain_client,
)
from crowdfund_toolkit.metadata.fetcher import (
    MetadataFetcher,
    resolve_image_url,
)
from crowdfund_toolkit.shared.constants import CampaignConstants
from crowdfund_toolkit.shared.exceptions import LedgerError
from crowdfund_toolkit.shared.logging import get_logger
from crowdfund_toolkit.shared.results import Result, ReconciliationSummary
from crowdfund_toolkit.utils.units import format_ether

_logger = get_logger(__name__)


def _field_or_default(metadata: Dict[str, Any], key: str, default: str) -> str:
    value = metadata.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return default


def normalize_campaign(
    index: int,
    raw: RawCampaign,
    metadata: Optional[Dict[str, Any]],
    canonical_gateway: Optional[str] = None,
) -> NormalizedCampaign:
    """
    Build the display record for one active campaign.

    Without metadata the record is degraded to the "unable to load"
    placeholders and an empty image; on-chain fields are always kept.
    """
    if metadata is None:
        title = CampaignConstants.UNAVAILABLE_TITLE
        description = CampaignConstants.UNAVAILABLE_DESCRIPTION
        image = ""
    else:
        title = _field_or_default(
            metadata, "title", CampaignConstants.DEFAULT_TITLE
        )
        description = _field_or_default(
            metadata, "description", CampaignConstants.DEFAULT_DESCRIPTION
        )
        image = resolve_image_url(metadata.get("image"), canonical_gateway)

    return NormalizedCampaign(
        id=index,
        owner=raw.owner,
        target=format_ether(raw.target),
        amount_collected=format_ether(raw.amount_collected),
        deadline=raw.deadline_datetime,
        claimed=raw.claimed,
        is_active=raw.is_active,
        title=title,
        description=description,
        image=image,
    )


class CampaignReconciler:
    """
    Produces the displayed campaign set from ledger and IPFS data.

    Attributes:
        client_provider: Async callable returning a LedgerClient
        fetcher: MetadataFetcher used for every campaign
        canonical_gateway: Gateway used to rewrite ipfs:// images
        max_concurrency: Upper bound on simultaneous metadata fetches
    """

    def __init__(
        self,
        client_provider: ClientProvider = get_ledger_client,
        fetcher: Optional[MetadataFetcher] = None,
        canonical_gateway: Optional[str] = None,
        max_concurrency: int = CampaignConstants.MAX_CONCURRENT_FETCHES,
    ):
        self.client_provider = client_provider
        self.fetcher = fetcher or MetadataFetcher()
        self.canonical_gateway = canonical_gateway
        self.max_concurrency = max(1, max_concurrency)

    async def reconcile(self) -> ReconciliationResult:
        """
        Run one full reconciliation pass.

        Returns:
            ReconciliationResult with active campaigns in ledger order

        Raises:
            ClientUnavailable: If no ledger client could be obtained
            LedgerError: If the raw campaign set could not be read
        """
        client = await obtain_client(self.client_provider)

        _logger.info("Fetching active campaigns...")
        try:
            entries = list(await client.get_active_campaigns())
        except Exception as e:
            raise LedgerError(f"Failed to fetch campaigns: {e}") from e
        _logger.debug(f"Raw campaigns data: {entries}")

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def process(index: int, entry: Any) -> Result[NormalizedCampaign]:
            async with semaphore:
                return await self._process_campaign(index, entry)

        results = await asyncio.gather(
            *(process(i, entry) for i, entry in enumerate(entries))
        )

        summary = ReconciliationSummary()
        campaigns = []
        for result in results:
            summary.add_result(result)
            if result.success and not result.skipped:
                campaigns.append(result.data)

        _logger.info(
            f"Processed {len(campaigns)} active campaigns "
            f"({summary.skipped_inactive} inactive, {summary.degraded} "
            f"degraded, {summary.dropped} dropped)"
        )
        return ReconciliationResult(campaigns=campaigns, summary=summary)

    async def _process_campaign(
        self, index: int, entry: Any
    ) -> Result[NormalizedCampaign]:
        try:
            raw = RawCampaign.from_chain(entry)
            if not raw.is_active:
                _logger.debug(f"Campaign {index} is inactive, skipping")
                return Result.skip()

            metadata = await self.fetcher.fetch(raw.metadata_hash)
            campaign = normalize_campaign(
                index, raw, metadata, self.canonical_gateway
            )
        except Exception as e:
            _logger.error(f"Error processing campaign {index}: {e}")
            return Result.fail_with_message(
                source="reconciler",
                message=f"Error processing campaign {index}: {e}",
                context={"campaign_id": index},
                exception=e,
            )

        result = Result.ok(campaign)
        if metadata is None:
            _logger.warning(f"Failed to fetch IPFS data for campaign {index}")
            result.add_warning(
                source="metadata",
                message=f"Metadata unavailable for campaign {index}",
                context={"campaign_id": index},
            )
        return result
