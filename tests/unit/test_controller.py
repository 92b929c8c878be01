"""
Unit tests for CampaignListController session state.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from crowdfund_toolkit.campaigns.controller import CampaignListController
from crowdfund_toolkit.campaigns.models import ReconciliationResult
from crowdfund_toolkit.metadata.fetcher import MetadataFetcher
from crowdfund_toolkit.shared.exceptions import ClientUnavailable
from tests.fakes import (
    GATEWAYS,
    FakeLedgerClient,
    make_raw_campaign,
    provider_for,
)

GW1 = GATEWAYS[0]


def build_controller(ledger, http_client, confirm_answer=True):
    return CampaignListController(
        notify=MagicMock(),
        confirm=MagicMock(return_value=confirm_answer),
        client_provider=provider_for(ledger),
        fetcher=MetadataFetcher(gateways=GATEWAYS, client=http_client),
    )


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_publishes_campaigns(self, http_client, router):
        router.routes[GW1 + "a"] = (200, {"title": "A"})
        ledger = FakeLedgerClient(
            [make_raw_campaign("a"), make_raw_campaign("b", is_active=False)]
        )
        controller = build_controller(ledger, http_client)

        await controller.refresh()

        state = controller.state
        assert [c.title for c in state.campaigns] == ["A"]
        assert state.loading is False
        assert state.error == ""
        assert state.action_state == {"donate": {}, "deactivate": {}}
        assert controller.last_summary.skipped_inactive == 1

    @pytest.mark.asyncio
    async def test_loading_is_set_during_reconciliation(self, http_client):
        controller = build_controller(FakeLedgerClient(), http_client)
        seen = []

        async def reconcile():
            seen.append(controller.loading)
            return ReconciliationResult(campaigns=[])

        controller.reconciler.reconcile = reconcile

        await controller.refresh()

        assert seen == [True]
        assert controller.loading is False

    @pytest.mark.asyncio
    async def test_pipeline_error_is_exposed_and_list_kept(
        self, http_client, router
    ):
        router.routes[GW1 + "a"] = (200, {"title": "A"})
        controller = build_controller(
            FakeLedgerClient([make_raw_campaign("a")]), http_client
        )
        await controller.refresh()

        controller.reconciler.reconcile = AsyncMock(
            side_effect=ClientUnavailable("Failed to load contract")
        )
        await controller.refresh()

        assert controller.error == "Failed to load contract"
        assert controller.loading is False
        assert [c.title for c in controller.campaigns] == ["A"]

    @pytest.mark.asyncio
    async def test_retry_clears_previous_error(self, http_client, router):
        router.routes[GW1 + "a"] = (200, {"title": "A"})
        controller = build_controller(
            FakeLedgerClient([make_raw_campaign("a")]), http_client
        )
        controller.error = "Failed to fetch campaigns"

        await controller.refresh()

        assert controller.error == ""
        assert len(controller.campaigns) == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_uses_default_message(self, http_client):
        controller = build_controller(FakeLedgerClient(), http_client)
        controller.reconciler.reconcile = AsyncMock(side_effect=RuntimeError())

        await controller.refresh()

        assert controller.error == "Failed to fetch campaigns"


class TestActions:
    @pytest.mark.asyncio
    async def test_donation_triggers_refresh(self, http_client, router):
        router.routes[GW1 + "a"] = (200, {"title": "A"})
        ledger = FakeLedgerClient([make_raw_campaign("a")])
        controller = build_controller(ledger, http_client)

        assert await controller.donate(0, "0.25") is True

        assert ledger.donations == [(0, 25 * 10**16)]
        assert ledger.reads == 1
        assert [c.title for c in controller.campaigns] == ["A"]
        assert controller.state.action_state["donate"] == {0: False}

    @pytest.mark.asyncio
    async def test_failed_donation_leaves_list_unchanged(
        self, http_client, router, failing_handle
    ):
        router.routes[GW1 + "a"] = (200, {"title": "A"})
        ledger = FakeLedgerClient(
            [make_raw_campaign("a")], handle=failing_handle
        )
        controller = build_controller(ledger, http_client)
        await controller.refresh()
        before = list(controller.campaigns)

        assert await controller.donate(3, "0.5") is False

        assert controller.campaigns == before
        assert ledger.reads == 1
        controller.coordinator.notify.assert_called_once_with(
            "Transaction reverted"
        )
        assert controller.state.action_state["donate"] == {3: False}

    @pytest.mark.asyncio
    async def test_declined_deactivation(self, http_client):
        ledger = FakeLedgerClient()
        controller = build_controller(ledger, http_client, confirm_answer=False)

        assert await controller.deactivate(7) is False

        assert ledger.deletions == []
        assert controller.state.action_state == {
            "donate": {},
            "deactivate": {},
        }
