"""
Unit tests for the web3-backed ledger client.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from crowdfund_toolkit.ledger.client import (
    Web3LedgerClient,
    Web3TransactionHandle,
    obtain_client,
)
from crowdfund_toolkit.shared.exceptions import (
    ClientUnavailable,
    ConfigurationException,
    TransactionError,
)
from crowdfund_toolkit.shared.services.resource_manager import (
    resource_manager,
)
from tests.fakes import FakeLedgerClient, make_raw_campaign, provider_for


@pytest.fixture
def mock_w3():
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.send_raw_transaction.return_value = bytes.fromhex("12" * 32)
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "blockNumber": 100,
    }
    return w3


@pytest.fixture
def mock_contract():
    contract = MagicMock()
    contract.functions.getActiveCampaigns.return_value.call.return_value = [
        make_raw_campaign("a"),
        make_raw_campaign("b", is_active=False),
    ]
    fn = MagicMock()
    fn.build_transaction.side_effect = lambda params: dict(params, to="0xc")
    contract.functions.donateToCampaign.return_value = fn
    contract.functions.deleteCampaign.return_value = fn
    return contract


@pytest.fixture
def mock_account():
    account = MagicMock()
    account.address = "0x52f541764E6e90eeBc5c21Ff570De0e2D63766B6"
    account.sign_transaction.return_value.raw_transaction = b"\x01\x02"
    return account


class TestWeb3LedgerClient:
    @pytest.mark.asyncio
    async def test_reads_all_entries(self, mock_w3, mock_contract):
        client = Web3LedgerClient(mock_w3, mock_contract)

        entries = await client.get_active_campaigns()

        assert entries == [
            make_raw_campaign("a"),
            make_raw_campaign("b", is_active=False),
        ]

    @pytest.mark.asyncio
    async def test_donation_is_signed_and_sent(
        self, mock_w3, mock_contract, mock_account
    ):
        client = Web3LedgerClient(mock_w3, mock_contract, mock_account)

        handle = await client.donate_to_campaign(3, 5 * 10**17)

        mock_contract.functions.donateToCampaign.assert_called_once_with(3)
        tx = mock_account.sign_transaction.call_args[0][0]
        assert tx["value"] == 5 * 10**17
        assert tx["nonce"] == 7
        assert tx["from"] == mock_account.address
        mock_w3.eth.send_raw_transaction.assert_called_once_with(b"\x01\x02")
        assert handle.tx_hash == "0x" + "12" * 32

    @pytest.mark.asyncio
    async def test_delete_sends_zero_value(
        self, mock_w3, mock_contract, mock_account
    ):
        client = Web3LedgerClient(mock_w3, mock_contract, mock_account)

        await client.delete_campaign(7)

        mock_contract.functions.deleteCampaign.assert_called_once_with(7)
        assert mock_account.sign_transaction.call_args[0][0]["value"] == 0

    @pytest.mark.asyncio
    async def test_write_without_key_fails(self, mock_w3, mock_contract):
        client = Web3LedgerClient(mock_w3, mock_contract)

        with pytest.raises(TransactionError, match="signing key"):
            await client.delete_campaign(1)

    @pytest.mark.asyncio
    async def test_rejected_submission_is_transaction_error(
        self, mock_w3, mock_contract, mock_account
    ):
        mock_w3.eth.send_raw_transaction.side_effect = ValueError(
            "insufficient funds for gas"
        )
        client = Web3LedgerClient(mock_w3, mock_contract, mock_account)

        with pytest.raises(TransactionError, match="insufficient funds"):
            await client.donate_to_campaign(1, 1)

    def test_invalid_contract_address(self):
        with pytest.raises(ConfigurationException):
            Web3LedgerClient.from_settings(
                rpc_url="http://localhost:8545",
                contract_address="not-an-address",
            )


class TestWeb3TransactionHandle:
    @pytest.mark.asyncio
    async def test_wait_returns_receipt(self, mock_w3):
        handle = Web3TransactionHandle(mock_w3, "0xabc", timeout=5)

        receipt = await handle.wait()

        assert receipt["status"] == 1
        mock_w3.eth.wait_for_transaction_receipt.assert_called_once_with(
            "0xabc", timeout=5
        )

    @pytest.mark.asyncio
    async def test_reverted_receipt_raises(self, mock_w3):
        mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}
        handle = Web3TransactionHandle(mock_w3, "0xabc", timeout=5)

        with pytest.raises(TransactionError, match="reverted") as exc_info:
            await handle.wait()

        assert exc_info.value.tx_hash == "0xabc"

    @pytest.mark.asyncio
    async def test_wait_timeout_raises(self, mock_w3):
        mock_w3.eth.wait_for_transaction_receipt.side_effect = TimeoutError(
            "not mined"
        )
        handle = Web3TransactionHandle(mock_w3, "0xabc", timeout=5)

        with pytest.raises(TransactionError, match="not mined"):
            await handle.wait()


class TestObtainClient:
    @pytest.mark.asyncio
    async def test_returns_client(self):
        ledger = FakeLedgerClient()
        assert await obtain_client(provider_for(ledger)) is ledger

    @pytest.mark.asyncio
    async def test_none_is_unavailable(self):
        with pytest.raises(ClientUnavailable):
            await obtain_client(provider_for(None))

    @pytest.mark.asyncio
    async def test_provider_error_is_unavailable(self):
        provider = AsyncMock(side_effect=ConfigurationException("no rpc"))

        with pytest.raises(ClientUnavailable, match="no rpc"):
            await obtain_client(provider)


def test_contract_abi_is_packaged():
    abi = resource_manager.load_abi("crowdfunding")

    names = {entry["name"] for entry in abi}
    assert names == {"getActiveCampaigns", "donateToCampaign", "deleteCampaign"}
