"""
Ledger client for the CrowdFunding contract.

Defines the interface the reconciliation pipeline and the action workflow
consume, plus a web3.py-backed implementation. Blocking RPC calls run in the
default executor so they never stall the event loop.
"""

import asyncio
from abc import ABC, abstractmethod
from functools import partial
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
)

from eth_account import Account
from web3 import Web3

from crowdfund_toolkit.shared.constants import GlobalConstants
from crowdfund_toolkit.shared.exceptions import (
    ClientUnavailable,
    ConfigurationException,
    TransactionError,
)
from crowdfund_toolkit.shared.logging import get_logger
from crowdfund_toolkit.shared.services.resource_manager import (
    resource_manager,
)

_logger = get_logger(__name__)

CONTRACT_ABI_NAME = "crowdfunding"


class TransactionHandle(ABC):
    """A submitted, not yet confirmed transaction."""

    tx_hash: str

    @abstractmethod
    async def wait(self) -> Dict[str, Any]:
        """Wait for one confirmation; raise TransactionError on failure."""


class LedgerClient(ABC):
    """Read/write access to on-chain campaign state."""

    @abstractmethod
    async def get_active_campaigns(self) -> Sequence[Any]:
        """
        Return the raw campaign entries in ledger order.

        Despite the name, entries may include inactive campaigns.
        """

    @abstractmethod
    async def donate_to_campaign(
        self, campaign_id: int, value: int
    ) -> TransactionHandle:
        """Submit a donation of ``value`` wei."""

    @abstractmethod
    async def delete_campaign(self, campaign_id: int) -> TransactionHandle:
        """Submit a campaign deactivation."""


async def _run_blocking(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


class Web3TransactionHandle(TransactionHandle):
    """Transaction handle backed by ``eth.wait_for_transaction_receipt``."""

    def __init__(self, w3: Web3, tx_hash: str, timeout: float):
        self.w3 = w3
        self.tx_hash = tx_hash
        self.timeout = timeout

    async def wait(self) -> Dict[str, Any]:
        try:
            receipt = await _run_blocking(
                self.w3.eth.wait_for_transaction_receipt,
                self.tx_hash,
                timeout=self.timeout,
            )
        except Exception as e:
            raise TransactionError(
                f"Confirmation failed for {self.tx_hash}: {e}",
                tx_hash=self.tx_hash,
            ) from e

        if receipt.get("status") == 0:
            raise TransactionError(
                f"Transaction {self.tx_hash} reverted", tx_hash=self.tx_hash
            )

        _logger.info(
            f"Transaction {self.tx_hash} confirmed in block "
            f"{receipt.get('blockNumber')}"
        )
        return dict(receipt)


class Web3LedgerClient(LedgerClient):
    """
    LedgerClient talking to the CrowdFunding contract through web3.py.

    Attributes:
        w3: Web3 instance
        contract: Bound contract instance
        account: Local signing account, None for read-only access
        tx_timeout: Seconds to wait for a receipt
    """

    def __init__(
        self,
        w3: Web3,
        contract: Any,
        account: Optional[Any] = None,
        tx_timeout: float = GlobalConstants.TX_TIMEOUT,
    ):
        self.w3 = w3
        self.contract = contract
        self.account = account
        self.tx_timeout = tx_timeout

    @classmethod
    def from_settings(
        cls,
        rpc_url: Optional[str] = None,
        contract_address: Optional[str] = None,
        private_key: Optional[str] = None,
        chain_id: int = GlobalConstants.CHAIN_ID,
    ) -> "Web3LedgerClient":
        """Build a client from explicit values or environment settings."""
        w3 = Web3(Web3.HTTPProvider(rpc_url or GlobalConstants.get_rpc_url()))

        # Add POA middleware for non-mainnet chains
        if chain_id != 1:
            from web3.middleware import ExtraDataToPOAMiddleware

            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        address = contract_address or GlobalConstants.get_contract_address()
        if not Web3.is_address(address):
            raise ConfigurationException(
                f"Invalid contract address: {address}"
            )

        contract = w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=resource_manager.load_abi(CONTRACT_ABI_NAME),
        )

        key = private_key or GlobalConstants.get_private_key()
        account = Account.from_key(key) if key else None
        return cls(w3, contract, account)

    async def get_active_campaigns(self) -> List[Any]:
        return list(
            await _run_blocking(
                self.contract.functions.getActiveCampaigns().call
            )
        )

    async def donate_to_campaign(
        self, campaign_id: int, value: int
    ) -> TransactionHandle:
        fn = self.contract.functions.donateToCampaign(campaign_id)
        return await self._send(fn, value=value)

    async def delete_campaign(self, campaign_id: int) -> TransactionHandle:
        fn = self.contract.functions.deleteCampaign(campaign_id)
        return await self._send(fn)

    async def _send(self, fn: Any, value: int = 0) -> TransactionHandle:
        if self.account is None:
            raise TransactionError(
                "No signing key configured (set CROWDFUND_PRIVATE_KEY)"
            )

        try:
            tx_hash = await _run_blocking(self._sign_and_send, fn, value)
        except TransactionError:
            raise
        except Exception as e:
            raise TransactionError(f"Transaction rejected: {e}") from e

        _logger.info(f"Submitted transaction {tx_hash}")
        return Web3TransactionHandle(self.w3, tx_hash, self.tx_timeout)

    def _sign_and_send(self, fn: Any, value: int) -> str:
        address = self.account.address
        tx = fn.build_transaction(
            {
                "from": address,
                "value": value,
                "nonce": self.w3.eth.get_transaction_count(address),
            }
        )
        signed = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)


async def get_ledger_client() -> LedgerClient:
    """Default client provider built from environment settings."""
    return await _run_blocking(Web3LedgerClient.from_settings)


ClientProvider = Callable[[], Awaitable[Optional[LedgerClient]]]


async def obtain_client(client_provider: ClientProvider) -> LedgerClient:
    """Await the provider, mapping every failure to ClientUnavailable."""
    try:
        client = await client_provider()
    except Exception as e:
        raise ClientUnavailable(f"Failed to load contract: {e}") from e
    if client is None:
        raise ClientUnavailable("Failed to load contract")
    return client
