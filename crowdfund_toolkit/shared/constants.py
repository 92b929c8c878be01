"""All constants for the project"""

import os
from typing import Optional, Tuple

from dotenv import load_dotenv

from crowdfund_toolkit.shared.exceptions import ConfigurationException

load_dotenv()


def _split_env_list(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class IpfsConstants:
    """IPFS gateway related constants"""

    SCHEME = "ipfs://"

    # Tried in order; the first gateway answering with a 2xx wins
    DEFAULT_GATEWAYS = (
        "https://gateway.pinata.cloud/ipfs/",
        "https://cloudflare-ipfs.com/ipfs/",
        "https://ipfs.io/ipfs/",
    )

    DEFAULT_CANONICAL_GATEWAY = "https://gateway.pinata.cloud/ipfs/"

    @staticmethod
    def get_gateways() -> Tuple[str, ...]:
        """Get the ordered gateway list, overridable via env"""
        gateways = _split_env_list(os.getenv("CROWDFUND_IPFS_GATEWAYS"))
        if not gateways:
            return IpfsConstants.DEFAULT_GATEWAYS
        if len(set(gateways)) < 2:
            raise ConfigurationException(
                "CROWDFUND_IPFS_GATEWAYS needs at least two distinct gateways"
            )
        return gateways

    @staticmethod
    def get_canonical_gateway() -> str:
        """Get the gateway used to rewrite ipfs:// image references"""
        return (
            os.getenv("CROWDFUND_CANONICAL_GATEWAY")
            or IpfsConstants.DEFAULT_CANONICAL_GATEWAY
        )


class CampaignConstants:
    """Display placeholders for campaign metadata"""

    UNAVAILABLE_TITLE = "Unable to load campaign title"
    UNAVAILABLE_DESCRIPTION = "Unable to load campaign description"
    DEFAULT_TITLE = "Untitled Campaign"
    DEFAULT_DESCRIPTION = "No description available"

    DEACTIVATE_PROMPT = "Are you sure you want to deactivate this campaign?"

    MAX_CONCURRENT_FETCHES = int(
        os.getenv("CROWDFUND_MAX_CONCURRENT_FETCHES", "16")
    )


class GlobalConstants:
    """Global class constants for the project"""

    ETHER_DECIMALS = 18

    CHAIN_ID = int(os.getenv("CROWDFUND_CHAIN_ID", "1"))
    TX_TIMEOUT = float(os.getenv("CROWDFUND_TX_TIMEOUT", "120"))

    @staticmethod
    def get_rpc_url() -> str:
        """Get RPC URL for the configured chain"""
        rpc_url = os.getenv("CROWDFUND_RPC_URL")
        if not rpc_url:
            raise ConfigurationException("CROWDFUND_RPC_URL is not set")
        return rpc_url

    @staticmethod
    def get_contract_address() -> str:
        """Get the crowdfunding contract address"""
        address = os.getenv("CROWDFUND_CONTRACT_ADDRESS")
        if not address:
            raise ConfigurationException(
                "CROWDFUND_CONTRACT_ADDRESS is not set"
            )
        return address

    @staticmethod
    def get_private_key() -> Optional[str]:
        """Get the signing key; None means read-only access"""
        return os.getenv("CROWDFUND_PRIVATE_KEY") or None
