"""
MetadataFetcher - Resilient IPFS metadata retrieval

Campaign descriptions live off-chain as JSON documents on IPFS. Public
gateways are individually unreliable, so each document is requested from an
ordered list of gateways:

1. Gateways are tried strictly one at a time, in order
2. A non-2xx status or a transport error moves on to the next gateway
3. The first successful response is parsed and returned immediately

Failures are logged and reported as ``None`` ("metadata unavailable"),
never raised to the caller.
"""

import json
from typing import Any, Dict, Optional, Sequence

import httpx

from crowdfund_toolkit.shared.constants import IpfsConstants
from crowdfund_toolkit.shared.exceptions import (
    MalformedMetadata,
    MetadataUnavailable,
)
from crowdfund_toolkit.shared.logging import get_logger
from crowdfund_toolkit.shared.services.http_client import get_async_client

_logger = get_logger(__name__)

WEB_SCHEMES = ("http://", "https://")


def resolve_url(reference: str, gateway: str) -> str:
    """
    Build the URL used to fetch ``reference`` through ``gateway``.

    Args:
        reference: ipfs:// URI, bare hash, or already-resolved http(s) URL
        gateway: Gateway base URL ending in "/ipfs/"

    Returns:
        Absolute URL
    """
    if reference.startswith(WEB_SCHEMES):
        return reference
    if reference.startswith(IpfsConstants.SCHEME):
        return gateway + reference[len(IpfsConstants.SCHEME) :]
    return f"{gateway}{reference}"


def resolve_image_url(image: Any, gateway: Optional[str] = None) -> str:
    """
    Rewrite a metadata image reference to a displayable URL.

    ipfs:// references and bare hashes go through the single canonical
    gateway (not the fallback list); http(s) URLs pass through.
    Missing or non-string values become "".
    """
    if not isinstance(image, str) or not image.strip():
        return ""
    image = image.strip()
    if image.startswith(WEB_SCHEMES):
        return image
    return resolve_url(image, gateway or IpfsConstants.get_canonical_gateway())


class MetadataFetcher:
    """
    Fetches JSON metadata documents from IPFS with gateway fallback.

    Attributes:
        gateways: Immutable ordered tuple of gateway base URLs
    """

    def __init__(
        self,
        gateways: Optional[Sequence[str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        gateways = tuple(gateways or IpfsConstants.get_gateways())
        if len(set(gateways)) < 2:
            raise ValueError("At least two distinct gateways are required")
        self.gateways = gateways
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_async_client()

    async def fetch(self, reference: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Retrieve and parse the JSON document behind ``reference``.

        Args:
            reference: ipfs:// URI, bare hash, http(s) URL, or empty

        Returns:
            The parsed JSON object, or None when metadata is unavailable
        """
        try:
            return await self._fetch(reference)
        except MetadataUnavailable as e:
            _logger.error(e.message)
            return None

    async def _fetch(self, reference: Optional[str]) -> Dict[str, Any]:
        if not reference or not isinstance(reference, str):
            raise MetadataUnavailable(
                f"Invalid IPFS hash received: {reference!r}"
            )

        last_error: Optional[Exception] = None
        for gateway in self.gateways:
            url = resolve_url(reference, gateway)
            _logger.debug(f"Attempting to fetch from: {url}")

            try:
                response = await self.client.get(url)
                response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                _logger.warning(f"Failed to fetch from {gateway}: {e}")
                last_error = e
                continue

            return self._parse(response, url)

        raise MetadataUnavailable(
            f"All IPFS gateways failed for {reference}. Last error: {last_error}"
        )

    @staticmethod
    def _parse(response: httpx.Response, url: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedMetadata(f"Invalid JSON metadata at {url}: {e}")

        if not isinstance(data, dict):
            raise MalformedMetadata(
                f"Metadata at {url} is not a JSON object "
                f"({type(data).__name__})"
            )

        _logger.debug(f"Successfully fetched metadata from {url}")
        return data
