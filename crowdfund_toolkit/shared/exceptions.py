"""
Exception hierarchy for Crowdfund Toolkit.

Exception Categories:
- FetchError: A reconciliation pass cannot reach the ledger at all
- MetadataUnavailable / MalformedMetadata: One campaign's IPFS metadata
  could not be loaded (degrades that campaign, never fatal)
- TransactionError: A donate/deactivate transaction was rejected or reverted
- ConfigurationException: Startup/config errors that prevent operation
"""


class CrowdfundException(Exception):
    """Base class for all toolkit exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(CrowdfundException):
    """
    Base class for pipeline-level failures.

    Raised when the campaign set cannot be read at all. Aborts the
    current reconciliation pass; the caller shows a retry affordance.
    """

    pass


class ClientUnavailable(FetchError):
    """The ledger client could not be constructed."""

    pass


class LedgerError(FetchError):
    """The ledger client was reached but the campaign read failed."""

    pass


class MetadataUnavailable(CrowdfundException):
    """
    Exception for unreachable campaign metadata.

    Raised when no reference is available or every gateway failed.
    Never escapes the fetcher: it is logged and turned into ``None``.
    """

    pass


class MalformedMetadata(MetadataUnavailable):
    """The gateway answered, but the body is not a JSON object."""

    pass


class TransactionError(CrowdfundException):
    """
    Exception for transaction submission or confirmation failures.

    Attributes:
        tx_hash: Hash of the submitted transaction, if it got that far
    """

    def __init__(self, message: str, tx_hash: str = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ConfigurationException(CrowdfundException):
    """
    Exception for configuration/startup errors.

    Use when:
    - Required environment variables are missing
    - Invalid configuration values
    - Missing required resources
    """

    pass
