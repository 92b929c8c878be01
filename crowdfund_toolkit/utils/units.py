"""Exact conversion between wei integers and ether decimal strings."""

from decimal import Decimal, InvalidOperation
from typing import Union

from eth_utils import to_wei

from crowdfund_toolkit.shared.constants import GlobalConstants


def format_units(value: int, decimals: int = GlobalConstants.ETHER_DECIMALS) -> str:
    """
    Format a smallest-unit integer as a decimal string.

    Uses integer arithmetic only. The fraction keeps no trailing zeros but
    always has at least one digit, so 10**18 wei formats as "1.0" and
    1000 wei as "0.000000000000001".

    Args:
        value: Amount in the smallest unit
        decimals: Number of decimals of the unit (18 for ether)

    Returns:
        Decimal string representation
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Amount must be an integer, got {type(value).__name__}")

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def format_ether(value: int) -> str:
    """Format a wei amount as an ether decimal string."""
    return format_units(value, GlobalConstants.ETHER_DECIMALS)


def parse_ether(amount: Union[str, Decimal]) -> int:
    """
    Parse a positive ether decimal string into wei.

    Raises:
        ValueError: If the amount is not a finite positive decimal or has
            more than 18 fractional digits
    """
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid amount: {amount!r}")

    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value <= 0:
        raise ValueError(f"Amount must be positive, got {amount!r}")
    if value.normalize().as_tuple().exponent < -GlobalConstants.ETHER_DECIMALS:
        raise ValueError(
            f"Amount {amount!r} has more than "
            f"{GlobalConstants.ETHER_DECIMALS} decimals"
        )

    return to_wei(value, "ether")
