from decimal import Decimal, InvalidOperation


def validate_campaign_id(campaign_id: int) -> int:
    """Validate a campaign id (ledger index)"""
    if isinstance(campaign_id, bool) or not isinstance(campaign_id, int):
        raise ValueError(
            f"Invalid campaign_id: {campaign_id!r} is not an integer"
        )
    if campaign_id < 0:
        raise ValueError(
            f"Invalid campaign_id: {campaign_id}. Must be non-negative"
        )
    return campaign_id


def validate_donation_amount(amount: str) -> str:
    """Validate and normalize a positive ETH amount"""
    if not amount or not isinstance(amount, str):
        raise ValueError("Invalid amount: must be a non-empty string")
    amount = amount.strip()
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount} is not a decimal number")
    if not value.is_finite() or value <= 0:
        raise ValueError(f"Invalid amount: {amount}. Must be greater than 0")
    return amount
