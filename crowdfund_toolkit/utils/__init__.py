from crowdfund_toolkit.utils.units import format_ether, format_units, parse_ether

__all__ = ["format_ether", "format_units", "parse_ether"]
