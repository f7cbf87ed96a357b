"""
Market Defaults

Escrow rates and underwriting ratios used when a caller does not supply
its own. Values reflect Southern California averages.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MarketDefaults:
    """Default rates passed explicitly into the calculators."""

    property_tax_rate: float = 0.0121  # 1.21% of home value annually
    home_insurance_rate: float = 0.0045  # 0.45% of home value annually
    pmi_rate: float = 0.005  # 0.5% of loan annually when down < 20%
    pmi_threshold: float = 0.20
    front_end_ratio: float = 0.28
    back_end_ratio: float = 0.36
    high_risk_insurance_multiplier: float = 1.5
    base_rate: float = 7.25  # Market 30-year rate quoted for pre-approval
    fixed_rate_spread: float = 0.75  # Fixed loans typically price above ARM start rate
    default_county: str = "riverside"


DEFAULT_MARKET = MarketDefaults()
