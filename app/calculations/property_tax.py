"""
Property Tax Estimates

Table-driven tax lookup for Southern California counties, with the
component breakdown (county, school, city, special districts) and the
homestead / senior / veteran exemptions.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from app.calculations.defaults import DEFAULT_MARKET, MarketDefaults
from app.calculations.validation import require_positive, round_currency, to_percent

HOMESTEAD_RATE, HOMESTEAD_MAX = 0.02, 7000
SENIOR_RATE, SENIOR_MAX = 0.04, 5000
SENIOR_PRICE_LIMIT = 400_000
VETERAN_RATE, VETERAN_MAX = 0.01, 4000


@dataclass(frozen=True)
class TaxRateComponents:
    """Annual rates (decimal) levied by each taxing authority."""

    county: float
    school: float
    city: float
    special: float

    @property
    def total(self) -> float:
        return self.county + self.school + self.city + self.special


COUNTY_TAX_RATES: Dict[str, TaxRateComponents] = {
    "riverside": TaxRateComponents(county=0.0073, school=0.0032, city=0.0008, special=0.0008),
    "san-bernardino": TaxRateComponents(county=0.0071, school=0.0031, city=0.0008, special=0.0008),
    "orange": TaxRateComponents(county=0.0041, school=0.0025, city=0.0004, special=0.0003),
    "los-angeles": TaxRateComponents(county=0.0040, school=0.0025, city=0.0004, special=0.0003),
    "ventura": TaxRateComponents(county=0.0042, school=0.0025, city=0.0004, special=0.0003),
    "imperial": TaxRateComponents(county=0.0039, school=0.0023, city=0.0004, special=0.0003),
    "kern": TaxRateComponents(county=0.0048, school=0.0028, city=0.0005, special=0.0003),
    "santa-barbara": TaxRateComponents(county=0.0042, school=0.0025, city=0.0004, special=0.0003),
}

# Flat effective rates used for quick estimates
COUNTY_FLAT_RATES: Dict[str, float] = {
    "riverside": 0.0121,
    "san-bernardino": 0.0118,
    "orange": 0.0073,
    "los-angeles": 0.0072,
    "ventura": 0.0074,
    "imperial": 0.0069,
    "kern": 0.0084,
    "santa-barbara": 0.0074,
}


@dataclass(frozen=True)
class TaxExemptions:
    homestead: bool = False
    senior: bool = False
    veteran: bool = False


@dataclass(frozen=True)
class PropertyTaxInputs:
    home_price: float
    county: str
    exemptions: TaxExemptions = TaxExemptions()

    def __post_init__(self):
        require_positive("home_price", self.home_price)


@dataclass(frozen=True)
class TaxBreakdown:
    """Component rates expressed in percent."""

    county_rate: float
    school_rate: float
    city_rate: float
    special_districts: float


@dataclass(frozen=True)
class PropertyTaxResult:
    annual_tax: float
    monthly_tax: float
    effective_rate: float  # Percent
    breakdown: TaxBreakdown
    exemptions_applied: float


def lookup_rates(
    county: str,
    rate_table: Mapping[str, TaxRateComponents],
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> TaxRateComponents:
    """Rates for a county key, falling back to the default jurisdiction."""
    key = (county or "").strip().lower()
    if key in rate_table:
        return rate_table[key]
    return rate_table[defaults.default_county]


def calculate_exemptions(home_price: float, exemptions: TaxExemptions) -> float:
    """Total exemption amount, applied in homestead, senior, veteran order."""
    amount = 0.0
    if exemptions.homestead:
        amount += min(home_price * HOMESTEAD_RATE, HOMESTEAD_MAX)
    if exemptions.senior and home_price < SENIOR_PRICE_LIMIT:
        amount += min(home_price * SENIOR_RATE, SENIOR_MAX)
    if exemptions.veteran:
        amount += min(home_price * VETERAN_RATE, VETERAN_MAX)
    return amount


def calculate_detailed_property_tax(
    inputs: PropertyTaxInputs,
    rate_table: Optional[Mapping[str, TaxRateComponents]] = None,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> PropertyTaxResult:
    """
    Calculate property tax with county-specific rates and exemptions.

    Args:
        inputs: Home price, county key and exemptions claimed
        rate_table: County rate components (defaults to COUNTY_TAX_RATES)
        defaults: Supplies the fallback county

    Returns:
        PropertyTaxResult; tax never goes below zero
    """
    rates = lookup_rates(inputs.county, rate_table or COUNTY_TAX_RATES, defaults)

    base_tax = inputs.home_price * rates.total
    exemption_amount = calculate_exemptions(inputs.home_price, inputs.exemptions)
    final_tax = max(0.0, base_tax - exemption_amount)

    return PropertyTaxResult(
        annual_tax=round_currency(final_tax),
        monthly_tax=round_currency(final_tax / 12),
        effective_rate=to_percent(final_tax / inputs.home_price),
        breakdown=TaxBreakdown(
            county_rate=to_percent(rates.county),
            school_rate=to_percent(rates.school),
            city_rate=to_percent(rates.city),
            special_districts=to_percent(rates.special),
        ),
        exemptions_applied=round_currency(exemption_amount),
    )


def calculate_property_tax(
    home_price: float,
    county: Optional[str] = None,
    rate_table: Optional[Mapping[str, float]] = None,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> float:
    """Annual property tax at the county's flat effective rate."""
    require_positive("home_price", home_price)
    table = rate_table or COUNTY_FLAT_RATES
    key = (county or defaults.default_county).strip().lower()
    rate = table.get(key, defaults.property_tax_rate)
    return round_currency(home_price * rate)
