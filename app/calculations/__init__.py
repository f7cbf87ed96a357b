"""
Mortgage Calculation Engine

Pure calculators for residential mortgage analysis. Every function is a
deterministic function of its inputs; monetary outputs are rounded to
cents at the point of computation.
"""

from app.calculations import (
    affordability,
    amortization,
    arm,
    mortgage,
    preapproval,
    property_tax,
    refinance,
    rent_vs_buy,
)
from app.calculations.validation import InvalidInput

__all__ = [
    "affordability",
    "amortization",
    "arm",
    "mortgage",
    "preapproval",
    "property_tax",
    "refinance",
    "rent_vs_buy",
    "InvalidInput",
]
