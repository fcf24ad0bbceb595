"""
Spend-based emissions estimate.

Vendor names are matched (case-insensitive, whole words) against keyword groups,
checked in list order. Each group carries a kgCO2e-per-currency-unit factor;
unmatched vendors fall into the "general" category.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger("ledgerscope.esg")

EMISSION_CATEGORIES = [
    {
        "category": "travel",
        "description": "Airlines and air travel",
        "keywords": (
            "ryanair", "easyjet", "wizz air", "lufthansa", "british airways", "air france",
            "klm", "emirates", "etihad", "qatar airways", "flydubai", "saudia",
            "delta air", "united airlines", "american airlines", "airline", "airlines", "airways",
        ),
        "factor": 1.2,
    },
    {
        "category": "transport",
        "description": "Ride-hailing and taxi services",
        "keywords": ("uber", "lyft", "bolt", "careem", "grab", "free now", "freenow", "taxi"),
        "factor": 0.3,
    },
    {
        "category": "office_supplies",
        "description": "Stationery and office equipment",
        "keywords": (
            "staples", "office depot", "officeworks", "viking direct", "lyreco",
            "stationery", "office supplies",
        ),
        "factor": 0.15,
    },
    {
        "category": "utilities",
        "description": "Electricity, gas, water and energy suppliers",
        "keywords": (
            "electric", "electricity", "energy", "power", "water", "gas", "utility", "utilities",
            "e.on", "edf", "vattenfall", "iberdrola", "dewa",
        ),
        "factor": 0.6,
    },
]

# One alternation per group, anchored on word boundaries so "bolt" skips "Bolton"
_CATEGORY_PATTERNS = [
    (
        re.compile(r"\b(?:" + "|".join(map(re.escape, group["keywords"])) + r")\b", re.IGNORECASE),
        group["category"],
        group["factor"],
    )
    for group in EMISSION_CATEGORIES
]

GENERAL_CATEGORY = "general"
GENERAL_FACTOR = 0.4

AMOUNT_CONFIDENCE = 0.6
NO_AMOUNT_CONFIDENCE = 0.4


@dataclass(frozen=True)
class EmissionsResult:
    esg_category: str
    co2e_estimate: float | None
    confidence: float


def match_category(vendor_name: str | None) -> tuple[str, float]:
    """Return (category, factor) for a vendor name."""
    vendor = vendor_name or ""
    for pattern, category, factor in _CATEGORY_PATTERNS:
        if pattern.search(vendor):
            return category, factor
    return GENERAL_CATEGORY, GENERAL_FACTOR


def estimate_emissions(vendor_name: str | None, total_amount: float | None) -> EmissionsResult:
    category, factor = match_category(vendor_name)

    co2e = None
    if total_amount is not None and total_amount > 0:
        co2e = round(total_amount * factor, 2)

    confidence = AMOUNT_CONFIDENCE if total_amount is not None else NO_AMOUNT_CONFIDENCE
    logger.debug("ESG category %s (factor=%s) for vendor %r", category, factor, vendor_name)
    return EmissionsResult(esg_category=category, co2e_estimate=co2e, confidence=confidence)
