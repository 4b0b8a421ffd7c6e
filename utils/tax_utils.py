# utils/tax_utils.py
import logging
import numpy as np
from types import MappingProxyType
from typing import List, Tuple, Dict, Literal, Mapping, Any

from utils.state_tax_tables import STATE_TAX_TABLE_2025

logger = logging.getLogger(__name__)

# Define the acceptable set of filing statuses for type hinting
TaxFilingStatus = Literal["single", "married-joint", "married-separate", "head-of-household"]
TAX_YEAR = 2025 # Tax year the published constants below belong to

Bracket = Tuple[float, float, float]

# =============================================================================
# 1. Federal Ordinary Income Tax Brackets (2025)
# =============================================================================

ORDINARY_BRACKETS_2025: Dict[TaxFilingStatus, List[Bracket]] = {
    "single": [
        (0, 11_600, 0.10), (11_600, 47_150, 0.12), (47_150, 100_525, 0.22),
        (100_525, 191_950, 0.24), (191_950, 243_725, 0.32), (243_725, 609_350, 0.35),
        (609_350, np.inf, 0.37),
    ],
    "married-joint": [
        (0, 23_200, 0.10), (23_200, 94_300, 0.12), (94_300, 201_050, 0.22),
        (201_050, 383_900, 0.24), (383_900, 487_450, 0.32), (487_450, 731_200, 0.35),
        (731_200, np.inf, 0.37),
    ],
    "married-separate": [
        (0, 11_600, 0.10), (11_600, 47_150, 0.12), (47_150, 100_525, 0.22),
        (100_525, 191_950, 0.24), (191_950, 243_725, 0.32), (243_725, 365_600, 0.35),
        (365_600, np.inf, 0.37),
    ],
    "head-of-household": [
        (0, 16_550, 0.10), (16_550, 63_100, 0.12), (63_100, 100_500, 0.22),
        (100_500, 191_950, 0.24), (191_950, 243_700, 0.32), (243_700, 609_350, 0.35),
        (609_350, np.inf, 0.37),
    ],
}

# =============================================================================
# 2. Federal Long-Term Capital Gains Brackets
# =============================================================================
CAPGAINS_BRACKETS_2025: Dict[TaxFilingStatus, List[Bracket]] = {
    "single": [(0, 47_025, 0.0), (47_025, 518_900, 0.15), (518_900, np.inf, 0.20)],
    "married-joint": [(0, 94_050, 0.0), (94_050, 583_750, 0.15), (583_750, np.inf, 0.20)],
    "married-separate": [(0, 47_025, 0.0), (47_025, 291_875, 0.15), (291_875, np.inf, 0.20)],
    "head-of-household": [(0, 62_975, 0.0), (62_975, 551_350, 0.15), (551_350, np.inf, 0.20)],
}

# =============================================================================
# 3. Standard Deduction
# =============================================================================
STANDARD_DEDUCTION_2025: Dict[TaxFilingStatus, float] = {
    "single": 14_600,
    "married-joint": 29_200,
    "married-separate": 14_600,
    "head-of-household": 21_900,
}

# =============================================================================
# 4. Social Security Taxation Thresholds (Statutory and NOT indexed)
# =============================================================================
# (first threshold, second threshold). Head of household uses the single values.
SS_TAX_THRESHOLDS: Dict[str, Tuple[float, float]] = {
    "single": (25_000, 34_000),
    "married-joint": (32_000, 44_000),
    "married-separate": (0, 0),
}
SS_MAX_TAXABLE_FRACTION = 0.85


# =============================================================================
# 5. Version-Tagged Table Registry
# =============================================================================

def _freeze(value: Any) -> Any:
    """Recursively converts dicts to read-only mappings and lists to tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


TAX_TABLES: Mapping[int, Mapping[str, Any]] = _freeze({
    2025: {
        "ordinary": ORDINARY_BRACKETS_2025,
        "capital_gains": CAPGAINS_BRACKETS_2025,
        "standard_deduction": STANDARD_DEDUCTION_2025,
        "ss_thresholds": SS_TAX_THRESHOLDS,
        "state": STATE_TAX_TABLE_2025,
    },
})


def get_tax_year_tables(tax_year: int = TAX_YEAR) -> Mapping[str, Any]:
    """
    Returns the immutable tax tables for a given tax year.

    Years without published tables fall back to the latest year on file.
    """
    if tax_year in TAX_TABLES:
        return TAX_TABLES[tax_year]
    latest = max(TAX_TABLES)
    logger.debug(f"No tax tables for {tax_year}; using {latest} tables.")
    return TAX_TABLES[latest]


def normalize_filing_status(filing_status: Any) -> TaxFilingStatus:
    """Maps any filing status spelling to a table key. Unknown values fall back to 'single'."""
    value = getattr(filing_status, "value", filing_status)
    key = str(value or "").strip().lower().replace("_", "-")
    key = key.replace("married-filing-jointly", "married-joint").replace("married-filing-separately", "married-separate")
    if key not in ORDINARY_BRACKETS_2025:
        logger.debug(f"Unknown filing status '{filing_status}'. Defaulting to 'single'.")
        return "single"
    return key
