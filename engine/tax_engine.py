"""
U.S. federal and state income tax calculator for retirement projections.
It contains the tax formulas only, relying entirely on the version-tagged
tables provided by utils.tax_utils.
"""
from dataclasses import dataclass
from typing import Optional, Sequence
import numpy as np
import logging

# Configure logging for state tax messages
logger = logging.getLogger(__name__)

from utils.tax_utils import (
    Bracket,
    SS_MAX_TAXABLE_FRACTION,
    TAX_YEAR,
    TaxFilingStatus,
    get_tax_year_tables,
    normalize_filing_status,
)

# --- 1. Internal Helper Functions ---

def _progressive_tax(income: float, brackets: Sequence[Bracket]) -> float:
    """Walks (low, high, rate) brackets, taxing the slice of income inside each."""
    if income <= 0:
        return 0.0

    tax = 0.0
    for low, high, rate in brackets:
        if income <= low:
            break
        tax += (min(income, high) - low) * rate
        if income <= high:
            break
    return tax


# --- 2. Public Tax Functions ---

def federal_tax(taxable_income: float, filing_status: TaxFilingStatus = "single", tax_year: int = TAX_YEAR) -> float:
    """Federal ordinary income tax on taxable income (after deductions)."""
    status = normalize_filing_status(filing_status)
    brackets = get_tax_year_tables(tax_year)["ordinary"][status]
    return _progressive_tax(taxable_income, brackets)


def state_tax(taxable_income: float, state_code: Optional[str], filing_status="single",
              tax_year: int = TAX_YEAR) -> float:
    """
    State income tax on taxable income.

    Args:
        taxable_income: Income subject to state tax.
        state_code: Two-letter code (case-insensitive), DC included.
        filing_status: States only publish single and married-joint schedules;
            every other status uses the single schedule.

    Returns:
        The state tax owed. Unknown state codes return 0 with a warning.
    """
    code = (state_code or "").strip().upper()
    state = get_tax_year_tables(tax_year)["state"].get(code)

    if state is None:
        logger.warning(f"State Tax Calculations Not Available for '{state_code}'. Defaulting to $0 State Tax.")
        return 0.0

    if taxable_income <= 0:
        return 0.0

    if state["brackets"] is None:
        return taxable_income * state["flat_rate"]

    status = normalize_filing_status(filing_status)
    brackets = state["brackets"].get(status, state["brackets"]["single"])
    return _progressive_tax(taxable_income, brackets)


def capital_gains_tax(gains: float, ordinary_income: float, filing_status="single",
                      tax_year: int = TAX_YEAR) -> float:
    """
    Long-term capital gains tax with gains stacked on top of ordinary income.

    Thresholds are walked from the highest down; at each one the gains taxed
    at that rate are min(remaining gains, max(0, total income - threshold)).
    """
    if gains <= 0:
        return 0.0

    status = normalize_filing_status(filing_status)
    brackets = get_tax_year_tables(tax_year)["capital_gains"][status]
    total_income = max(0.0, ordinary_income) + gains

    tax = 0.0
    remaining = gains
    for low, _high, rate in reversed(brackets):
        if remaining <= 0:
            break
        taxed_here = min(remaining, max(0.0, total_income - low))
        tax += taxed_here * rate
        remaining -= taxed_here
    return tax


def taxable_social_security(benefit: float, other_income: float, filing_status="single",
                            tax_year: int = TAX_YEAR) -> float:
    """
    Taxable portion of Social Security benefits (IRS two-threshold rule).

    Combined income is other income plus half the benefit. Up to 50% of the
    benefit is taxable above the first threshold and up to 85% above the
    second, never more than 85% of the benefit overall.
    """
    if benefit <= 0:
        return 0.0

    status = normalize_filing_status(filing_status)
    thresholds = get_tax_year_tables(tax_year)["ss_thresholds"]
    first, second = thresholds.get(status, thresholds["single"])
    combined = other_income + 0.5 * benefit

    tier_one = 0.0
    tier_two = 0.0
    if combined > first:
        tier_one = min((combined - first) * 0.5, benefit * 0.5)
    if combined > second:
        tier_two = min((combined - second) * SS_MAX_TAXABLE_FRACTION, benefit * SS_MAX_TAXABLE_FRACTION - tier_one)

    return min(tier_one + tier_two, SS_MAX_TAXABLE_FRACTION * benefit)


def standard_deduction(filing_status="single", tax_year: int = TAX_YEAR) -> float:
    status = normalize_filing_status(filing_status)
    return float(get_tax_year_tables(tax_year)["standard_deduction"][status])


def apply_standard_deduction(income: float, filing_status="single",
                             custom_deduction: Optional[float] = None,
                             tax_year: int = TAX_YEAR) -> float:
    """Taxable income after the standard (or a custom) deduction, floored at 0."""
    deduction = custom_deduction if custom_deduction is not None else standard_deduction(filing_status, tax_year)
    return max(0.0, income - deduction)


def marginal_bracket_headroom(taxable_income: float, filing_status="single",
                              tax_year: int = TAX_YEAR) -> float:
    """
    Room left before the top of the ordinary bracket the income currently sits in.
    Income already in the top bracket has unlimited headroom (np.inf).
    """
    status = normalize_filing_status(filing_status)
    income = max(0.0, taxable_income)
    for _low, high, _rate in get_tax_year_tables(tax_year)["ordinary"][status]:
        if income < high:
            return high - income
    return np.inf


# --- 3. Yearly Tax Calculation ---

@dataclass(frozen=True)
class TaxBreakdown:
    adjusted_gross_income: float
    taxable_social_security: float
    taxable_income: float
    capital_gains: float
    federal_tax: float
    state_tax: float
    capital_gains_tax: float

    @property
    def total_tax(self) -> float:
        return self.federal_tax + self.state_tax + self.capital_gains_tax

    def effective_rate(self, total_income: float) -> float:
        return self.total_tax / total_income if total_income > 0 else 0.0


def calculate_taxes(
    gross_income: float,
    pre_tax_contributions: float,
    pre_tax_withdrawal: float,
    capital_gains: float,
    social_security: float,
    filing_status,
    state_code: Optional[str],
    tax_year: int = TAX_YEAR,
) -> TaxBreakdown:
    """
    Computes the year's federal, state and capital gains taxes.

    Args:
        gross_income: Salary and other earned income for the year.
        pre_tax_contributions: Employee pre-tax contributions (employer match excluded).
        pre_tax_withdrawal: Pre-tax account withdrawals, taxed as ordinary income.
        capital_gains: Realized long-term gains from taxable account withdrawals.
        social_security: Gross Social Security benefits received.
        filing_status: Federal filing status.
        state_code: State of residence for the year.

    Returns:
        TaxBreakdown with AGI, taxable income and each tax component.
    """
    agi = max(0.0, gross_income - pre_tax_contributions + pre_tax_withdrawal)
    taxable_ss = taxable_social_security(social_security, agi, filing_status, tax_year)
    taxable_income = apply_standard_deduction(agi + taxable_ss, filing_status, tax_year=tax_year)

    fed = federal_tax(taxable_income, filing_status, tax_year)
    cg = capital_gains_tax(capital_gains, taxable_income, filing_status, tax_year)
    st = state_tax(taxable_income + max(0.0, capital_gains), state_code, filing_status, tax_year)

    return TaxBreakdown(
        adjusted_gross_income=agi,
        taxable_social_security=taxable_ss,
        taxable_income=taxable_income,
        capital_gains=max(0.0, capital_gains),
        federal_tax=fed,
        state_tax=st,
        capital_gains_tax=cg,
    )
