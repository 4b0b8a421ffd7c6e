# engine/rmd_tables.py

"""
Required Minimum Distribution lookup supporting:
- 2022+ Uniform Lifetime Table (ages 72-100, older ages use the age-100 divisor)
- SECURE Act 1.0/2.0 start ages (72 → 73 → 75)
"""

from typing import Dict, Iterable, Tuple

# =============================================================================
# 2022+ IRS UNIFORM LIFETIME TABLE (AGES 72–100)
# =============================================================================
UNIFORM_LIFETIME_TABLE: Dict[int, float] = {
    72: 27.4, 73: 26.5, 74: 25.5, 75: 24.6, 76: 23.7, 77: 22.9,
    78: 22.0, 79: 21.1, 80: 20.2, 81: 19.4, 82: 18.5, 83: 17.7,
    84: 16.8, 85: 16.0, 86: 15.2, 87: 14.4, 88: 13.7, 89: 12.9,
    90: 12.2, 91: 11.5, 92: 10.8, 93: 10.1, 94: 9.5, 95: 8.9,
    96: 8.4, 97: 7.8, 98: 7.3, 99: 6.8, 100: 6.4,
}
MAX_TABLE_AGE = 100


def rmd_start_age(birth_year: int) -> int:
    """SECURE 2.0 starting age: 72 before 1951, 73 for 1951–1959, 75 from 1960."""
    if birth_year < 1951:
        return 72
    if birth_year < 1960:
        return 73
    return 75


def get_rmd_factor(age: int, birth_year: int) -> float:
    """
    Returns the IRS divisor for the distribution year, or 0.0 when no RMD is due.
    """
    if age < rmd_start_age(birth_year):
        return 0.0
    # The start age is never below the first table age
    return UNIFORM_LIFETIME_TABLE[min(age, MAX_TABLE_AGE)]


def required_minimum_distribution(balance: float, age: int, birth_year: int) -> float:
    """Prior-year-end pre-tax balance divided by the Uniform Lifetime divisor."""
    if balance <= 0:
        return 0.0
    factor = get_rmd_factor(age, birth_year)
    if factor <= 0:
        return 0.0
    return balance / factor


def household_rmd(owners: Iterable[Tuple[float, int, int]]) -> float:
    """
    Sums the RMD of each owner's own pre-tax balance.

    Args:
        owners: (pre_tax_balance, age, birth_year) per person.
    """
    return sum(required_minimum_distribution(bal, age, by) for bal, age, by in owners)
