# engine/mortgage.py

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from models import AmortizationRow, HomeAsset, Person, PersonRole
from config.projection_defaults import MAX_AMORTIZATION_MONTHS

logger = logging.getLogger(__name__)

PAID_OFF = 0.01


@dataclass(frozen=True)
class MortgageYear:
    total_payment: float
    end_balance: float


def age_at(year: int, month: int, birth_year: Optional[int], birth_month: Optional[int]) -> int:
    """Whole-year age in a given month, counting the birthday month as already reached."""
    if not birth_year or not birth_month:
        return 0
    age = year - birth_year
    if month < birth_month:
        age -= 1
    return age


def _primary(persons: Iterable[Person]) -> Optional[Person]:
    persons = list(persons)
    for person in persons:
        if person.role == PersonRole.PRIMARY:
            return person
    return persons[0] if persons else None


def generate_amortization_schedule(home: Optional[HomeAsset],
                                   persons: Iterable[Person],
                                   as_of: Optional[Tuple[int, int]] = None) -> List[AmortizationRow]:
    """
    Month-by-month amortization from the as-of month until the loan is retired.

    Args:
        home: Home asset carrying the mortgage terms (annual rate as a fraction).
        persons: Household persons; the primary's birth month/year drives the age column.
        as_of: (year, month) to start from. Defaults to the current month.

    Returns:
        List of AmortizationRow, empty when there is no loan balance.
    """
    if home is None or (home.loan_balance or 0) <= PAID_OFF:
        return []

    if as_of is None:
        # Imported here so the engine only touches the clock when no date is given
        from utils.input_adapter import resolve_as_of
        as_of = resolve_as_of()
    year, month = as_of

    primary = _primary(persons)
    birth_year = primary.birth_year if primary else None
    birth_month = primary.birth_month if primary else None

    monthly_rate = (home.interest_rate or 0.0) / 12
    payment = home.monthly_payment or 0.0
    extra = home.extra_principal or 0.0

    schedule: List[AmortizationRow] = []
    balance = home.loan_balance

    while balance > PAID_OFF:
        start_balance = balance
        interest = start_balance * monthly_rate

        regular_principal = payment - interest
        additional_principal = extra
        end_balance = start_balance - regular_principal - additional_principal

        is_payoff_month = year == home.payoff_year and month == home.payoff_month
        if end_balance <= 0 or is_payoff_month:
            # Final payment retires exactly the remaining balance
            regular_principal = min(start_balance, max(0.0, payment - interest))
            additional_principal = start_balance - regular_principal
            end_balance = 0.0

        schedule.append(AmortizationRow(
            month=month,
            year=year,
            age=age_at(year, month, birth_year, birth_month),
            start_balance=round(start_balance, 2),
            interest_payment=round(interest, 2),
            principal_payment=round(regular_principal, 2),
            additional_principal=round(additional_principal, 2),
            total_payment=round(interest + regular_principal + additional_principal, 2),
            end_balance=round(end_balance, 2),
        ))

        balance = end_balance
        month += 1
        if month > 12:
            month = 1
            year += 1

        if len(schedule) >= MAX_AMORTIZATION_MONTHS and balance > PAID_OFF:
            logger.warning(
                f"Amortization stopped after {MAX_AMORTIZATION_MONTHS} months with "
                f"{balance:,.2f} still owed. Check the payment covers monthly interest."
            )
            break

    return schedule


def aggregate_schedule_by_year(schedule: Iterable[AmortizationRow]) -> Dict[int, MortgageYear]:
    """Sums payments per calendar year and keeps each year's last end balance."""
    payments: Dict[int, float] = {}
    balances: Dict[int, float] = {}
    for row in schedule:
        payments[row.year] = payments.get(row.year, 0.0) + row.total_payment
        balances[row.year] = row.end_balance
    return {yr: MortgageYear(total_payment=payments[yr], end_balance=balances[yr]) for yr in payments}


def payments_before_month(schedule: Iterable[AmortizationRow], year: int, month: int) -> float:
    """Total paid in a calendar year in the months strictly before `month`."""
    return sum(row.total_payment for row in schedule if row.year == year and row.month < month)
