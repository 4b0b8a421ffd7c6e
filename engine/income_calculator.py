# income_calculator.py
#
# Resolves a projection year's income (salary, income sources, Social Security)
# and living expenses, including the retirement-transition apportionment
#

from dataclasses import dataclass
from typing import Mapping, Optional

from models import Person, ResolvedHouseholdState


@dataclass(frozen=True)
class PersonYear:
    """Where one person stands in a projection year."""
    age: int
    is_retired: bool
    is_transition_year: bool
    pre_retirement_months: int  # months worked in the transition year, else 12 or 0

    @property
    def work_fraction(self) -> float:
        return self.pre_retirement_months / 12.0


def person_year(person: Person, age: int) -> PersonYear:
    """
    Retirement status for an age. In the transition year (age == retirement
    age) the months before the birth month are pre-retirement.
    """
    is_transition = age == person.retirement_age
    if is_transition:
        months = person.birth_month - 1
    elif age < person.retirement_age:
        months = 12
    else:
        months = 0
    return PersonYear(
        age=age,
        is_retired=age >= person.retirement_age,
        is_transition_year=is_transition,
        pre_retirement_months=months,
    )


def calculate_salary_income(
    state: ResolvedHouseholdState,
    primary_year: PersonYear,
    spouse_year: Optional[PersonYear],
    year_idx: int,
) -> float:
    """
    Calculates the household's earned income for a projection year.

    Args:
        state: Resolved household.
        primary_year: Primary person's status this year.
        spouse_year: Spouse's status this year, or None when no spouse is included.
        year_idx: Years elapsed since the as-of year (0 for the first year).

    Returns:
        float: Total earned income. Income sources, when configured, replace
        every legacy salary and follow the primary's working months. The
        spouse's legacy salary is never prorated in a transition year.
    """
    primary = state.primary

    if state.income_sources:
        total = sum(src.annual_amount * (1 + src.annual_growth) ** year_idx for src in state.income_sources)
        return total * primary_year.work_fraction

    total_salary = primary.salary * (1 + primary.annual_salary_increase) ** year_idx * primary_year.work_fraction

    spouse = state.spouse
    if spouse is not None and spouse_year is not None and spouse_year.age < spouse.retirement_age:
        total_salary += spouse.salary * (1 + spouse.annual_salary_increase) ** year_idx

    return total_salary


def calculate_social_security(state: ResolvedHouseholdState, ages: Mapping[str, int], year_idx: int) -> float:
    """Benefits for everyone past their claiming age, inflated from today's dollars."""
    cola = (1 + state.economics.inflation_rate) ** year_idx
    total = 0.0
    for benefit in state.social_security:
        age = ages.get(benefit.owner_id)
        if age is not None and age >= benefit.claiming_age:
            total += benefit.estimated_annual_benefit * cola
    return total


def annual_expense_totals(state: ResolvedHouseholdState) -> tuple:
    """(pre-retirement, post-retirement) annual living expenses in today's dollars."""
    if not state.expenses:
        return state.pre_retirement_expenses, state.post_retirement_expenses

    pre = sum(e.monthly_amount * 12 for e in state.expenses if e.pre_retirement)
    post = sum(e.monthly_amount * 12 for e in state.expenses if e.post_retirement)
    return pre, post


def calculate_living_expenses(state: ResolvedHouseholdState, primary_year: PersonYear, year_idx: int) -> float:
    pre, post = annual_expense_totals(state)
    inflation = (1 + state.economics.inflation_rate) ** year_idx

    if primary_year.is_transition_year:
        fraction = primary_year.work_fraction
        base = pre * fraction + post * (1 - fraction)
    elif primary_year.is_retired:
        base = post
    else:
        base = pre
    return base * inflation
