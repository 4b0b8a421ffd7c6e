# engine.simulator.py

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from models import (
    AccountType,
    AccountYearRecord,
    Expense,
    IncomeSource,
    Person,
    ProjectionInputs,
    ProjectionResult,
    ProjectionYearRecord,
    ResolvedHouseholdState,
    SavingsAccount,
    SocialSecurityBenefit,
    StateChangeOption,
)
from utils.input_adapter import current_age, resolve_household

from engine.accounts_ledger import (
    LedgerState,
    LedgerYearInputs,
    OwnerYear,
    compute_aggregates,
    compute_total_balance,
    initialize_account_states,
    largest_account_id,
    legacy_account_states,
    step,
)
from engine.income_calculator import (
    PersonYear,
    calculate_living_expenses,
    calculate_salary_income,
    calculate_social_security,
    person_year,
)
from engine.mortgage import aggregate_schedule_by_year, generate_amortization_schedule, payments_before_month
from engine.rmd_tables import household_rmd
from engine.tax_engine import calculate_taxes
from engine.withdrawal_engine import NO_WITHDRAWAL, WithdrawalEngine

logger = logging.getLogger(__name__)


def _r2(value: float) -> float:
    return round(value, 2)


class ProjectionSimulator:
    """
    Steps a resolved household forward one year at a time, from the primary
    person's current age through the latest death age in the household.
    """
    def __init__(self, state: ResolvedHouseholdState):

        # -----------------------
        # STEP 1: Inputs and Ages
        # -----------------------
        self.state = state
        self.primary = state.primary
        self.spouse = state.spouse

        self.current_age = current_age(self.primary, state.as_of_year, state.as_of_month)
        self.spouse_current_age = (
            current_age(self.spouse, state.as_of_year, state.as_of_month) if self.spouse else None
        )
        self.end_age = max(p.death_age for p in state.persons)

        # -----------------------
        # STEP 2: Mortgage Schedule
        # -----------------------
        self.schedule = generate_amortization_schedule(
            state.home, state.persons, (state.as_of_year, state.as_of_month)
        )
        self.mortgage_by_year = aggregate_schedule_by_year(self.schedule)

        # -----------------------
        # STEP 3: Ledger and Strategy
        # -----------------------
        # With individual accounts, person buckets only carry the employer match
        if state.savings_accounts:
            accounts = initialize_account_states(state.savings_accounts).accounts
            match_buckets = legacy_account_states(state.persons, match_only=True).accounts
            self.initial_ledger = LedgerState(accounts=accounts + match_buckets)
        else:
            self.initial_ledger = legacy_account_states(state.persons)

        self.withdrawal_engine = WithdrawalEngine(
            state.tax.withdrawal_strategy, state.tax.filing_status
        )

    # ----------------------------------------------------------------------
    # Per-year resolution helpers
    # ----------------------------------------------------------------------
    def _tax_state(self, primary_year: PersonYear) -> str:
        tax = self.state.tax
        if not tax.retirement_state or primary_year.is_transition_year:
            return tax.working_state

        if tax.state_change_option is StateChangeOption.AT_RETIREMENT:
            moved = primary_year.age > self.primary.retirement_age
        elif tax.state_change_option is StateChangeOption.AT_SPECIFIC_AGE:
            moved = tax.state_change_age is not None and primary_year.age >= tax.state_change_age
        else:
            raise ValueError(f"Unhandled state change option: {tax.state_change_option}")

        return tax.retirement_state if moved else tax.working_state

    def _home_for_year(self, calendar_year: int, year_idx: int) -> Tuple[float, float, float, float]:
        """(home value, mortgage balance, mortgage payments, sale proceeds) for a calendar year."""
        home = self.state.home
        if home is None:
            return 0.0, 0.0, 0.0, 0.0

        home_value = home.current_value * (1 + home.appreciation_rate) ** year_idx
        mortgage_year = self.mortgage_by_year.get(calendar_year)
        payment = mortgage_year.total_payment if mortgage_year else 0.0
        balance = mortgage_year.end_balance if mortgage_year else 0.0

        sale = home.sale
        if sale.enabled and sale.year is not None:
            if calendar_year == sale.year:
                payment = payments_before_month(self.schedule, calendar_year, sale.month)
                return 0.0, 0.0, payment, sale.expected_proceeds
            if calendar_year > sale.year:
                return 0.0, 0.0, 0.0, 0.0

        return home_value, balance, payment, 0.0

    def _owner_years(self, primary_year: PersonYear, spouse_year: Optional[PersonYear]) -> Dict[str, OwnerYear]:
        owners = {
            self.primary.id: OwnerYear(
                age=primary_year.age,
                retirement_age=self.primary.retirement_age,
                is_transition_year=primary_year.is_transition_year,
                months_worked=primary_year.pre_retirement_months,
            )
        }
        if self.spouse is not None and spouse_year is not None:
            owners[self.spouse.id] = OwnerYear(
                age=spouse_year.age,
                retirement_age=self.spouse.retirement_age,
                is_transition_year=spouse_year.is_transition_year,
                months_worked=spouse_year.pre_retirement_months,
            )
        return owners

    def _rmd_floor(self, ledger: LedgerState, owners: Dict[str, OwnerYear]) -> float:
        """Household RMD on each person's start-of-year pre-tax balance."""
        pre_tax_by_owner: Dict[str, float] = {}
        for account in ledger.accounts:
            if account.account_type is AccountType.TRADITIONAL_IRA:
                owner_id = account.owner_id if account.owner_id in owners else self.primary.id
                pre_tax_by_owner[owner_id] = pre_tax_by_owner.get(owner_id, 0.0) + account.balance

        birth_years = {p.id: p.birth_year for p in self.state.persons}
        return household_rmd(
            (balance, owners[owner_id].age, birth_years[owner_id])
            for owner_id, balance in pre_tax_by_owner.items()
        )

    # ----------------------------------------------------------------------
    # Main loop
    # ----------------------------------------------------------------------
    def run(self) -> ProjectionResult:
        state = self.state
        econ = state.economics
        filing_status = state.tax.filing_status

        ledger = self.initial_ledger
        other_assets = state.other_assets
        years: List[ProjectionYearRecord] = []
        account_records: List[AccountYearRecord] = []

        for year_idx, age in enumerate(range(self.current_age, self.end_age + 1)):
            calendar_year = state.as_of_year + year_idx

            # --- 1. Retirement status ---
            primary_year = person_year(self.primary, age)
            spouse_year = None
            if self.spouse is not None:
                spouse_year = person_year(self.spouse, self.spouse_current_age + year_idx)

            ages = {self.primary.id: age}
            if spouse_year is not None:
                ages[self.spouse.id] = spouse_year.age

            # --- 2-3. Income and expenses ---
            salary = calculate_salary_income(state, primary_year, spouse_year, year_idx)
            social_security = calculate_social_security(state, ages, year_idx)
            living_expenses = calculate_living_expenses(state, primary_year, year_idx)

            # --- 4. Home and mortgage ---
            home_value, mortgage_balance, mortgage_payment, sale_proceeds = self._home_for_year(calendar_year, year_idx)
            total_spending = living_expenses + mortgage_payment

            deposits: Dict[str, float] = {}
            if sale_proceeds > 0:
                target = largest_account_id(ledger, AccountType.INVESTMENT)
                if target is not None:
                    deposits[target] = sale_proceeds
                else:
                    other_assets += sale_proceeds

            # --- 5. Tax state ---
            tax_state = self._tax_state(primary_year)

            # --- 6. Withdrawals ---
            owners = self._owner_years(primary_year, spouse_year)
            rmd_amount = 0.0
            plan = NO_WITHDRAWAL
            if primary_year.is_retired:
                rmd_amount = self._rmd_floor(ledger, owners)
                plan = self.withdrawal_engine.calculate_required_withdrawal(
                    balances=compute_aggregates(ledger.accounts),
                    annual_spending=total_spending,
                    earned_income=salary,
                    social_security_income=social_security,
                    rmd_amount=rmd_amount,
                )

            # --- 7. Ledger ---
            ledger, ledger_year = step(ledger, LedgerYearInputs(
                calendar_year=calendar_year,
                year_index=year_idx,
                primary_age=age,
                owners=owners,
                default_owner_id=self.primary.id,
                withdrawals_by_type={
                    AccountType.INVESTMENT: plan.investment,
                    AccountType.TRADITIONAL_IRA: plan.pre_tax,
                    AccountType.ROTH_IRA: plan.roth,
                },
                investment_return=econ.investment_return,
                deposits=deposits,
            ))
            account_records.extend(ledger_year.records)

            # --- 6b. Taxes ---
            contributions = ledger_year.contributions
            taxes = calculate_taxes(
                gross_income=salary,
                pre_tax_contributions=contributions["pre_tax"],
                pre_tax_withdrawal=plan.pre_tax,
                capital_gains=plan.investment * econ.realized_gain_fraction,
                social_security=social_security,
                filing_status=filing_status,
                state_code=tax_state,
            )
            total_income = salary + social_security + plan.total
            net_income = total_income - taxes.total_tax

            # --- 8. Net worth ---
            balances = compute_aggregates(ledger.accounts)
            retirement_savings = compute_total_balance(ledger.accounts)
            home_equity = max(0.0, home_value - mortgage_balance)
            net_worth = retirement_savings + home_equity + other_assets

            # --- 9. Record ---
            years.append(ProjectionYearRecord(
                year=calendar_year,
                age=age,
                spouse_age=spouse_year.age if spouse_year else None,
                is_retired=primary_year.is_retired,
                is_transition_year=primary_year.is_transition_year,
                salary=_r2(salary),
                social_security=_r2(social_security),
                gross_income=_r2(salary + social_security),
                pre_tax_contributions=_r2(contributions["pre_tax"]),
                roth_contributions=_r2(contributions["roth"]),
                investment_contributions=_r2(contributions["investment"] + contributions["cash"] + contributions["other"]),
                company_match=_r2(ledger_year.company_match),
                pre_tax_withdrawal=_r2(plan.pre_tax),
                roth_withdrawal=_r2(plan.roth),
                investment_withdrawal=_r2(plan.investment),
                total_withdrawal=_r2(plan.total),
                rmd_amount=_r2(rmd_amount),
                adjusted_gross_income=_r2(taxes.adjusted_gross_income),
                taxable_income=_r2(taxes.taxable_income),
                federal_tax=_r2(taxes.federal_tax),
                state_tax=_r2(taxes.state_tax),
                capital_gains_tax=_r2(taxes.capital_gains_tax),
                total_tax=_r2(taxes.total_tax),
                effective_tax_rate=round(taxes.effective_rate(total_income), 4),
                tax_state=tax_state,
                net_income=_r2(net_income),
                living_expenses=_r2(living_expenses),
                mortgage_payment=_r2(mortgage_payment),
                total_spending=_r2(total_spending),
                cash_flow=_r2(net_income - total_spending),
                pre_tax_balance=_r2(balances["pre_tax"]),
                roth_balance=_r2(balances["roth"]),
                investment_balance=_r2(balances["investment"]),
                cash_balance=_r2(balances["cash"]),
                other_account_balance=_r2(balances["other"]),
                retirement_savings=_r2(retirement_savings),
                home_value=_r2(home_value),
                mortgage_balance=_r2(mortgage_balance),
                home_equity=_r2(home_equity),
                other_assets=_r2(other_assets),
                net_worth=_r2(net_worth),
            ))

        logger.debug(f"Projected {len(years)} years for '{self.primary.id}' ({self.current_age}-{self.end_age}).")
        return ProjectionResult(years=years, accounts_breakdown=account_records)


# =============================================================================
# Public Entry Points
# =============================================================================

def run_projection(state: ResolvedHouseholdState) -> ProjectionResult:
    return ProjectionSimulator(state).run()


def project_retirement(
    inputs: Optional[ProjectionInputs],
    persons: Iterable[Person],
    income_sources: Iterable[IncomeSource] = (),
    savings_accounts: Iterable[SavingsAccount] = (),
    expenses: Iterable[Expense] = (),
    social_security: Iterable[SocialSecurityBenefit] = (),
) -> ProjectionResult:
    """
    Resolves the household records and runs one deterministic projection.

    Returns:
        ProjectionResult with one ProjectionYearRecord per projected age and
        one AccountYearRecord per savings account per year.
    """
    state = resolve_household(inputs, persons, income_sources, savings_accounts, expenses, social_security)
    return run_projection(state)
