import datetime
import logging
from dataclasses import fields, replace
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar

from models import (
    AccountType,
    ContributionStopRule,
    EconomicAssumptions,
    Expense,
    FilingStatus,
    HomeAsset,
    HomeSale,
    IncomeSource,
    Person,
    PersonRole,
    ProjectionInputs,
    ResolvedHouseholdState,
    SavingsAccount,
    SocialSecurityBenefit,
    StateChangeOption,
    StopContributingMode,
    TaxConfiguration,
    WithdrawalStrategy,
)
from config.projection_defaults import (
    default_birth_month,
    default_death_age,
    default_retirement_age,
)
from utils.currency import clean_currency, clean_percent
from utils.tax_utils import normalize_filing_status
from utils.xml_loader import DEFAULT_HOUSEHOLD

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


# ----------------------------------------------------------------------
# Value coercion
# ----------------------------------------------------------------------

def resolve_as_of(as_of_year: Optional[int] = None, as_of_month: Optional[int] = None) -> Tuple[int, int]:
    """Fills a missing as-of year/month from today's date."""
    if as_of_year is None or as_of_month is None:
        today = datetime.date.today()
        as_of_year = as_of_year if as_of_year is not None else today.year
        as_of_month = as_of_month if as_of_month is not None else today.month
    return int(as_of_year), int(as_of_month)


def _money(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    return clean_currency(value)


def _rate(value: Any, default: float = 0.0) -> float:
    """Fraction from '7%', '7', 7 or 0.07, read the same way as `clean_percent`."""
    if value is None:
        return default
    cleaned = clean_percent(value)
    return default if cleaned is None else cleaned


def _enum(enum_cls: Type[E], value: Any, default: E) -> E:
    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} '{value}'. Defaulting to '{default.value}'.")
        return default


def _state_code(value: Any) -> Optional[str]:
    if not value:
        return None
    return str(value).strip().upper()


# ----------------------------------------------------------------------
# Base record + overrides -> ProjectionInputs
# ----------------------------------------------------------------------

def _section(merged: Mapping[str, Any], prefix: str, dataclass_type) -> Dict[str, Any]:
    """Pulls '<prefix>_<field>' keys that match the dataclass's fields."""
    field_names = {f.name for f in fields(dataclass_type)}
    return {
        key[len(prefix) + 1:]: value
        for key, value in merged.items()
        if key.startswith(prefix + "_") and key[len(prefix) + 1:] in field_names
    }


def planner_inputs_from_dict(overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ProjectionInputs:
    """
    Builds ProjectionInputs by merging the XML base household with caller
    overrides, using reflection (dataclasses.fields) so only known fields pass.
    Flat keys use the XML naming: 'tax_filing_status', 'home_loan_balance', ...
    """
    # 1. Start with defaults loaded from the XML household file
    merged: Dict[str, Any] = DEFAULT_HOUSEHOLD.copy()

    # 2. Caller values override matching defaults
    merged.update(overrides or {})
    merged.update(kwargs)

    # 3. Nested sections
    tax_vals = _section(merged, "tax", TaxConfiguration)
    tax = TaxConfiguration(
        filing_status=FilingStatus(normalize_filing_status(tax_vals.get("filing_status"))),
        working_state=_state_code(tax_vals.get("working_state")) or TaxConfiguration.working_state,
        retirement_state=_state_code(tax_vals.get("retirement_state")),
        state_change_option=_enum(StateChangeOption, tax_vals.get("state_change_option"), StateChangeOption.AT_RETIREMENT),
        state_change_age=tax_vals.get("state_change_age"),
        withdrawal_strategy=_enum(WithdrawalStrategy, tax_vals.get("withdrawal_strategy"), WithdrawalStrategy.WATERFALL),
    )

    econ_vals = _section(merged, "economics", EconomicAssumptions)
    economics = EconomicAssumptions(**{
        name: _rate(value, getattr(EconomicAssumptions, name))
        for name, value in econ_vals.items()
    })

    home = HomeAsset(
        current_value=_money(merged.get("home_current_value")),
        appreciation_rate=_rate(merged.get("home_appreciation_rate")),
        loan_balance=_money(merged.get("home_loan_balance")),
        interest_rate=_rate(merged.get("home_interest_rate")),
        monthly_payment=_money(merged.get("home_monthly_payment")),
        extra_principal=_money(merged.get("home_extra_principal")),
        payoff_year=merged.get("home_payoff_year"),
        payoff_month=merged.get("home_payoff_month"),
        sale=HomeSale(
            enabled=bool(merged.get("home_sale_enabled")),
            year=merged.get("home_sale_year"),
            month=merged.get("home_sale_month") or 1,
            expected_proceeds=_money(merged.get("home_sale_proceeds")),
        ),
    )
    has_home = home.current_value > 0 or home.loan_balance > 0

    # 4. Top-level fields, filtered by reflection
    top_level = {f.name for f in fields(ProjectionInputs)} - {"tax", "economics", "home"}
    final_inputs = {key: value for key, value in merged.items() if key in top_level}
    for key in ("other_assets", "pre_retirement_expenses", "post_retirement_expenses"):
        final_inputs[key] = _money(final_inputs.get(key))
    final_inputs["include_spouse"] = bool(final_inputs.get("include_spouse"))

    return ProjectionInputs(tax=tax, economics=economics, home=home if has_home else None, **final_inputs)


# ----------------------------------------------------------------------
# Explicit merge step -> ResolvedHouseholdState
# ----------------------------------------------------------------------

def _resolve_person(person: Person) -> Person:
    return replace(
        person,
        role=_enum(PersonRole, person.role, PersonRole.PRIMARY),
        birth_month=person.birth_month or default_birth_month,
        retirement_age=person.retirement_age if person.retirement_age is not None else default_retirement_age,
        death_age=person.death_age if person.death_age is not None else default_death_age,
        salary=_money(person.salary),
        annual_salary_increase=_rate(person.annual_salary_increase),
        pre_tax_balance=max(0.0, _money(person.pre_tax_balance)),
        pre_tax_contribution=_money(person.pre_tax_contribution),
        pre_tax_match=_money(person.pre_tax_match),
        roth_balance=max(0.0, _money(person.roth_balance)),
        roth_contribution=_money(person.roth_contribution),
        roth_match=_money(person.roth_match),
        investment_balance=max(0.0, _money(person.investment_balance)),
        investment_contribution=_money(person.investment_contribution),
    )


def _resolve_account(account: SavingsAccount) -> SavingsAccount:
    rule = account.stop_rule or ContributionStopRule()
    return replace(
        account,
        account_type=_enum(AccountType, account.account_type, AccountType.OTHER),
        current_balance=max(0.0, _money(account.current_balance)),
        annual_contribution=_money(account.annual_contribution),
        company_match=_money(account.company_match),
        stop_rule=replace(rule, mode=_enum(StopContributingMode, rule.mode, StopContributingMode.RETIREMENT)),
    )


def _resolve_tax(tax: Optional[TaxConfiguration]) -> TaxConfiguration:
    tax = tax or TaxConfiguration()
    return replace(
        tax,
        filing_status=FilingStatus(normalize_filing_status(tax.filing_status)),
        working_state=_state_code(tax.working_state) or TaxConfiguration.working_state,
        retirement_state=_state_code(tax.retirement_state),
        state_change_option=_enum(StateChangeOption, tax.state_change_option, StateChangeOption.AT_RETIREMENT),
        withdrawal_strategy=_enum(WithdrawalStrategy, tax.withdrawal_strategy, WithdrawalStrategy.WATERFALL),
    )


def current_age(person: Person, as_of_year: int, as_of_month: int) -> int:
    age = as_of_year - person.birth_year
    if as_of_month < person.birth_month:
        age -= 1
    return age


def resolve_household(
    inputs: Optional[ProjectionInputs],
    persons: Iterable[Person],
    income_sources: Iterable[IncomeSource] = (),
    savings_accounts: Iterable[SavingsAccount] = (),
    expenses: Iterable[Expense] = (),
    social_security: Iterable[SocialSecurityBenefit] = (),
) -> ResolvedHouseholdState:
    """
    Merges caller records over documented defaults into one immutable
    ResolvedHouseholdState. Structural problems raise ValueError here, before
    any projection year is computed.
    """
    inputs = inputs or ProjectionInputs()
    as_of_year, as_of_month = resolve_as_of(inputs.as_of_year, inputs.as_of_month)

    resolved_persons = [_resolve_person(p) for p in persons]
    primary = next((p for p in resolved_persons if p.role == PersonRole.PRIMARY), None)
    if primary is None:
        raise ValueError("A primary person is required to run a projection.")

    spouse = None
    if inputs.include_spouse:
        spouse = next((p for p in resolved_persons if p.role == PersonRole.SPOUSE), None)
        if spouse is None:
            logger.warning("Spouse inclusion requested but no spouse record supplied.")

    for person in (primary, spouse):
        if person is not None and person.death_age < current_age(person, as_of_year, as_of_month):
            raise ValueError(f"Death age {person.death_age} for '{person.id}' is below their current age.")

    included_ids = {p.id for p in (primary, spouse) if p is not None}
    benefits = tuple(
        replace(b, estimated_annual_benefit=_money(b.estimated_annual_benefit))
        for b in social_security if b.owner_id in included_ids
    )

    economics = inputs.economics or EconomicAssumptions()
    economics = replace(
        economics,
        investment_return=_rate(economics.investment_return, EconomicAssumptions.investment_return),
        inflation_rate=_rate(economics.inflation_rate, EconomicAssumptions.inflation_rate),
        realized_gain_fraction=_rate(economics.realized_gain_fraction, EconomicAssumptions.realized_gain_fraction),
    )

    return ResolvedHouseholdState(
        as_of_year=as_of_year,
        as_of_month=as_of_month,
        primary=primary,
        spouse=spouse,
        tax=_resolve_tax(inputs.tax),
        economics=economics,
        home=inputs.home,
        other_assets=_money(inputs.other_assets),
        pre_retirement_expenses=_money(inputs.pre_retirement_expenses),
        post_retirement_expenses=_money(inputs.post_retirement_expenses),
        income_sources=tuple(
            replace(s, annual_amount=_money(s.annual_amount), annual_growth=_rate(s.annual_growth))
            for s in income_sources
        ),
        savings_accounts=tuple(_resolve_account(a) for a in savings_accounts),
        expenses=tuple(replace(e, monthly_amount=_money(e.monthly_amount)) for e in expenses),
        social_security=benefits,
    )
