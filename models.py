# models.py
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# =============================================================================
# Mode Types
# =============================================================================

class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_JOINT = "married-joint"
    MARRIED_SEPARATE = "married-separate"
    HEAD_OF_HOUSEHOLD = "head-of-household"


class AccountType(str, Enum):
    TRADITIONAL_IRA = "traditional-ira"   # pre-tax: 401k, 403b, traditional IRA
    ROTH_IRA = "roth-ira"
    INVESTMENT = "investment-account"     # taxable brokerage
    SAVINGS = "savings-account"           # cash
    OTHER = "other-account"


class StopContributingMode(str, Enum):
    RETIREMENT = "retirement"
    SPECIFIC_AGE = "specific-age"
    SPECIFIC_DATE = "specific-date"


class WithdrawalStrategy(str, Enum):
    WATERFALL = "waterfall"
    TAX_BRACKET_FILL = "tax-bracket-fill"


class StateChangeOption(str, Enum):
    AT_RETIREMENT = "at-retirement"
    AT_SPECIFIC_AGE = "at-specific-age"


class PersonRole(str, Enum):
    PRIMARY = "primary"
    SPOUSE = "spouse"


# =============================================================================
# Input Records
# =============================================================================

@dataclass
class ContributionStopRule:
    mode: StopContributingMode = StopContributingMode.RETIREMENT
    stop_age: Optional[int] = None
    stop_year: Optional[int] = None
    stop_month: Optional[int] = None


@dataclass
class Person:
    id: str
    role: PersonRole
    birth_year: int
    birth_month: int = 6
    name: str = ""
    retirement_age: int = 65
    death_age: int = 95
    contribution_stop_age: Optional[int] = None  # None -> retirement age

    # Legacy salary fields (replaced wholesale by IncomeSource records when any exist)
    salary: float = 0.0
    annual_salary_increase: float = 0.0

    # Legacy aggregate buckets (used only when no SavingsAccount records exist)
    pre_tax_balance: float = 0.0
    pre_tax_contribution: float = 0.0
    pre_tax_match: float = 0.0
    roth_balance: float = 0.0
    roth_contribution: float = 0.0
    roth_match: float = 0.0
    investment_balance: float = 0.0
    investment_contribution: float = 0.0


@dataclass
class SavingsAccount:
    id: str
    name: str
    account_type: AccountType
    owner_id: str
    current_balance: float = 0.0
    annual_contribution: float = 0.0
    company_match: float = 0.0
    stop_rule: ContributionStopRule = field(default_factory=ContributionStopRule)


@dataclass
class Expense:
    name: str
    monthly_amount: float
    pre_retirement: bool = True
    post_retirement: bool = True


@dataclass
class IncomeSource:
    name: str
    annual_amount: float
    annual_growth: float = 0.0


@dataclass
class SocialSecurityBenefit:
    owner_id: str
    estimated_annual_benefit: float  # today's dollars
    claiming_age: int = 67


@dataclass
class HomeSale:
    enabled: bool = False
    year: Optional[int] = None
    month: int = 1
    expected_proceeds: float = 0.0


@dataclass
class HomeAsset:
    current_value: float = 0.0
    appreciation_rate: float = 0.0
    loan_balance: float = 0.0
    interest_rate: float = 0.0         # annual, fraction
    monthly_payment: float = 0.0
    extra_principal: float = 0.0       # per month
    payoff_year: Optional[int] = None
    payoff_month: Optional[int] = None
    sale: HomeSale = field(default_factory=HomeSale)


@dataclass
class TaxConfiguration:
    filing_status: FilingStatus = FilingStatus.SINGLE
    working_state: str = "TX"
    retirement_state: Optional[str] = None
    state_change_option: StateChangeOption = StateChangeOption.AT_RETIREMENT
    state_change_age: Optional[int] = None
    withdrawal_strategy: WithdrawalStrategy = WithdrawalStrategy.WATERFALL


@dataclass
class EconomicAssumptions:
    investment_return: float = 0.07
    inflation_rate: float = 0.03
    realized_gain_fraction: float = 0.5  # share of a taxable-account withdrawal treated as long-term gain


@dataclass
class ProjectionInputs:
    as_of_year: Optional[int] = None
    as_of_month: Optional[int] = None
    include_spouse: bool = False
    tax: TaxConfiguration = field(default_factory=TaxConfiguration)
    economics: EconomicAssumptions = field(default_factory=EconomicAssumptions)
    home: Optional[HomeAsset] = None
    other_assets: float = 0.0
    pre_retirement_expenses: float = 0.0    # legacy flat annual totals
    post_retirement_expenses: float = 0.0


@dataclass(frozen=True)
class ResolvedHouseholdState:
    """Fully merged, defaulted snapshot of everything a projection reads."""
    as_of_year: int
    as_of_month: int
    primary: Person
    spouse: Optional[Person]
    tax: TaxConfiguration
    economics: EconomicAssumptions
    home: Optional[HomeAsset]
    other_assets: float
    pre_retirement_expenses: float
    post_retirement_expenses: float
    income_sources: Tuple[IncomeSource, ...] = ()
    savings_accounts: Tuple[SavingsAccount, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    social_security: Tuple[SocialSecurityBenefit, ...] = ()

    @property
    def persons(self) -> List[Person]:
        return [p for p in (self.primary, self.spouse) if p is not None]


# =============================================================================
# Output Records
# =============================================================================

class _Record:
    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AmortizationRow(_Record):
    month: int
    year: int
    age: int
    start_balance: float
    interest_payment: float
    principal_payment: float
    additional_principal: float
    total_payment: float
    end_balance: float


@dataclass(frozen=True)
class AccountYearRecord(_Record):
    year: int
    age: int
    account_id: str
    account_name: str
    account_type: str
    owner_id: str
    beginning_balance: float
    contribution: float
    company_match: float
    deposit: float
    withdrawal: float
    growth: float
    ending_balance: float


@dataclass(frozen=True)
class ProjectionYearRecord(_Record):
    year: int
    age: int
    spouse_age: Optional[int]
    is_retired: bool
    is_transition_year: bool
    salary: float
    social_security: float
    gross_income: float
    pre_tax_contributions: float
    roth_contributions: float
    investment_contributions: float
    company_match: float
    pre_tax_withdrawal: float
    roth_withdrawal: float
    investment_withdrawal: float
    total_withdrawal: float
    rmd_amount: float
    adjusted_gross_income: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    capital_gains_tax: float
    total_tax: float
    effective_tax_rate: float
    tax_state: str
    net_income: float
    living_expenses: float
    mortgage_payment: float
    total_spending: float
    cash_flow: float
    pre_tax_balance: float
    roth_balance: float
    investment_balance: float
    cash_balance: float
    other_account_balance: float
    retirement_savings: float
    home_value: float
    mortgage_balance: float
    home_equity: float
    other_assets: float
    net_worth: float


@dataclass(frozen=True)
class ProjectionResult:
    years: List[ProjectionYearRecord]
    accounts_breakdown: List[AccountYearRecord]
