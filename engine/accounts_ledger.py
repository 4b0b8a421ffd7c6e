# engine/accounts_ledger.py

"""
Per-account savings ledger.

Each projection year is one pure transition: `step(prior, year_inputs)`
returns the next LedgerState plus the year's contributions, withdrawal
allocations and per-account records. The three phases run in order:
contributions, smallest-balance-first withdrawal allocation, then growth
and finalization.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from models import (
    AccountType,
    AccountYearRecord,
    ContributionStopRule,
    Person,
    SavingsAccount,
    StopContributingMode,
)

logger = logging.getLogger(__name__)

# Withdrawals are distributed to account types in this order
ALLOCATION_ORDER: Tuple[AccountType, ...] = (
    AccountType.INVESTMENT,
    AccountType.TRADITIONAL_IRA,
    AccountType.ROTH_IRA,
    AccountType.SAVINGS,
    AccountType.OTHER,
)

# Aggregate bucket name per account type
TYPE_BUCKETS: Dict[AccountType, str] = {
    AccountType.TRADITIONAL_IRA: "pre_tax",
    AccountType.ROTH_IRA: "roth",
    AccountType.INVESTMENT: "investment",
    AccountType.SAVINGS: "cash",
    AccountType.OTHER: "other",
}

CENT = 0.01


# =============================================================================
# State Types
# =============================================================================

@dataclass(frozen=True)
class AccountState:
    id: str
    name: str
    account_type: AccountType
    owner_id: str
    balance: float
    annual_contribution: float = 0.0
    company_match: float = 0.0
    stop_rule: ContributionStopRule = field(default_factory=ContributionStopRule)
    reported: bool = True  # False for accounts synthesized from legacy person buckets


@dataclass(frozen=True)
class LedgerState:
    accounts: Tuple[AccountState, ...]


@dataclass(frozen=True)
class OwnerYear:
    """Where an account owner stands in a given projection year."""
    age: int
    retirement_age: int
    is_transition_year: bool = False
    months_worked: int = 12  # pre-retirement months; only < 12 in the transition year


@dataclass(frozen=True)
class LedgerYearInputs:
    calendar_year: int
    year_index: int
    primary_age: int
    owners: Mapping[str, OwnerYear]
    default_owner_id: str
    withdrawals_by_type: Mapping[AccountType, float] = field(default_factory=dict)
    investment_return: float = 0.0
    deposits: Mapping[str, float] = field(default_factory=dict)  # account id -> one-off deposit

    def owner(self, owner_id: str) -> OwnerYear:
        return self.owners.get(owner_id, self.owners[self.default_owner_id])


@dataclass(frozen=True)
class Allocation:
    account_id: str
    account_type: AccountType
    amount: float


@dataclass(frozen=True)
class LedgerYear:
    records: Tuple[AccountYearRecord, ...]
    contributions: Mapping[str, float]  # employee contributions by aggregate bucket
    company_match: float
    allocations: Tuple[Allocation, ...]


# =============================================================================
# Construction
# =============================================================================

def initialize_account_states(savings_accounts: Iterable[SavingsAccount]) -> LedgerState:
    return LedgerState(accounts=tuple(
        AccountState(
            id=acct.id,
            name=acct.name,
            account_type=acct.account_type,
            owner_id=acct.owner_id,
            balance=max(0.0, acct.current_balance or 0.0),
            annual_contribution=acct.annual_contribution or 0.0,
            company_match=acct.company_match or 0.0,
            stop_rule=acct.stop_rule,
        )
        for acct in savings_accounts
    ))


def _legacy_stop_rule(person: Person) -> ContributionStopRule:
    stop_age = person.contribution_stop_age
    if stop_age is None or stop_age == person.retirement_age:
        return ContributionStopRule(mode=StopContributingMode.RETIREMENT)
    return ContributionStopRule(mode=StopContributingMode.SPECIFIC_AGE, stop_age=stop_age)


def legacy_account_states(persons: Iterable[Person], match_only: bool = False) -> LedgerState:
    """
    Models each person's pre-tax / Roth / investment buckets as unreported ledger accounts.

    With `match_only`, individual accounts already carry the balances and
    employee contributions, so only buckets fed by a person-level employer
    match are kept, starting empty.
    """
    accounts: List[AccountState] = []
    for person in persons:
        rule = _legacy_stop_rule(person)
        buckets = [
            ("pre-tax", AccountType.TRADITIONAL_IRA, person.pre_tax_balance, person.pre_tax_contribution, person.pre_tax_match),
            ("roth", AccountType.ROTH_IRA, person.roth_balance, person.roth_contribution, person.roth_match),
            ("investment", AccountType.INVESTMENT, person.investment_balance, person.investment_contribution, 0.0),
        ]
        if match_only:
            buckets = [(suffix, acct_type, 0.0, 0.0, match) for suffix, acct_type, _, _, match in buckets if match]
        for suffix, acct_type, balance, contribution, match in buckets:
            accounts.append(AccountState(
                id=f"{person.id}-{suffix}",
                name=f"{person.name or person.id} {suffix}",
                account_type=acct_type,
                owner_id=person.id,
                balance=max(0.0, balance or 0.0),
                annual_contribution=contribution or 0.0,
                company_match=match or 0.0,
                stop_rule=rule,
                reported=False,
            ))
    return LedgerState(accounts=tuple(accounts))


# =============================================================================
# Phase 1: Contributions
# =============================================================================

def should_contribute(rule: ContributionStopRule,
                      age: int,
                      calendar_year: int,
                      retirement_age: int,
                      is_retirement_year: bool) -> bool:
    mode = rule.mode
    if mode is StopContributingMode.RETIREMENT:
        # the partial retirement year still contributes
        return age < retirement_age or is_retirement_year
    elif mode is StopContributingMode.SPECIFIC_AGE:
        return rule.stop_age is None or age < rule.stop_age
    elif mode is StopContributingMode.SPECIFIC_DATE:
        # stop year itself counts as a full contributing year
        return rule.stop_year is None or calendar_year <= rule.stop_year
    raise ValueError(f"Unhandled stop-contributing mode: {mode}")


def _pending_contribution(account: AccountState, year: LedgerYearInputs) -> Tuple[float, float]:
    owner = year.owner(account.owner_id)
    if not should_contribute(account.stop_rule, owner.age, year.calendar_year,
                             owner.retirement_age, owner.is_transition_year):
        return 0.0, 0.0

    fraction = owner.months_worked / 12.0 if owner.is_transition_year else 1.0
    return account.annual_contribution * fraction, account.company_match * fraction


# =============================================================================
# Phase 2: Withdrawal Allocation
# =============================================================================

def allocate_withdrawals(accounts: Sequence[AccountState],
                         withdrawals_by_type: Mapping[AccountType, float]) -> List[Allocation]:
    """
    Spreads type-level withdrawals over individual accounts, draining the
    smallest balance of each type first. Ties keep input order. Amounts
    that cannot be covered are logged and dropped.
    """
    allocations: List[Allocation] = []

    for acct_type in ALLOCATION_ORDER:
        amount_needed = withdrawals_by_type.get(acct_type, 0.0)
        if amount_needed <= CENT:
            continue

        # sorted() is stable, so equal balances keep their original order
        candidates = sorted(
            (a for a in accounts if a.account_type == acct_type and a.balance > CENT),
            key=lambda a: a.balance,
        )

        remaining = amount_needed
        for account in candidates:
            if remaining <= CENT:
                break
            amt = min(remaining, account.balance)
            allocations.append(Allocation(account.id, acct_type, amt))
            remaining -= amt

        if remaining > CENT:
            logger.warning(
                f"Unable to allocate full {acct_type.value} withdrawal. "
                f"Requested: {amount_needed:,.2f}, Remaining unallocated: {remaining:,.2f}"
            )

    return allocations


# =============================================================================
# Aggregates
# =============================================================================

def compute_aggregates(accounts: Iterable[AccountState]) -> Dict[str, float]:
    aggregates = {bucket: 0.0 for bucket in TYPE_BUCKETS.values()}
    for account in accounts:
        aggregates[TYPE_BUCKETS[account.account_type]] += account.balance
    return aggregates


def compute_total_balance(accounts: Iterable[AccountState]) -> float:
    return sum(a.balance for a in accounts)


def validate_aggregate_consistency(accounts: Iterable[AccountState], expected: Mapping[str, float]) -> bool:
    """Checks per-bucket totals against expected values within one cent; logs a warning on mismatch."""
    computed = compute_aggregates(accounts)
    consistent = all(abs(computed[k] - expected.get(k, 0.0)) < CENT for k in computed)
    if not consistent:
        logger.warning(f"Aggregate mismatch detected: computed={computed}, expected={dict(expected)}")
    return consistent


def largest_account_id(state: LedgerState, account_type: AccountType) -> Optional[str]:
    """Id of the largest account of a type (first one on ties), or None."""
    best: Optional[AccountState] = None
    for account in state.accounts:
        if account.account_type == account_type and (best is None or account.balance > best.balance):
            best = account
    return best.id if best else None


# =============================================================================
# Phase 3: Growth & Finalization (the yearly fold)
# =============================================================================

def step(prior: LedgerState, year: LedgerYearInputs) -> Tuple[LedgerState, LedgerYear]:
    """Advances every account by one projection year."""
    allocations = allocate_withdrawals(prior.accounts, year.withdrawals_by_type)
    withdrawn: Dict[str, float] = {}
    for alloc in allocations:
        withdrawn[alloc.account_id] = withdrawn.get(alloc.account_id, 0.0) + alloc.amount

    contributions = {bucket: 0.0 for bucket in TYPE_BUCKETS.values()}
    total_match = 0.0
    next_accounts: List[AccountState] = []
    records: List[AccountYearRecord] = []

    for account in prior.accounts:
        contribution, match = _pending_contribution(account, year)
        contributions[TYPE_BUCKETS[account.account_type]] += contribution
        total_match += match

        beginning = account.balance
        growth = beginning * year.investment_return if year.year_index > 0 else 0.0
        deposit = year.deposits.get(account.id, 0.0)
        withdrawal = withdrawn.get(account.id, 0.0)
        ending = max(0.0, beginning + growth + contribution + match + deposit - withdrawal)

        next_accounts.append(replace(account, balance=ending))

        if account.reported:
            records.append(AccountYearRecord(
                year=year.calendar_year,
                age=year.primary_age,
                account_id=account.id,
                account_name=account.name,
                account_type=account.account_type.value,
                owner_id=account.owner_id,
                beginning_balance=round(beginning, 2),
                contribution=round(contribution, 2),
                company_match=round(match, 2),
                deposit=round(deposit, 2),
                withdrawal=round(withdrawal, 2),
                growth=round(growth, 2),
                ending_balance=round(ending, 2),
            ))

    return LedgerState(accounts=tuple(next_accounts)), LedgerYear(
        records=tuple(records),
        contributions=contributions,
        company_match=total_match,
        allocations=tuple(allocations),
    )
