import pytest

from engine import project_retirement
from models import (
    AccountType,
    ContributionStopRule,
    EconomicAssumptions,
    Expense,
    HomeAsset,
    HomeSale,
    IncomeSource,
    PersonRole,
    SavingsAccount,
    SocialSecurityBenefit,
    StateChangeOption,
    StopContributingMode,
    TaxConfiguration,
    WithdrawalStrategy,
)


def _by_age(result):
    return {record.age: record for record in result.years}


def test_one_record_per_age_through_death_age(make_person, make_inputs):
    result = project_retirement(make_inputs(), [make_person()])
    assert [r.age for r in result.years] == list(range(64, 71))
    assert [r.year for r in result.years] == list(range(2024, 2031))


def test_transition_year_apportions_income_and_expenses(make_person, make_inputs):
    # born June: 5 months worked, 7 months retired in the year of turning 65
    person = make_person(salary=120_000)
    inputs = make_inputs(pre_retirement_expenses=60_000, post_retirement_expenses=30_000)
    years = _by_age(project_retirement(inputs, [person]))

    assert years[64].salary == 120_000
    assert years[64].living_expenses == 60_000
    assert years[65].is_transition_year
    assert years[65].salary == pytest.approx(50_000)
    assert years[65].living_expenses == pytest.approx(60_000 * 5 / 12 + 30_000 * 7 / 12)
    assert years[66].salary == 0
    assert years[66].living_expenses == 30_000


def test_projection_is_idempotent(make_person, make_inputs):
    person = make_person(salary=90_000, pre_tax_balance=200_000, investment_balance=50_000)
    inputs = make_inputs(post_retirement_expenses=40_000)
    assert project_retirement(inputs, [person]) == project_retirement(inputs, [person])


def test_employee_contributions_reduce_agi_but_match_does_not(make_person, make_inputs):
    person = make_person(birth_year=1974, salary=100_000, pre_tax_contribution=10_000, pre_tax_match=5_000, death_age=52)
    first = project_retirement(make_inputs(), [person]).years[0]
    assert first.adjusted_gross_income == 90_000
    assert first.pre_tax_contributions == 10_000
    assert first.company_match == 5_000
    assert first.pre_tax_balance == 15_000


def test_rmd_only_enforced_through_shortfall_path(make_person, make_inputs):
    # Known simplification: no spending shortfall means the RMD is not taken
    person = make_person(birth_year=1952, birth_month=1, pre_tax_balance=500_000, death_age=75)
    inputs = make_inputs(as_of_year=2025)
    first = project_retirement(inputs, [person]).years[0]
    assert first.age == 73
    assert first.rmd_amount == pytest.approx(18_867.92, abs=0.01)
    assert first.pre_tax_withdrawal == 0


def test_rmd_floor_applies_when_withdrawing(make_person, make_inputs):
    person = make_person(birth_year=1952, birth_month=1, pre_tax_balance=500_000, death_age=75)
    inputs = make_inputs(as_of_year=2025, post_retirement_expenses=10_000)
    first = project_retirement(inputs, [person]).years[0]
    assert first.pre_tax_withdrawal == pytest.approx(18_867.92, abs=0.01)
    assert first.pre_tax_balance == pytest.approx(500_000 - 18_867.92, abs=0.01)


def test_bracket_fill_draws_more_pre_tax_than_waterfall(make_person, make_inputs):
    person = make_person(birth_year=1955, pre_tax_balance=1_000_000, investment_balance=500_000, death_age=72)
    results = {}
    for strategy in (WithdrawalStrategy.WATERFALL, WithdrawalStrategy.TAX_BRACKET_FILL):
        inputs = make_inputs(post_retirement_expenses=8_000, tax=TaxConfiguration(withdrawal_strategy=strategy))
        results[strategy] = project_retirement(inputs, [person]).years[0]
    assert results[WithdrawalStrategy.TAX_BRACKET_FILL].pre_tax_withdrawal >= results[WithdrawalStrategy.WATERFALL].pre_tax_withdrawal
    assert results[WithdrawalStrategy.TAX_BRACKET_FILL].pre_tax_withdrawal == pytest.approx(11_600)


def test_tax_state_switches_after_transition_year(make_person, make_inputs):
    tax = TaxConfiguration(working_state="CA", retirement_state="FL",
                           state_change_option=StateChangeOption.AT_RETIREMENT)
    years = _by_age(project_retirement(make_inputs(tax=tax), [make_person()]))
    assert [years[a].tax_state for a in (64, 65, 66)] == ["CA", "CA", "FL"]


def test_tax_state_switch_at_specific_age(make_person, make_inputs):
    tax = TaxConfiguration(working_state="NY", retirement_state="TX",
                           state_change_option=StateChangeOption.AT_SPECIFIC_AGE, state_change_age=68)
    years = _by_age(project_retirement(make_inputs(tax=tax), [make_person()]))
    assert years[67].tax_state == "NY"
    assert years[68].tax_state == "TX"


def test_income_sources_replace_legacy_salary(make_person, make_inputs):
    person = make_person(salary=100_000)
    sources = [IncomeSource("Consulting", 80_000, 0.02)]
    years = _by_age(project_retirement(make_inputs(), [person], income_sources=sources))
    assert years[64].salary == 80_000
    assert years[65].salary == pytest.approx(80_000 * 1.02 * 5 / 12, abs=0.01)


def test_spouse_salary_not_prorated_in_primary_transition_year(make_person, make_inputs):
    primary = make_person(salary=100_000)
    spouse = make_person(id="p2", role=PersonRole.SPOUSE, birth_year=1962, retirement_age=67, salary=50_000)

    married = _by_age(project_retirement(make_inputs(include_spouse=True), [primary, spouse]))
    assert married[65].salary == pytest.approx(100_000 * 5 / 12 + 50_000, abs=0.01)
    assert married[65].spouse_age == 63

    solo = _by_age(project_retirement(make_inputs(), [primary, spouse]))
    assert solo[65].salary == pytest.approx(100_000 * 5 / 12, abs=0.01)
    assert solo[65].spouse_age is None


def test_explicit_expenses_override_legacy_totals(make_person, make_inputs):
    expenses = [Expense("Housing", 2_000, True, True), Expense("Travel", 1_000, False, True)]
    inputs = make_inputs(pre_retirement_expenses=99_000, post_retirement_expenses=99_000)
    years = _by_age(project_retirement(inputs, [make_person()], expenses=expenses))
    assert years[64].living_expenses == 24_000
    assert years[66].living_expenses == 36_000


def test_social_security_starts_at_claiming_age_without_reducing_withdrawals(make_person, make_inputs):
    benefits = [SocialSecurityBenefit("p1", 24_000, claiming_age=67)]
    inputs = make_inputs(post_retirement_expenses=24_000)
    person = make_person(investment_balance=100_000)
    years = _by_age(project_retirement(inputs, [person], social_security=benefits))
    assert years[66].social_security == 0
    assert years[67].social_security == 24_000
    assert years[66].total_withdrawal == 24_000
    assert years[67].total_withdrawal == 24_000
    assert years[67].gross_income == 24_000
    assert years[67].cash_flow > years[66].cash_flow


def test_person_match_still_counts_alongside_individual_accounts(make_person, make_inputs):
    person = make_person(salary=100_000, pre_tax_contribution=10_000, pre_tax_match=5_000)
    accounts = [SavingsAccount("k", "401k", AccountType.TRADITIONAL_IRA, "p1", 50_000, 10_000)]
    result = project_retirement(make_inputs(), [person], savings_accounts=accounts)
    first = result.years[0]
    assert first.company_match == 5_000
    assert first.retirement_savings == 65_000
    reported = [a for a in result.accounts_breakdown if a.year == first.year]
    assert [a.account_id for a in reported] == ["k"]
    assert reported[0].ending_balance == 60_000


def test_accounts_breakdown_matches_reported_savings(make_person, make_inputs):
    accounts = [
        SavingsAccount("k", "401k", AccountType.TRADITIONAL_IRA, "p1", 150_000, 12_000, 6_000),
        SavingsAccount("r", "Roth", AccountType.ROTH_IRA, "p1", 40_000, 6_000),
        SavingsAccount("b", "Brokerage", AccountType.INVESTMENT, "p1", 60_000, 5_000,
                       stop_rule=ContributionStopRule(StopContributingMode.SPECIFIC_DATE, stop_year=2024)),
    ]
    inputs = make_inputs(post_retirement_expenses=50_000,
                         economics=EconomicAssumptions(investment_return=0.05, inflation_rate=0.02))
    result = project_retirement(inputs, [make_person(salary=90_000)], savings_accounts=accounts)

    assert len(result.accounts_breakdown) == len(result.years) * len(accounts)
    for record in result.years:
        endings = [a.ending_balance for a in result.accounts_breakdown if a.year == record.year]
        assert sum(endings) == pytest.approx(record.retirement_savings, abs=0.05)
        assert all(e >= 0 for e in endings)

    brokerage = {a.year: a for a in result.accounts_breakdown if a.account_id == "b"}
    assert brokerage[2024].contribution == 5_000
    assert brokerage[2025].contribution == 0


def test_home_sale_zeroes_home_and_deposits_proceeds(make_person, make_inputs):
    home = HomeAsset(
        current_value=400_000,
        loan_balance=100_000,
        interest_rate=0.045,
        monthly_payment=1_520,
        sale=HomeSale(enabled=True, year=2026, month=7, expected_proceeds=350_000),
    )
    accounts = [SavingsAccount("b", "Brokerage", AccountType.INVESTMENT, "p1", 10_000)]
    result = project_retirement(make_inputs(home=home, other_assets=50_000), [make_person()], savings_accounts=accounts)
    years = {r.year: r for r in result.years}

    assert years[2025].home_value == 400_000
    assert years[2025].mortgage_balance > 0
    assert years[2026].home_value == 0
    assert years[2026].mortgage_balance == 0
    assert years[2026].mortgage_payment == pytest.approx(6 * 1_520, abs=0.05)
    assert years[2027].mortgage_payment == 0

    deposits = {a.year: a.deposit for a in result.accounts_breakdown}
    assert deposits[2026] == 350_000
    assert deposits[2027] == 0


def test_net_worth_components(make_person, make_inputs):
    home = HomeAsset(current_value=300_000, loan_balance=100_000, interest_rate=0.05, monthly_payment=2_000)
    person = make_person(investment_balance=80_000)
    first = project_retirement(make_inputs(home=home, other_assets=25_000), [person]).years[0]
    assert first.home_equity == pytest.approx(300_000 - first.mortgage_balance)
    assert first.net_worth == pytest.approx(first.retirement_savings + first.home_equity + 25_000, abs=0.02)
    assert first.cash_flow == pytest.approx(first.net_income - first.total_spending, abs=0.02)


def test_missing_primary_person_is_rejected(make_person, make_inputs):
    with pytest.raises(ValueError):
        project_retirement(make_inputs(), [make_person(role=PersonRole.SPOUSE)])
