import io

import pytest

from models import (
    AccountType,
    FilingStatus,
    PersonRole,
    ProjectionInputs,
    SavingsAccount,
    SocialSecurityBenefit,
    StateChangeOption,
    WithdrawalStrategy,
)
from utils.currency import clean_percent
from utils.input_adapter import current_age, planner_inputs_from_dict, resolve_as_of, resolve_household
from utils.xml_loader import DEFAULT_HOUSEHOLD, parse_household_xml, try_cast


def test_base_household_defaults():
    inputs = planner_inputs_from_dict()
    assert inputs.tax.filing_status is FilingStatus.SINGLE
    assert inputs.tax.working_state == "TX"
    assert inputs.tax.withdrawal_strategy is WithdrawalStrategy.WATERFALL
    assert inputs.tax.state_change_option is StateChangeOption.AT_RETIREMENT
    assert inputs.economics.investment_return == pytest.approx(0.07)
    assert inputs.economics.inflation_rate == pytest.approx(0.03)
    assert inputs.home is None
    assert inputs.include_spouse is False


def test_overrides_are_coerced_and_unknown_keys_dropped():
    inputs = planner_inputs_from_dict(
        {
            "tax_filing_status": "Married_Joint",
            "tax_working_state": "ca",
            "economics_investment_return": "6%",
            "home_current_value": "$500,000",
            "home_loan_balance": "$300,000",
            "home_interest_rate": 4.5,
            "not_a_field": 123,
        },
        other_assets="50,000",
    )
    assert inputs.tax.filing_status is FilingStatus.MARRIED_JOINT
    assert inputs.tax.working_state == "CA"
    assert inputs.economics.investment_return == pytest.approx(0.06)
    assert inputs.home.loan_balance == 300_000
    assert inputs.home.interest_rate == pytest.approx(0.045)
    assert inputs.other_assets == 50_000
    assert not hasattr(inputs, "not_a_field")


def test_whole_number_rates_read_as_percents_like_clean_percent():
    inputs = planner_inputs_from_dict(economics_investment_return=1, economics_inflation_rate=0.02)
    assert inputs.economics.investment_return == pytest.approx(0.01)
    assert inputs.economics.investment_return == pytest.approx(clean_percent(1))
    assert inputs.economics.inflation_rate == pytest.approx(0.02)


def test_unknown_strategy_falls_back_with_warning(caplog):
    with caplog.at_level("WARNING"):
        inputs = planner_inputs_from_dict(tax_withdrawal_strategy="yolo")
    assert inputs.tax.withdrawal_strategy is WithdrawalStrategy.WATERFALL
    assert "yolo" in caplog.text


def test_resolve_requires_primary(make_person):
    with pytest.raises(ValueError):
        resolve_household(ProjectionInputs(as_of_year=2024, as_of_month=7), [make_person(role=PersonRole.SPOUSE)])


def test_resolve_rejects_death_age_below_current_age(make_person):
    with pytest.raises(ValueError):
        resolve_household(ProjectionInputs(as_of_year=2024, as_of_month=7), [make_person(death_age=60)])


def test_spouse_only_included_when_flagged(make_person, make_inputs):
    primary = make_person()
    spouse = make_person(id="p2", role="spouse")
    benefits = [SocialSecurityBenefit("p2", 20_000)]

    solo = resolve_household(make_inputs(), [primary, spouse], social_security=benefits)
    assert solo.spouse is None
    assert solo.social_security == ()

    married = resolve_household(make_inputs(include_spouse=True), [primary, spouse], social_security=benefits)
    assert married.spouse.role is PersonRole.SPOUSE
    assert len(married.persons) == 2
    assert len(married.social_security) == 1


def test_string_modes_and_money_are_normalized(make_person, make_inputs):
    account = SavingsAccount("a", "Roth", "roth-ira", "p1", current_balance="$1,500", annual_contribution="500")
    state = resolve_household(make_inputs(), [make_person(salary="$80,000", annual_salary_increase="3%")],
                              savings_accounts=[account])
    assert state.savings_accounts[0].account_type is AccountType.ROTH_IRA
    assert state.savings_accounts[0].current_balance == 1_500
    assert state.primary.salary == 80_000
    assert state.primary.annual_salary_increase == pytest.approx(0.03)


def test_resolved_state_is_frozen(make_person, make_inputs):
    state = resolve_household(make_inputs(), [make_person()])
    with pytest.raises(AttributeError):
        state.other_assets = 1


def test_as_of_defaults_to_today_only_when_missing():
    assert resolve_as_of(2030, 2) == (2030, 2)
    year, month = resolve_as_of()
    assert 1 <= month <= 12 and year >= 2024


def test_current_age_counts_birthday_month(make_person):
    person = make_person(birth_year=1960, birth_month=6)
    assert current_age(person, 2024, 5) == 63
    assert current_age(person, 2024, 6) == 64


# --- xml loader ---

def test_try_cast():
    assert try_cast("true") is True
    assert try_cast(" 42 ") == 42
    assert try_cast("0.07") == pytest.approx(0.07)
    assert try_cast("TX") == "TX"
    assert try_cast("") is None
    assert try_cast(None) is None


def test_parse_household_xml_flattens_sections():
    xml = io.StringIO(
        "<household><other_assets>100</other_assets>"
        "<tax><working_state>ny</working_state><filing_status>Single</filing_status></tax>"
        "</household>"
    )
    parsed = parse_household_xml(xml)
    assert parsed == {"other_assets": 100, "tax_working_state": "NY", "tax_filing_status": "single"}


def test_packaged_defaults_loaded():
    assert DEFAULT_HOUSEHOLD["tax_withdrawal_strategy"] == "waterfall"
    assert DEFAULT_HOUSEHOLD["economics_realized_gain_fraction"] == pytest.approx(0.5)
