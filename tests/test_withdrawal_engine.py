import pytest

from engine.withdrawal_engine import WithdrawalEngine
from models import WithdrawalStrategy


def _balances(investment=0.0, pre_tax=0.0, roth=0.0):
    return {"investment": investment, "pre_tax": pre_tax, "roth": roth}


def test_rmd_not_forced_when_income_covers_spending():
    # Known simplification: RMD only applies on the shortfall path
    engine = WithdrawalEngine("waterfall")
    plan = engine.calculate_required_withdrawal(
        _balances(pre_tax=500_000), annual_spending=40_000, earned_income=50_000, rmd_amount=18_000
    )
    assert plan.total == 0


def test_waterfall_draws_investment_then_pre_tax():
    plan = WithdrawalEngine("waterfall").calculate_required_withdrawal(
        _balances(50_000, 100_000, 100_000), annual_spending=80_000, earned_income=0
    )
    assert (plan.investment, plan.pre_tax, plan.roth) == (50_000, 30_000, 0)
    assert plan.total == 80_000


def test_waterfall_touches_roth_only_after_other_buckets_run_dry():
    plan = WithdrawalEngine(WithdrawalStrategy.WATERFALL).calculate_required_withdrawal(
        _balances(10_000, 10_000, 100_000), annual_spending=50_000, earned_income=0
    )
    assert (plan.investment, plan.pre_tax, plan.roth) == (10_000, 10_000, 30_000)


def test_waterfall_forces_pre_tax_up_to_rmd():
    plan = WithdrawalEngine("waterfall").calculate_required_withdrawal(
        _balances(100_000, 200_000), annual_spending=30_000, earned_income=0, rmd_amount=10_000
    )
    assert plan.investment == 30_000
    assert plan.pre_tax == 10_000


def test_waterfall_rmd_capped_by_balance():
    plan = WithdrawalEngine("waterfall").calculate_required_withdrawal(
        _balances(pre_tax=5_000), annual_spending=1_000, earned_income=0, rmd_amount=8_000
    )
    assert plan.pre_tax == 5_000


def test_social_security_does_not_reduce_shortfall():
    plan = WithdrawalEngine("waterfall").calculate_required_withdrawal(
        _balances(investment=100_000), annual_spending=50_000, earned_income=0, social_security_income=20_000
    )
    assert plan.total == 50_000
    assert plan.investment == 50_000


def test_bracket_fill_draws_pre_tax_to_top_of_bracket():
    plan = WithdrawalEngine("tax-bracket-fill", "single").calculate_required_withdrawal(
        _balances(500_000, 500_000, 500_000), annual_spending=20_000, earned_income=0
    )
    assert plan.pre_tax == pytest.approx(11_600)
    assert plan.investment == pytest.approx(8_400)
    assert plan.roth == 0


def test_bracket_fill_draws_at_least_waterfall_pre_tax_when_headroom_exceeds_shortfall():
    balances = _balances(500_000, 1_000_000, 200_000)
    kwargs = dict(annual_spending=40_000, earned_income=30_000)
    fill = WithdrawalEngine("tax-bracket-fill").calculate_required_withdrawal(balances, **kwargs)
    waterfall = WithdrawalEngine("waterfall").calculate_required_withdrawal(balances, **kwargs)
    # taxable income before withdrawals is 15,400, leaving 31,750 in the 12% bracket
    assert fill.pre_tax == pytest.approx(31_750)
    assert fill.pre_tax >= waterfall.pre_tax


def test_bracket_fill_enforces_rmd_floor():
    plan = WithdrawalEngine("tax-bracket-fill").calculate_required_withdrawal(
        _balances(pre_tax=1_000_000), annual_spending=20_000, earned_income=15_000,
        rmd_amount=50_000,
    )
    assert plan.pre_tax == pytest.approx(50_000)


def test_unknown_strategy_falls_back_to_waterfall(caplog):
    with caplog.at_level("WARNING"):
        engine = WithdrawalEngine("roth-first")
    assert engine.strategy is WithdrawalStrategy.WATERFALL
    assert "roth-first" in caplog.text
