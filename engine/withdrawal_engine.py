# withdrawal_engine.py

import logging
from dataclasses import dataclass
from typing import Dict

from models import WithdrawalStrategy
from engine.tax_engine import (
    marginal_bracket_headroom,
    apply_standard_deduction,
    taxable_social_security,
)

logger = logging.getLogger(__name__)

# Handles logic for deciding how much to draw from each account type
#

@dataclass(frozen=True)
class WithdrawalPlan:
    investment: float = 0.0
    pre_tax: float = 0.0
    roth: float = 0.0

    @property
    def total(self) -> float:
        return self.investment + self.pre_tax + self.roth


NO_WITHDRAWAL = WithdrawalPlan()


class WithdrawalEngine:
    """
    Decides how much to draw from taxable investment, pre-tax and Roth
    balances to cover a spending shortfall, honoring the RMD floor.
    """
    def __init__(self, strategy, filing_status="single"):
        self.strategy = self._coerce_strategy(strategy)
        self.filing_status = filing_status

    @staticmethod
    def _coerce_strategy(strategy) -> WithdrawalStrategy:
        try:
            return WithdrawalStrategy(strategy)
        except ValueError:
            logger.warning(f"Unknown withdrawal strategy '{strategy}'. Defaulting to waterfall.")
            return WithdrawalStrategy.WATERFALL

    def calculate_required_withdrawal(self,
                                      balances: Dict[str, float],
                                      annual_spending: float,
                                      earned_income: float,
                                      social_security_income: float = 0.0,
                                      rmd_amount: float = 0.0) -> WithdrawalPlan:
        """
        Entry point: withdrawal needed this year under the configured strategy.

        Args:
            balances: Aggregate balances keyed 'investment', 'pre_tax', 'roth'.
            annual_spending: Total spending to cover (living expenses + mortgage).
            earned_income: Salary and other income sources.
            social_security_income: Social Security benefits received. Only feeds the
                taxable-income estimate for bracket fill; it does not reduce the shortfall.
            rmd_amount: Required minimum distribution owed on pre-tax balances.

        Returns:
            WithdrawalPlan. Nothing is withdrawn when income covers spending,
            even if an RMD is due; RMDs are only enforced on the shortfall path.
        """
        shortfall = annual_spending - earned_income
        if shortfall <= 0:
            return NO_WITHDRAWAL

        if self.strategy is WithdrawalStrategy.WATERFALL:
            return self._waterfall(balances, shortfall, rmd_amount)
        elif self.strategy is WithdrawalStrategy.TAX_BRACKET_FILL:
            return self._tax_bracket_fill(balances, shortfall, rmd_amount, earned_income, social_security_income)
        raise ValueError(f"Unhandled withdrawal strategy: {self.strategy}")

    # ----------------------------------------------------------------------
    # Strategies
    # ----------------------------------------------------------------------
    def _waterfall(self, balances: Dict[str, float], shortfall: float, rmd_amount: float) -> WithdrawalPlan:
        """Investment first, then pre-tax, then Roth; pre-tax forced up to the RMD."""
        investment_bal = max(0.0, balances.get("investment", 0.0))
        pre_tax_bal = max(0.0, balances.get("pre_tax", 0.0))
        roth_bal = max(0.0, balances.get("roth", 0.0))

        remaining = max(shortfall, rmd_amount)

        from_investment = min(remaining, investment_bal)
        remaining -= from_investment

        from_pre_tax = min(remaining, pre_tax_bal)
        remaining -= from_pre_tax

        if rmd_amount > from_pre_tax and pre_tax_bal > 0:
            from_pre_tax = min(rmd_amount, pre_tax_bal)

        from_roth = min(max(0.0, remaining), roth_bal)

        return WithdrawalPlan(investment=from_investment, pre_tax=from_pre_tax, roth=from_roth)

    def _tax_bracket_fill(self,
                          balances: Dict[str, float],
                          shortfall: float,
                          rmd_amount: float,
                          earned_income: float,
                          social_security_income: float) -> WithdrawalPlan:
        """Pre-tax up to the current bracket's headroom, then investment, then Roth."""
        investment_bal = max(0.0, balances.get("investment", 0.0))
        pre_tax_bal = max(0.0, balances.get("pre_tax", 0.0))
        roth_bal = max(0.0, balances.get("roth", 0.0))

        taxable_ss = taxable_social_security(social_security_income, earned_income, self.filing_status)
        taxable_without_withdrawal = apply_standard_deduction(earned_income + taxable_ss, self.filing_status)
        headroom = marginal_bracket_headroom(taxable_without_withdrawal, self.filing_status)

        from_pre_tax = 0.0
        if headroom > 0 and pre_tax_bal > 0:
            from_pre_tax = min(headroom, pre_tax_bal)

        if rmd_amount > from_pre_tax and pre_tax_bal > 0:
            from_pre_tax = min(rmd_amount, pre_tax_bal)

        remaining = max(0.0, shortfall - from_pre_tax)

        from_investment = min(remaining, investment_bal)
        remaining -= from_investment

        from_roth = min(remaining, roth_bal)

        return WithdrawalPlan(investment=from_investment, pre_tax=from_pre_tax, roth=from_roth)
