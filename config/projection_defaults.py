# =============================================================================
# Default assumptions used when a household record leaves a value unset
# =============================================================================

# People
default_retirement_age = 65
default_death_age = 95
default_birth_month = 6
default_claiming_age = 67

# Taxes
default_filing_status = "single"
default_withdrawal_strategy = "waterfall"
default_working_state = "TX"
default_state_change_option = "at-retirement"

# Economics (fractions, not percents)
default_investment_return = 0.07
default_inflation_rate = 0.03

# Share of a taxable-account withdrawal treated as realized long-term gain
default_realized_gain_fraction = 0.50

# Safety cap on amortization length (50 years of monthly payments)
MAX_AMORTIZATION_MONTHS = 600
