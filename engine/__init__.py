# engine/__init__.py

# The two entry points collaborators call
from .simulator import project_retirement, run_projection, ProjectionSimulator
from .mortgage import generate_amortization_schedule

# Tax helpers are also handy on their own (e.g. for what-if tables)
from .tax_engine import calculate_taxes, federal_tax, state_tax, capital_gains_tax, taxable_social_security
