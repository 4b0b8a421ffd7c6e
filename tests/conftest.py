import pytest

from models import (
    EconomicAssumptions,
    Person,
    PersonRole,
    ProjectionInputs,
    TaxConfiguration,
)


@pytest.fixture
def make_person():
    def _make(**overrides):
        values = dict(
            id="p1",
            role=PersonRole.PRIMARY,
            name="Alex",
            birth_year=1960,
            birth_month=6,
            retirement_age=65,
            death_age=70,
        )
        values.update(overrides)
        return Person(**values)
    return _make


@pytest.fixture
def make_inputs():
    """Projection inputs pinned to July 2024 with flat economics, so results are exact."""
    def _make(**overrides):
        values = dict(
            as_of_year=2024,
            as_of_month=7,
            tax=TaxConfiguration(),
            economics=EconomicAssumptions(investment_return=0.0, inflation_rate=0.0),
        )
        values.update(overrides)
        return ProjectionInputs(**values)
    return _make
