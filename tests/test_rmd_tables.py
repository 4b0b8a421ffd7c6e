import pytest

from engine.rmd_tables import (
    UNIFORM_LIFETIME_TABLE,
    household_rmd,
    required_minimum_distribution,
    rmd_start_age,
)


@pytest.mark.parametrize("birth_year,start_age", [
    (1945, 72), (1950, 72), (1951, 73), (1959, 73), (1960, 75), (1989, 75),
])
def test_rmd_start_age_by_cohort(birth_year, start_age):
    assert rmd_start_age(birth_year) == start_age


def test_rmd_at_73_for_1955_cohort():
    assert required_minimum_distribution(500_000, 73, 1955) == pytest.approx(500_000 / 26.5)
    assert required_minimum_distribution(500_000, 73, 1955) == pytest.approx(18_867.92, abs=0.01)


@pytest.mark.parametrize("birth_year", [1948, 1955, 1962])
def test_rmd_zero_before_start_and_positive_after(birth_year):
    start = rmd_start_age(birth_year)
    for age in range(50, start):
        assert required_minimum_distribution(250_000, age, birth_year) == 0
    for age in range(start, 110):
        assert required_minimum_distribution(250_000, age, birth_year) > 0


def test_ages_past_table_use_age_100_divisor():
    assert required_minimum_distribution(64_000, 104, 1950) == pytest.approx(10_000)
    assert UNIFORM_LIFETIME_TABLE[100] == 6.4


def test_no_balance_no_rmd():
    assert required_minimum_distribution(0, 80, 1945) == 0


def test_household_rmd_sums_each_owner_on_own_cohort():
    total = household_rmd([(500_000, 73, 1952), (300_000, 73, 1960)])
    assert total == pytest.approx(500_000 / 26.5)
