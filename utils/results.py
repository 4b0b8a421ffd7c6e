# utils/results.py
#
# Tabular views of projection output for presentation collaborators
#

from typing import Iterable, List

import pandas as pd

from models import AccountYearRecord, AmortizationRow, ProjectionResult, ProjectionYearRecord
from utils.currency import format_currency_output


def _to_frame(records: Iterable, columns: List[str]) -> pd.DataFrame:
    rows = [r.as_dict() for r in records]
    return pd.DataFrame(rows, columns=columns)


def years_to_frame(years: Iterable[ProjectionYearRecord]) -> pd.DataFrame:
    """One row per projected year, indexed by age."""
    df = _to_frame(years, list(ProjectionYearRecord.__dataclass_fields__))
    return df.set_index("age", drop=False)


def accounts_to_frame(records: Iterable[AccountYearRecord]) -> pd.DataFrame:
    return _to_frame(records, list(AccountYearRecord.__dataclass_fields__))


def schedule_to_frame(schedule: Iterable[AmortizationRow]) -> pd.DataFrame:
    return _to_frame(schedule, list(AmortizationRow.__dataclass_fields__))


def account_balance_pivot(records: Iterable[AccountYearRecord]) -> pd.DataFrame:
    """Ending balance per account (columns) per year (rows)."""
    df = accounts_to_frame(records)
    if df.empty:
        return df
    return df.pivot_table(index="year", columns="account_name", values="ending_balance", aggfunc="sum")


def summarize_projection(result: ProjectionResult) -> dict:
    """Headline figures: retirement-date savings, peak net worth, lifetime taxes, first shortfall year."""
    df = years_to_frame(result.years)
    if df.empty:
        return {}

    retired = df[df["is_retired"]]
    at_retirement = retired.iloc[0]["retirement_savings"] if not retired.empty else df.iloc[-1]["retirement_savings"]
    negative = df[df["cash_flow"] < 0]

    return {
        "savings_at_retirement": format_currency_output(at_retirement),
        "peak_net_worth": format_currency_output(df["net_worth"].max()),
        "lifetime_taxes": format_currency_output(df["total_tax"].sum()),
        "first_negative_cash_flow_year": int(negative.iloc[0]["year"]) if not negative.empty else None,
    }
