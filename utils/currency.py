# utils/currency.py
from typing import Union

# ----------------------------------------------------------------------
# Helpers for coercing collaborator-supplied values
# ----------------------------------------------------------------------

def clean_currency(val) -> float:
    """
    Cleans a currency string (e.g., "$140,000.00") into a float (140000.0).
    Blank or unparseable values become 0.0.
    """
    if not val:
        return 0.0

    try:
        # Strip non-digit, non-decimal characters, then convert to float.
        cleaned_val = str(val).replace('$', '').replace(',', '').strip()
        if not cleaned_val:
            return 0.0
        return float(cleaned_val)
    except ValueError:
        return 0.0


def clean_percent(raw_input: Union[str, float, int]) -> Union[float, None]:
    """
    Cleans raw input (e.g., '0.23', '23%', '23') and converts it to a float
    where 1.0 represents 100%. Handles flexible user input.
    """
    if raw_input is None:
        return None

    if isinstance(raw_input, (float, int)):
        # If the input is a number between 1 and 100, treat it as a percentage
        # e.g., 23 -> 0.23
        if 1.0 <= float(raw_input) <= 100.0:
            return float(raw_input) / 100.0
        # Otherwise, treat it as a decimal, e.g., 0.23 -> 0.23
        return float(raw_input)

    s = str(raw_input).strip()
    if not s:
        return None

    has_percent_sign = '%' in s
    s = s.replace('%', '').replace(',', '').replace(' ', '').strip()

    try:
        numeric_val = float(s)
    except ValueError:
        return None

    # '0.5%' is half a percent, not fifty
    if has_percent_sign or 1.0 <= numeric_val <= 100.0:
        return numeric_val / 100.0
    return numeric_val


def format_currency_output(val, decimals=0):
    """
    Formats a float/int into a clean currency string ($1,234,567.00).

    Args:
        val (float): The numerical value to format.
        decimals (int): Number of decimal places.
    """
    if val is None:
        val = 0.0
    return f"${val:,.{decimals}f}"
