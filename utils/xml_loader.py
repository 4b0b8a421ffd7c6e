# utils/xml_loader.py
import xml.etree.ElementTree as ET
from typing import Any, Dict, IO, Union
from pathlib import Path

# Sections whose children are flattened to '<section>_<field>' keys
NESTED_SECTIONS = ["tax", "economics", "home"]


def parse_household_xml(source: Union[str, Path, IO]) -> Dict[str, Any]:
    """
    Load a household record from an XML file path or file-like object into a
    flat dict of typed values, e.g. 'tax_filing_status', 'home_loan_balance'.
    """
    tree = ET.parse(source)
    root = tree.getroot()

    setup_dict: Dict[str, Any] = {}

    for child in root:
        if child.tag in NESTED_SECTIONS:
            for sub in child:
                val = try_cast(sub.text)
                # State codes are upper-case, everything else lower-case
                if sub.tag in ["working_state", "retirement_state"] and isinstance(val, str):
                    val = val.strip().upper()
                elif sub.tag in ["filing_status", "state_change_option", "withdrawal_strategy"] and isinstance(val, str):
                    val = val.strip().lower()
                setup_dict[f"{child.tag}_{sub.tag}"] = val
        else:
            setup_dict[child.tag] = try_cast(child.text)

    return setup_dict


def try_cast(value: str) -> Any:
    """Try to convert string to bool, int or float if possible; empty text becomes None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    # Booleans
    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    # Integers (try first)
    try:
        if '.' not in value: # Optimization: check for decimal to avoid unnecessary exception
            return int(value)
    except ValueError:
        pass

    # Floats (try second)
    try:
        return float(value)
    except ValueError:
        pass

    return value # Return as string if all else fails


CONFIG_DIR = Path(__file__).parent.parent / "config"

DEFAULT_HOUSEHOLD = parse_household_xml(CONFIG_DIR / "default_household.xml")
