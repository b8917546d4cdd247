# src/dosecalc/helpers.py
import re

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)")


def parse_leading_number(text: str | None) -> float | None:
    """
    Read the number a label starts with, ignoring whatever follows.
    "1 ml" -> 1.0, "0.3 ml (30 units)" -> 0.3, "3" -> 3.0, "ml" -> None
    """
    if text is None:
        return None
    m = _LEADING_NUMBER.match(str(text))
    if m is None:
        return None
    return float(m.group(1))


def format_decimal(x: float, places: int) -> str:
    """
    Round to `places` and print without trailing zeros.
    0.25000000000000004 -> "0.25", 29.999999999999996 -> "30", 0.005 -> "0.005"
    """
    text = f"{round(float(x), places):.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


# --------------------------
# Small input validators
# --------------------------
def _validate_positive(name: str, x: float) -> None:
    if not (x > 0):
        raise ValueError(f"{name} must be > 0 (got {x}).")

def _validate_increasing(name: str, xs) -> None:
    for prev, curr in zip(xs, xs[1:]):
        if not (curr > prev):
            raise ValueError(f"{name} must be strictly increasing (got {prev} then {curr}).")
