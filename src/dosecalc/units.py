# src/dosecalc/units.py
from __future__ import annotations

from typing import Literal

from .types import ConcentrationUnit, DoseUnit

AmountUnit = Literal["mg", "mcg", "units"]

_BASIS: dict[str, AmountUnit] = {"mg/ml": "mg", "mcg/ml": "mcg", "units/ml": "units"}

# mcg and mg convert into each other; units never convert.
_MASS_FACTORS: dict[tuple[str, str], float] = {
    ("mcg", "mg"): 1.0 / 1000.0,
    ("mg", "mcg"): 1000.0,
}


def amount_basis(concentration_unit: ConcentrationUnit) -> AmountUnit:
    """Unit of the amount per mL, e.g. "mcg/ml" -> "mcg". Also the unit of a vial's total amount."""
    return _BASIS[concentration_unit]


def dose_in_basis(dose_value: float, unit: DoseUnit, concentration_unit: ConcentrationUnit) -> float:
    """
    Express a dose in the amount unit the concentration is measured in.

    500 mcg against mg/ml -> 0.5 (mg); 2 mg against mcg/ml -> 2000 (mcg).
    Same-unit pairs, and "units" against anything, pass through unchanged.
    """
    factor = _MASS_FACTORS.get((unit, amount_basis(concentration_unit)), 1.0)
    return float(dose_value) * factor


def validate_unit_compatibility(dose_unit: DoseUnit,
                                concentration_unit: ConcentrationUnit) -> tuple[bool, str | None]:
    """
    Can a dose in `dose_unit` be drawn from a solution labelled in `concentration_unit`?

    mL doses are direct volumes and work with any concentration.
    Same-unit pairs work, and so do mg <-> mcg pairs (by conversion).
    Everything else (e.g. mg against units/ml) is rejected with a message for the form.
    """
    if dose_unit == "mL":
        return True, None
    basis = amount_basis(concentration_unit)
    if dose_unit == basis or (dose_unit, basis) in _MASS_FACTORS:
        return True, None
    return False, (f"Incompatible units: {dose_unit} dose cannot be calculated "
                   f"with {concentration_unit} concentration.")


def compatible_concentration_units(dose_unit: DoseUnit) -> tuple[ConcentrationUnit, ...]:
    """Concentration units a form should offer once the dose unit is chosen."""
    if dose_unit == "mg":
        return ("mg/ml", "mcg/ml")
    if dose_unit == "mcg":
        return ("mcg/ml", "mg/ml")
    if dose_unit == "units":
        return ("units/ml",)
    return ("mg/ml", "mcg/ml", "units/ml")
