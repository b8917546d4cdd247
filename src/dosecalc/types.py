# src/dosecalc/types.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, get_args

from .helpers import parse_leading_number, _validate_positive

# Volumes are always MILLILITRES internally. Insulin "units" only appear on the marking scale.
DoseUnit = Literal["mg", "mcg", "mL", "units"]
ConcentrationUnit = Literal["mg/ml", "mcg/ml", "units/ml"]
SyringeType = Literal["Insulin", "Standard"]

ErrorKind = Literal[
    "UNIT_MISMATCH",
    "CONCENTRATION_MISSING",
    "CONCENTRATION_TOO_LOW",
    "VOLUME_THRESHOLD_ERROR",
    "INSULIN_PRACTICAL_LIMIT",
    "INSUFFICIENT_TOTAL_AMOUNT",
    "SYRINGE_CAPACITY_EXCEEDED",
    "MARKING_PRECISION_GUIDANCE",
]

# Kinds that suppress the marking recommendation.
BLOCKING_KINDS: frozenset[str] = frozenset({
    "UNIT_MISMATCH",
    "CONCENTRATION_MISSING",
    "CONCENTRATION_TOO_LOW",
    "VOLUME_THRESHOLD_ERROR",
    "INSULIN_PRACTICAL_LIMIT",
    "INSUFFICIENT_TOTAL_AMOUNT",
})


@dataclass(frozen=True)
class Syringe:
    """
    The syringe the user will draw with.

    type   : "Insulin" (marked in units, U-100) or "Standard" (marked in mL)
    volume : printed size label, e.g. "1 ml", "3 ml", "0.3 ml (30 units)"
    """
    type: SyringeType
    volume: str

    def __post_init__(self) -> None:
        if self.type not in get_args(SyringeType):
            raise ValueError(f"type must be one of {get_args(SyringeType)} (got {self.type!r}).")
        capacity = parse_leading_number(self.volume)
        if capacity is None or not capacity > 0:
            raise ValueError(f"volume must start with a positive capacity in ml (got {self.volume!r}).")

    @property
    def capacity_ml(self) -> float:
        """Printed barrel capacity in mL, parsed from the volume label."""
        return parse_leading_number(self.volume)  # validated in __post_init__


@dataclass(frozen=True)
class DoseInput:
    """
    Everything the engine needs for one calculation, already parsed by the caller.

    dose_value         : prescribed dose, in `unit` (must be > 0)
    unit               : mg, mcg, units, or mL (mL means "draw this volume", no concentration needed)
    syringe            : the selected Syringe
    concentration      : strength of the solution in `concentration_unit`, if known directly
    concentration_unit : mg/ml, mcg/ml or units/ml
    total_amount       : amount in the vial (same basis as the concentration unit), for reconstitution
    solution_volume    : diluent volume added to the vial, as typed (e.g. "3" or "3 ml")

    When `concentration` is missing, it is derived as total_amount / solution_volume.
    """
    dose_value: float
    unit: DoseUnit
    syringe: Syringe
    concentration: float | None = None
    concentration_unit: ConcentrationUnit = "mg/ml"
    total_amount: float | None = None
    solution_volume: str | None = None

    def __post_init__(self) -> None:
        if not (isinstance(self.dose_value, (int, float)) and math.isfinite(self.dose_value)):
            raise ValueError(f"dose_value must be a finite number (got {self.dose_value!r}).")
        _validate_positive("dose_value", self.dose_value)
        if self.unit not in get_args(DoseUnit):
            raise ValueError(f"unit must be one of {get_args(DoseUnit)} (got {self.unit!r}).")
        if self.concentration_unit not in get_args(ConcentrationUnit):
            raise ValueError(
                f"concentration_unit must be one of {get_args(ConcentrationUnit)} (got {self.concentration_unit!r})."
            )
        if not isinstance(self.syringe, Syringe):
            raise ValueError(f"syringe must be a Syringe (got {type(self.syringe).__name__}).")


@dataclass(frozen=True)
class CalculationResult:
    """
    Outcome of one calculation. Problems are reported here, never raised.

    calculated_volume       : draw volume in mL (None when it could not be derived)
    calculated_concentration: resolved concentration, in the input's concentration unit
    recommended_marking     : exact value to draw to (mL for Standard, units for Insulin), as text
    calculation_error       : user-facing safety or precision message
    error_kind              : taxonomy tag for calculation_error
    """
    calculated_volume: float | None = None
    calculated_concentration: float | None = None
    recommended_marking: str | None = None
    calculation_error: str | None = None
    error_kind: ErrorKind | None = None

    @property
    def blocked(self) -> bool:
        return self.error_kind in BLOCKING_KINDS

    @property
    def ready_to_inject(self) -> bool:
        return self.recommended_marking is not None and not self.blocked
