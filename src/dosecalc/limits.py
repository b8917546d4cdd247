# src/dosecalc/limits.py
from dataclasses import dataclass


@dataclass(frozen=True)
class SafetyLimits:
    """
    Numeric policy of the engine. Inject a different instance to tighten or relax it.

    min_volume_ml / max_volume_ml : inclusive safe draw window; anything outside is rejected
    insulin_practical_max_ml      : largest single draw allowed with an insulin syringe,
                                    whatever the barrel says
    min_concentration_mg_per_ml   : floor for mg/ml solutions; below it the entry is treated as a mistake
    min_concentration_mcg_per_ml  : same floor for mcg/ml solutions
    insulin_units_per_ml          : U-100 convention (1 unit = 0.01 mL)
    ml_places / unit_places       : rounding of the recommended marking for display
    mark_tolerance                : how close the displayed value must be to a printed mark to count as on it
    """
    min_volume_ml: float = 0.005
    max_volume_ml: float = 2.0
    insulin_practical_max_ml: float = 1.0
    min_concentration_mg_per_ml: float = 0.01
    min_concentration_mcg_per_ml: float = 1.0
    insulin_units_per_ml: float = 100.0
    ml_places: int = 3
    unit_places: int = 2
    mark_tolerance: float = 1e-6


DEFAULT_LIMITS = SafetyLimits()
