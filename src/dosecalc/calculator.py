# src/dosecalc/calculator.py
import logging
from typing import Sequence

from .checks import DEFAULT_CHECKS, Draw, SafetyCheck, run_checks
from .helpers import format_decimal, parse_leading_number
from .limits import DEFAULT_LIMITS, SafetyLimits
from .markings import MarkingTable, precision_guidance
from .types import CalculationResult, DoseInput
from .units import amount_basis, dose_in_basis, validate_unit_compatibility

logger = logging.getLogger(__name__)

MISSING_CONCENTRATION_MESSAGE = "Concentration is invalid or missing."


class DoseCalculator:
    """
    Turns a DoseInput into a draw volume, a syringe marking and at most one message.

    The marking table, numeric limits and check list are injected so a calculator can be
    built around a user's custom syringes or a stricter policy. Instances hold no
    per-call state; `calculate` is safe to call from anywhere, any number of times.
    """

    def __init__(self, marking_table: MarkingTable | None = None,
                 limits: SafetyLimits = DEFAULT_LIMITS,
                 checks: Sequence[SafetyCheck] = DEFAULT_CHECKS):
        self.marking_table = marking_table if marking_table is not None else MarkingTable.default()
        self.limits = limits
        self.checks = tuple(checks)

    def calculate(self, dose: DoseInput) -> CalculationResult:
        """
        Steps, in order:
          1) reject mass doses against a units/ml solution, resolve the concentration (direct,
             or total_amount / solution_volume) and reject degenerate ones
          2) derive the draw volume in mL
          3) run the ordered safety checks; a blocking finding ends the calculation
          4) recommend the exact value on the syringe's own scale and, when nothing else
             needs saying, explain where it sits between the printed marks
        """
        logger.debug("calculate: %s", dose)

        # 1) concentration
        concentration = None
        if dose.unit != "mL":
            compatible, mismatch = validate_unit_compatibility(dose.unit, dose.concentration_unit)
            # "units" doses pass through against any concentration; mass against units/ml does not
            if not compatible and dose.unit != "units":
                logger.info("calculate: %s dose against %s", dose.unit, dose.concentration_unit)
                return CalculationResult(calculation_error=mismatch, error_kind="UNIT_MISMATCH")
            concentration, derived = self._resolve_concentration(dose)
            if concentration is None:
                logger.info("calculate: no usable concentration")
                return CalculationResult(calculation_error=MISSING_CONCENTRATION_MESSAGE,
                                         error_kind="CONCENTRATION_MISSING")
            too_low = self._low_concentration_message(dose, concentration, derived)
            if too_low is not None:
                logger.info("calculate: concentration %r below the floor", concentration)
                return CalculationResult(calculated_concentration=concentration,
                                         calculation_error=too_low,
                                         error_kind="CONCENTRATION_TOO_LOW")

        # 2) volume (kept unrounded for every comparison below)
        if dose.unit == "mL":
            volume_ml = float(dose.dose_value)
        else:
            volume_ml = dose_in_basis(dose.dose_value, dose.unit, dose.concentration_unit) / concentration
        logger.debug("calculate: volume %r ml", volume_ml)

        # 3) ordered checks
        findings = run_checks(self.checks, Draw(dose=dose, volume_ml=volume_ml, limits=self.limits))
        if findings and findings[-1].blocking:
            blocking = findings[-1]
            logger.info("calculate: blocked by %s", blocking.kind)
            return CalculationResult(calculated_volume=volume_ml,
                                     calculated_concentration=concentration,
                                     calculation_error=blocking.message,
                                     error_kind=blocking.kind)

        # 4) marking on the syringe's own scale
        syringe = dose.syringe
        if syringe.type == "Insulin":
            value, places, label = volume_ml * self.limits.insulin_units_per_ml, self.limits.unit_places, "units"
        else:
            value, places, label = volume_ml, self.limits.ml_places, "ml"
        recommended = format_decimal(value, places)

        message, kind = None, None
        if findings:
            message = " ".join(f.message for f in findings)
            kind = findings[0].kind
        else:
            marks = self.marking_table.get_marks(syringe.type, syringe.volume)
            if marks.size == 0:
                logger.debug("calculate: no markings for %s %s", syringe.type, syringe.volume)
            message = precision_guidance(value, marks, label, places, tolerance=self.limits.mark_tolerance)
            if message is not None:
                kind = "MARKING_PRECISION_GUIDANCE"

        return CalculationResult(calculated_volume=volume_ml,
                                 calculated_concentration=concentration,
                                 recommended_marking=recommended,
                                 calculation_error=message,
                                 error_kind=kind)

    @staticmethod
    def _resolve_concentration(dose: DoseInput) -> tuple[float | None, bool]:
        """Return (concentration, derived). A non-positive direct value counts as missing."""
        if dose.concentration is not None and dose.concentration > 0:
            return float(dose.concentration), False
        solution_ml = parse_leading_number(dose.solution_volume)
        if dose.total_amount is not None and dose.total_amount > 0 and solution_ml:
            return float(dose.total_amount) / solution_ml, True
        return None, False

    def _low_concentration_message(self, dose: DoseInput, concentration: float, derived: bool) -> str | None:
        floors = {"mg": self.limits.min_concentration_mg_per_ml, "mcg": self.limits.min_concentration_mcg_per_ml}
        floor = floors.get(amount_basis(dose.concentration_unit))
        if floor is None or concentration >= floor:
            return None
        shown = f"{concentration:.4f} {dose.concentration_unit}"
        if derived:
            basis = amount_basis(dose.concentration_unit)
            return (f"Calculated concentration ({shown}) is extremely low. Please verify the total amount "
                    f"({format_decimal(dose.total_amount, 6)} {basis}) and solution volume "
                    f"({dose.solution_volume} ml) are correct.")
        return f"Calculated concentration ({shown}) is extremely low. Please verify the concentration entered."


def calculate_dose(dose: DoseInput, *, marking_table: MarkingTable | None = None,
                   limits: SafetyLimits = DEFAULT_LIMITS) -> CalculationResult:
    """
    High-level wrapper: one calculation with the default check order.
    Pass `marking_table` to use custom syringe profiles.
    """
    return DoseCalculator(marking_table=marking_table, limits=limits).calculate(dose)
