# src/dosecalc/checks.py
"""
Ordered safety checks run on a derived draw volume.

Each SafetyCheck is a predicate plus the message to show when it fires. The list
order is the priority order: the first blocking check that fires ends the run, so
an out-of-range volume is reported instead of anything a later check would say.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from .helpers import format_decimal
from .limits import SafetyLimits
from .types import DoseInput, ErrorKind
from .units import amount_basis, dose_in_basis

logger = logging.getLogger(__name__)

VOLUME_THRESHOLD_MESSAGE = "VOLUME_THRESHOLD_ERROR:Calculated volume is outside safe thresholds."


@dataclass(frozen=True)
class Draw:
    """
    What the checks look at.

    dose      : the caller's input
    volume_ml : unrounded draw volume
    limits    : numeric policy in force
    """
    dose: DoseInput
    volume_ml: float
    limits: SafetyLimits


@dataclass(frozen=True)
class Finding:
    kind: ErrorKind
    message: str
    blocking: bool


@dataclass(frozen=True)
class SafetyCheck:
    kind: ErrorKind
    blocking: bool
    fires: Callable[[Draw], bool]
    message: Callable[[Draw], str]

    def evaluate(self, draw: Draw) -> Finding | None:
        if not self.fires(draw):
            return None
        return Finding(kind=self.kind, message=self.message(draw), blocking=self.blocking)


def _outside_safe_range(d: Draw) -> bool:
    return d.volume_ml < d.limits.min_volume_ml or d.volume_ml > d.limits.max_volume_ml

def _over_insulin_limit(d: Draw) -> bool:
    return d.dose.syringe.type == "Insulin" and d.volume_ml > d.limits.insulin_practical_max_ml

def _exceeds_total_amount(d: Draw) -> bool:
    dose = d.dose
    if dose.total_amount is None or dose.unit == "mL":
        return False
    return dose_in_basis(dose.dose_value, dose.unit, dose.concentration_unit) > dose.total_amount

def _over_capacity(d: Draw) -> bool:
    return d.volume_ml > d.dose.syringe.capacity_ml


def _insulin_limit_message(d: Draw) -> str:
    return (f"Required volume ({d.volume_ml:.2f} ml) is too large for practical use with an insulin syringe. "
            "Consider using a standard syringe or checking your concentration calculation.")

def _total_amount_message(d: Draw) -> str:
    dose = d.dose
    return (f"Requested dose ({format_decimal(dose.dose_value, 6)} {dose.unit}) exceeds total amount "
            f"available ({format_decimal(dose.total_amount, 6)} {amount_basis(dose.concentration_unit)}).")

def _capacity_message(d: Draw) -> str:
    capacity = format_decimal(d.dose.syringe.capacity_ml, 3)
    return f"Required volume ({d.volume_ml:.2f} ml) exceeds syringe capacity ({capacity} ml)."


# Priority order: threshold > insulin limit > total amount > capacity.
DEFAULT_CHECKS: tuple[SafetyCheck, ...] = (
    SafetyCheck("VOLUME_THRESHOLD_ERROR", True, _outside_safe_range, lambda d: VOLUME_THRESHOLD_MESSAGE),
    SafetyCheck("INSULIN_PRACTICAL_LIMIT", True, _over_insulin_limit, _insulin_limit_message),
    SafetyCheck("INSUFFICIENT_TOTAL_AMOUNT", True, _exceeds_total_amount, _total_amount_message),
    SafetyCheck("SYRINGE_CAPACITY_EXCEEDED", False, _over_capacity, _capacity_message),
)


def run_checks(checks: Sequence[SafetyCheck], draw: Draw) -> list[Finding]:
    """
    Evaluate checks in order. Informational findings accumulate; the first blocking
    finding is appended and the run stops, so a blocking finding is always last.
    """
    findings: list[Finding] = []
    for check in checks:
        finding = check.evaluate(draw)
        if finding is None:
            continue
        logger.debug("%s fired for %r ml", finding.kind, draw.volume_ml)
        findings.append(finding)
        if finding.blocking:
            break
    return findings
