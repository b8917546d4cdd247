import math

import pytest

from dosecalc.types import CalculationResult, DoseInput, Syringe


def test_syringe_capacity_from_label():
    assert Syringe("Standard", "3 ml").capacity_ml == 3.0
    assert Syringe("Insulin", "0.5 ml").capacity_ml == 0.5
    assert Syringe("Insulin", "1 ml (100 units)").capacity_ml == 1.0


@pytest.mark.parametrize("kwargs", [
    {"type": "Tuberculin", "volume": "1 ml"},
    {"type": "Standard", "volume": "ml"},
    {"type": "Standard", "volume": "0 ml"},
])
def test_syringe_rejects_bad_fields(kwargs):
    with pytest.raises(ValueError):
        Syringe(**kwargs)


@pytest.mark.parametrize("dose_value", [0, -1, math.nan, math.inf])
def test_dose_value_must_be_positive_and_finite(dose_value):
    with pytest.raises(ValueError):
        DoseInput(dose_value=dose_value, unit="mg", concentration=1, syringe=Syringe("Standard", "1 ml"))


def test_dose_input_rejects_unknown_units():
    syringe = Syringe("Standard", "1 ml")
    with pytest.raises(ValueError):
        DoseInput(dose_value=1, unit="g", concentration=1, syringe=syringe)
    with pytest.raises(ValueError):
        DoseInput(dose_value=1, unit="mg", concentration=1, concentration_unit="g/l", syringe=syringe)


def test_result_flags():
    guidance = CalculationResult(calculated_volume=0.25, recommended_marking="0.25",
                                 calculation_error="Draw to 0.25 ml", error_kind="MARKING_PRECISION_GUIDANCE")
    blocked = CalculationResult(calculated_volume=3.0, calculation_error="x", error_kind="VOLUME_THRESHOLD_ERROR")

    assert guidance.ready_to_inject and not guidance.blocked
    assert blocked.blocked and not blocked.ready_to_inject
    assert not CalculationResult().ready_to_inject
