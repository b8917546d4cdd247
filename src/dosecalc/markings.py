# src/dosecalc/markings.py
"""
Printed syringe graduations.

Standard syringes are marked in mL, insulin syringes in units (U-100, 1 unit = 0.01 mL).
Marks for one (type, volume) pair are kept as a read-only, strictly increasing numpy array.
"""
from __future__ import annotations

from typing import Mapping, Sequence, Union, get_args

import numpy as np

from .helpers import format_decimal, parse_leading_number, _validate_increasing, _validate_positive
from .types import SyringeType

MarkSource = Union[str, Sequence[float]]

# Same comma-separated format users type for a custom syringe profile.
DEFAULT_SYRINGE_MARKINGS: dict[str, dict[str, str]] = {
    "Insulin": {
        "0.3 ml": "5,10,15,20,25,30",
        "0.5 ml": "5,10,15,20,25,30,35,40,45,50",
        "1 ml": "10,20,30,40,50,60,70,80,90,100",
    },
    "Standard": {
        "1 ml": "0.1,0.2,0.3,0.4,0.5,0.6,0.7,0.8,0.9,1.0",
        "3 ml": "0.5,1.0,1.5,2.0,2.5,3.0",
        "5 ml": "1.0,2.0,3.0,4.0,5.0",
    },
}

_EMPTY = np.empty(0, dtype=float)
_EMPTY.setflags(write=False)


def parse_markings(text: str) -> np.ndarray:
    """"0.1, 0.2,0.3" -> array([0.1, 0.2, 0.3]). Blank items are skipped."""
    parts = [p.strip() for p in str(text).split(",") if p.strip()]
    try:
        return np.array([float(p) for p in parts], dtype=float)
    except ValueError:
        raise ValueError(f"markings must be comma-separated numbers (got {text!r}).") from None


def _volume_key(volume: str) -> str | None:
    # "1 ml", "1ml" and "1 ml (100 units)" all address the same barrel
    capacity = parse_leading_number(volume)
    if capacity is None or capacity <= 0:
        return None
    return format_decimal(capacity, 3)


def _as_mark_array(name: str, marks: MarkSource) -> np.ndarray:
    arr = parse_markings(marks) if isinstance(marks, str) else np.asarray(marks, dtype=float).ravel()
    if arr.size == 0:
        raise ValueError(f"{name} must contain at least one marking.")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must be finite numbers (got {arr.tolist()}).")
    _validate_positive(f"{name} first marking", float(arr[0]))
    _validate_increasing(name, arr.tolist())
    arr = arr.copy()
    arr.setflags(write=False)
    return arr


class MarkingTable:
    """
    Read-only lookup of syringe markings by (syringe type, volume label).

    entries : {"Insulin" | "Standard": {volume label: marks}}, where marks is either a
              comma-separated string ("0.1,0.2,...") or a sequence of numbers.
    """

    def __init__(self, entries: Mapping[str, Mapping[str, MarkSource]]):
        self._marks: dict[tuple[str, str], np.ndarray] = {}
        self._labels: dict[tuple[str, str], str] = {}
        for syringe_type, by_volume in entries.items():
            if syringe_type not in get_args(SyringeType):
                raise ValueError(f"syringe type must be one of {get_args(SyringeType)} (got {syringe_type!r}).")
            for volume, marks in by_volume.items():
                key = _volume_key(volume)
                if key is None:
                    raise ValueError(f"volume must start with a positive capacity in ml (got {volume!r}).")
                name = f"{syringe_type} {volume} markings"
                self._marks[(syringe_type, key)] = _as_mark_array(name, marks)
                self._labels[(syringe_type, key)] = volume

    @classmethod
    def default(cls) -> "MarkingTable":
        return cls(DEFAULT_SYRINGE_MARKINGS)

    def get_marks(self, syringe_type: str, volume: str) -> np.ndarray:
        """Marks for the syringe, ascending. Empty when the syringe is not in the table."""
        key = _volume_key(volume)
        if key is None:
            return _EMPTY
        return self._marks.get((syringe_type, key), _EMPTY)

    def volumes(self, syringe_type: str) -> tuple[str, ...]:
        """Volume labels known for a syringe type, smallest barrel first."""
        keys = sorted((k for t, k in self._labels if t == syringe_type), key=float)
        return tuple(self._labels[(syringe_type, k)] for k in keys)

    def with_syringe(self, syringe_type: str, volume: str, marks: MarkSource) -> "MarkingTable":
        """
        Return a new table with one custom syringe profile added (or replacing the
        entry of the same type and capacity). This table is left as it was.
        """
        entries: dict[str, dict[str, MarkSource]] = {}
        for (t, k), label in self._labels.items():
            if t == syringe_type and k == _volume_key(volume):
                continue
            entries.setdefault(t, {})[label] = self._marks[(t, k)]
        entries.setdefault(syringe_type, {})[volume] = marks
        return MarkingTable(entries)

    def __contains__(self, item: tuple[str, str]) -> bool:
        syringe_type, volume = item
        return self.get_marks(syringe_type, volume).size > 0


def precision_guidance(value: float, marks: np.ndarray, label: str,
                       places: int, tolerance: float = 1e-6) -> str | None:
    """
    How to draw `value` on a barrel with these marks, or None if it sits on a mark.

    value     : exact target on the marking scale (mL or units); compared as displayed,
                i.e. rounded to `places`
    marks     : ascending printed marks on the same scale
    label     : "ml" or "units", used in the message
    places    : rounding used when printing `value`
    tolerance : absolute distance under which the displayed value counts as on a mark
    """
    if marks.size == 0:
        return None
    shown_value = round(float(value), places)
    if np.any(np.isclose(marks, shown_value, rtol=0.0, atol=tolerance)):
        return None

    shown = format_decimal(shown_value, places)
    fmt = lambda m: format_decimal(m, places)
    idx = int(np.searchsorted(marks, shown_value))
    if idx == 0:
        return f"Draw to {shown} {label}, which is below the first marking at {fmt(marks[0])} {label}."
    if idx == marks.size:
        return f"Draw to {shown} {label}, which is above the {fmt(marks[-1])} {label} mark."
    return (f"Draw to {shown} {label}, which is between the {fmt(marks[idx - 1])} {label} "
            f"and {fmt(marks[idx])} {label} marks.")
