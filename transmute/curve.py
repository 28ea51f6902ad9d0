"""Piecewise linear transmutation curve.

Raw scores are mapped onto a 0-100 scale in three segments around a pass
line at 60% of the maximum:

    upper    [pass_line, max_score]          -> [75, 100]
    plateau  [pass_line - 0.4, pass_line)    -> 74
    lower    [0, pass_line - 1]              -> [min_floor, 74]

Results are rounded half up to the nearest integer.
"""

from __future__ import annotations

import decimal
import enum
import functools
import math
import typing as t

from transmute.lib.sentinel import Invalid
from transmute.lib.util import clamp
from transmute.model import BaseModel

PASS_RATIO: t.Final = 0.6
PLATEAU_WIDTH: t.Final = 0.4

MAX_GRADE: t.Final = 100
PASS_GRADE: t.Final = 75
PLATEAU_GRADE: t.Final = 74
DEFAULT_MIN_FLOOR: t.Final = 65

INVALID: t.Final = Invalid()


class Segment(enum.Enum):
    Upper = "upper"
    Plateau = "plateau"
    Lower = "lower"


class Failure(enum.Enum):
    InvalidInput = "invalid_input"
    DegenerateCurve = "degenerate_curve"


class TransmutationResult(BaseModel):
    raw_score: float
    max_score: float
    min_floor: int

    value: float | None = None
    segment: Segment | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @property
    def percent(self) -> float | None:
        if self.failure is Failure.InvalidInput:
            return None
        return self.raw_score / self.max_score * 100


def round_half_up(value: float) -> float:
    # round the shortest decimal repr of the float, not its binary expansion
    d = decimal.Decimal(repr(value)).quantize(decimal.Decimal(1), rounding=decimal.ROUND_HALF_UP)
    return float(d)


def check_min_floor(min_floor: int) -> int:
    if not 0 <= min_floor <= MAX_GRADE:
        raise ValueError(f"min_floor must be between 0 and {MAX_GRADE}, got {min_floor!r}")
    return min_floor


def explain(raw_score: float, max_score: float, min_floor: int = DEFAULT_MIN_FLOOR) -> TransmutationResult:
    """Transmute a raw score and report which segment of the curve was used.

    Out of range input (negative score, non-positive maximum) and segments
    whose slope would divide by zero produce a result with ``failure`` set
    instead of raising.
    """
    check_min_floor(min_floor)
    result = functools.partial(TransmutationResult, raw_score=raw_score, max_score=max_score, min_floor=min_floor)

    if not (math.isfinite(raw_score) and math.isfinite(max_score)) or raw_score < 0 or max_score <= 0:
        return result(failure=Failure.InvalidInput)

    pass_line = PASS_RATIO * max_score

    if raw_score >= pass_line:
        span = max_score - pass_line
        if span <= 0:
            return result(failure=Failure.DegenerateCurve)
        interval = (MAX_GRADE - PASS_GRADE) / span
        value = MAX_GRADE - (max_score - raw_score) * interval
        return result(value=round_half_up(value), segment=Segment.Upper)

    if raw_score >= pass_line - PLATEAU_WIDTH:
        return result(value=float(PLATEAU_GRADE), segment=Segment.Plateau)

    span = pass_line - 1
    if span <= 0:
        return result(failure=Failure.DegenerateCurve)
    interval = (PLATEAU_GRADE - min_floor) / span
    value = PLATEAU_GRADE - interval * (span - raw_score)
    # the line runs past pass_line - 1 up to the plateau, and slopes downward
    # when the floor is above 74; keep it between the floor and 74
    lower = float(min(min_floor, PLATEAU_GRADE))
    return result(value=clamp(round_half_up(value), lower, float(PLATEAU_GRADE)), segment=Segment.Lower)


def transmute(raw_score: float, max_score: float, min_floor: int = DEFAULT_MIN_FLOOR) -> float | Invalid:
    rs = explain(raw_score, max_score, min_floor)
    if rs.value is None:
        return INVALID
    return rs.value
