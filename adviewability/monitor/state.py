"""
Per-session and per-sample viewability state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel

from adviewability.analyzers.geometry import GeometryResult


class SampleOutcome(str, Enum):
    """Why a sample passed or failed."""
    PASS = "pass"
    CSS_HIDDEN = "css_hidden"
    OBSCURED = "obscured"
    GEOMETRY_ERROR = "geometry_error"
    BELOW_THRESHOLD = "below_threshold"
    CROSS_ORIGIN = "cross_origin"


CROSS_ORIGIN_ERROR = "cross_origin_access_denied"


class VisibilityCheckState(BaseModel):
    """
    Running status of one monitoring session.

    Owned and mutated only by its session; callbacks receive copies.
    """
    percent_obscured: float = 0
    percent_viewable: float = 0
    accepted_viewable_percentage: float = 50
    viewability_status: bool = False
    duration: int = 0
    consecutive_pass_count: int = 0

    tick: int = 0
    last_outcome: SampleOutcome | None = None
    error: str | None = None
    measurable: bool = True

    def snapshot(self) -> "VisibilityCheckState":
        return self.model_copy(deep=True)


@dataclass
class SampleResult:
    """Output of one sample; never kept past the tick that produced it."""
    percent_viewable: float | None = None
    percent_obscured: float = 0
    outcome: SampleOutcome | None = None
    error: str | None = None
    geometry: GeometryResult | None = None

    @property
    def passed(self) -> bool:
        return self.outcome == SampleOutcome.PASS

    def to_dict(self) -> dict[str, Any]:
        return {
            "percent_viewable": self.percent_viewable,
            "percent_obscured": self.percent_obscured,
            "outcome": self.outcome.value if self.outcome else None,
            "passed": self.passed,
            "error": self.error,
            "geometry": self.geometry.to_dict() if self.geometry else None,
        }
