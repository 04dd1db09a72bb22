"""
Pydantic models for page snapshots and API requests/responses.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from adviewability.monitor.state import VisibilityCheckState


# ============== Snapshot Models ==============

class SizeModel(BaseModel):
    """One viewport size source; missing sides are None."""
    width: float | None = None
    height: float | None = None


class RectModel(BaseModel):
    """Bounding rect in the owning window's coordinates."""
    left: float
    top: float
    right: float
    bottom: float


class WindowSnapshot(BaseModel):
    """A window (top page or frame) and its viewport size sources."""
    id: str
    parent_id: str | None = None
    frame_element_id: str | None = None

    body: SizeModel = Field(default_factory=SizeModel)
    root: SizeModel | None = None
    inner: SizeModel = Field(default_factory=SizeModel)

    # Parent window and frame element cannot be read from this window
    cross_origin: bool = False


class ElementSnapshot(BaseModel):
    """A rendered element with its computed style and paint order."""
    id: str
    window_id: str
    rect: RectModel
    parent_id: str | None = None
    display: str = "block"
    visibility: str = "visible"
    paint_order: int = 0


class PageSnapshot(BaseModel):
    """Layout of a page and all of its frames at one instant."""
    windows: list[WindowSnapshot] = Field(min_length=1)
    elements: list[ElementSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "PageSnapshot":
        window_ids = {w.id for w in self.windows}
        element_ids = {e.id for e in self.elements}
        if len(window_ids) != len(self.windows):
            raise ValueError("Window ids must be unique")
        if len(element_ids) != len(self.elements):
            raise ValueError("Element ids must be unique")

        elements_by_id = {e.id: e for e in self.elements}
        for window in self.windows:
            if window.parent_id is None:
                continue
            if window.parent_id not in window_ids:
                raise ValueError(f"Window {window.id!r} has unknown parent {window.parent_id!r}")
            frame = elements_by_id.get(window.frame_element_id or "")
            if frame is None:
                raise ValueError(f"Window {window.id!r} needs a frame_element_id in its parent")
            if frame.window_id != window.parent_id:
                raise ValueError(
                    f"Frame element {frame.id!r} must live in parent window {window.parent_id!r}"
                )

        for element in self.elements:
            if element.window_id not in window_ids:
                raise ValueError(f"Element {element.id!r} has unknown window {element.window_id!r}")
            if element.parent_id is not None and element.parent_id not in element_ids:
                raise ValueError(f"Element {element.id!r} has unknown parent {element.parent_id!r}")
        return self

    def has_element(self, element_id: str) -> bool:
        return any(e.id == element_id for e in self.elements)


# ============== API Models ==============

class MeasureRequest(BaseModel):
    """Request to take one viewability sample."""
    snapshot: PageSnapshot
    element_id: str


class MeasureResponse(BaseModel):
    """Single-sample result."""
    element_id: str
    accepted_viewable_percentage: float
    sample: dict[str, Any]


class ReplayRequest(BaseModel):
    """Request to replay a timeline, one snapshot per sampling tick."""
    frames: list[PageSnapshot] = Field(min_length=1)
    element_id: str
    debug_mode: bool = False


class ReplayResponse(BaseModel):
    """Every status reported while replaying a timeline."""
    element_id: str
    viewable: bool
    ticks: int
    duration_ms: int
    statuses: list[VisibilityCheckState]
