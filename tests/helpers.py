"""Snapshot builders shared by the test modules."""
from adviewability.models import (
    ElementSnapshot,
    PageSnapshot,
    RectModel,
    SizeModel,
    WindowSnapshot,
)


def make_window(
    window_id: str = "top",
    width: float | None = 1024,
    height: float | None = 768,
    parent_id: str | None = None,
    frame_element_id: str | None = None,
    cross_origin: bool = False,
    root: SizeModel | None = None,
) -> WindowSnapshot:
    """Window whose body and inner size both report width x height."""
    return WindowSnapshot(
        id=window_id,
        parent_id=parent_id,
        frame_element_id=frame_element_id,
        body=SizeModel(width=width, height=height),
        root=root,
        inner=SizeModel(width=width, height=height),
        cross_origin=cross_origin,
    )


def make_element(
    element_id: str,
    left: float,
    top: float,
    width: float,
    height: float,
    window_id: str = "top",
    parent_id: str | None = None,
    display: str = "block",
    visibility: str = "visible",
    paint_order: int = 0,
) -> ElementSnapshot:
    return ElementSnapshot(
        id=element_id,
        window_id=window_id,
        rect=RectModel(left=left, top=top, right=left + width, bottom=top + height),
        parent_id=parent_id,
        display=display,
        visibility=visibility,
        paint_order=paint_order,
    )


def single_window_page(*elements: ElementSnapshot, width: float = 1024, height: float = 768) -> PageSnapshot:
    return PageSnapshot(windows=[make_window(width=width, height=height)], elements=list(elements))


def nested_quadrant_page() -> PageSnapshot:
    """
    Ad at the top-left corner of a 300x250 frame whose frame element is
    shifted 50px past the top-left corner of the top window, so only the
    ad's bottom-right quadrant is on screen.
    """
    return PageSnapshot(
        windows=[
            make_window("top"),
            make_window("frame", 300, 250, parent_id="top", frame_element_id="iframe"),
        ],
        elements=[
            make_element("iframe", -50, -50, 300, 250, window_id="top"),
            make_element("ad", 0, 0, 100, 100, window_id="frame"),
        ],
    )
