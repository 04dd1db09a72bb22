"""
In-memory host backed by a `PageSnapshot`.

Element and window references are the snapshot's string ids. The snapshot
can be swapped between samples with `load()` to replay a page over time.
"""

from adviewability.errors import CrossOriginAccessError, FrameChainError, UnknownReferenceError
from adviewability.geometry.rect import Rect
from adviewability.host.base import ClientSize
from adviewability.models import ElementSnapshot, PageSnapshot, SizeModel, WindowSnapshot


def _client_size(size: SizeModel) -> ClientSize:
    return ClientSize(width=size.width, height=size.height)


class SnapshotHost:
    """`HostEnvironment` over a static page layout."""

    def __init__(self, snapshot: PageSnapshot):
        self.load(snapshot)

    def load(self, snapshot: PageSnapshot) -> None:
        self.snapshot = snapshot
        self._windows: dict[str, WindowSnapshot] = {w.id: w for w in snapshot.windows}
        self._elements: dict[str, ElementSnapshot] = {e.id: e for e in snapshot.elements}
        self._order: dict[str, int] = {e.id: i for i, e in enumerate(snapshot.elements)}

    def _window(self, window_id: str) -> WindowSnapshot:
        try:
            return self._windows[window_id]
        except KeyError:
            raise UnknownReferenceError(f"Unknown window: {window_id}") from None

    def _element(self, element_id: str) -> ElementSnapshot:
        try:
            return self._elements[element_id]
        except KeyError:
            raise UnknownReferenceError(f"Unknown element: {element_id}") from None

    # ============== Elements ==============

    def get_bounding_rect(self, element: str) -> Rect:
        rect = self._element(element).rect
        return Rect.from_edges(rect.left, rect.top, rect.right, rect.bottom)

    def get_computed_style(self, element: str, property_name: str) -> str:
        snapshot = self._element(element)
        if property_name == "display":
            return snapshot.display
        if property_name == "visibility":
            return snapshot.visibility
        return ""

    def is_descendant_of(self, candidate: str, ancestor: str) -> bool:
        current = self._element(candidate).parent_id
        while current is not None:
            if current == ancestor:
                return True
            current = self._element(current).parent_id
        return False

    def same_element(self, a: str, b: str) -> bool:
        return a == b

    def owner_window(self, element: str) -> str:
        return self._element(element).window_id

    def is_rendered(self, element: str) -> bool:
        """Hidden elements and anything under a `display: none` ancestor are not hit-testable."""
        snapshot = self._element(element)
        if snapshot.visibility == "hidden" or snapshot.display == "none":
            return False
        current = snapshot.parent_id
        while current is not None:
            parent = self._element(current)
            if parent.display == "none":
                return False
            current = parent.parent_id
        return True

    def element_from_point(self, window: str, x: float, y: float) -> str | None:
        """
        Topmost rendered element of `window` at the point.

        An element never wins over its own hit descendants, whatever their
        order in the snapshot. Among the rest, the highest paint order wins
        and later elements win ties.
        """
        self._window(window)
        hits = [
            e for e in self.snapshot.elements
            if e.window_id == window
            and self.get_bounding_rect(e.id).contains_point(x, y)
            and self.is_rendered(e.id)
        ]
        deepest = [
            e for e in hits
            if not any(self.is_descendant_of(other.id, e.id) for other in hits)
        ]
        if not deepest:
            return None
        top = max(deepest, key=lambda e: (e.paint_order, self._order[e.id]))
        return top.id

    # ============== Viewport Size Sources ==============

    def body_client_size(self, window: str) -> ClientSize:
        return _client_size(self._window(window).body)

    def root_client_size(self, window: str) -> ClientSize | None:
        root = self._window(window).root
        return _client_size(root) if root is not None else None

    def inner_size(self, window: str) -> ClientSize:
        return _client_size(self._window(window).inner)

    # ============== Frame Navigation ==============

    def parent_window(self, window: str) -> str:
        snapshot = self._window(window)
        if snapshot.parent_id is None:
            return snapshot.id
        if snapshot.cross_origin:
            raise CrossOriginAccessError(window, "parent window is cross-origin")
        return snapshot.parent_id

    def top_window(self, window: str) -> str:
        current = self._window(window)
        seen = {current.id}
        while current.parent_id is not None:
            current = self._window(current.parent_id)
            if current.id in seen:
                raise FrameChainError(f"Window cycle through {current.id}")
            seen.add(current.id)
        return current.id

    def hosting_frame_element(self, window: str) -> str | None:
        snapshot = self._window(window)
        if snapshot.parent_id is None:
            return None
        if snapshot.cross_origin:
            raise CrossOriginAccessError(window, "frame element is cross-origin")
        return snapshot.frame_element_id
