"""
Host environment interface.

The engine never touches a DOM directly. Everything it needs to know about
elements, documents and windows comes through a `HostEnvironment`. Element
and window references are opaque to the engine; only the host interprets
them.

Adapters raise `CrossOriginAccessError` whenever the host refuses to expose
a parent window, a hosting frame element or a frame document.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from adviewability.geometry.rect import Rect

ElementRef = Any
WindowRef = Any


@dataclass(frozen=True)
class ClientSize:
    """A width/height pair as reported by one viewport size source; either may be missing."""
    width: float | None = None
    height: float | None = None


@runtime_checkable
class HostEnvironment(Protocol):
    """Synchronous host queries used by every viewability check."""

    # Elements
    def get_bounding_rect(self, element: ElementRef) -> Rect: ...

    def get_computed_style(self, element: ElementRef, property_name: str) -> str: ...

    def element_from_point(self, window: WindowRef, x: float, y: float) -> ElementRef | None: ...

    def is_descendant_of(self, candidate: ElementRef, ancestor: ElementRef) -> bool: ...

    def same_element(self, a: ElementRef, b: ElementRef) -> bool: ...

    def owner_window(self, element: ElementRef) -> WindowRef: ...

    # Viewport size sources
    def body_client_size(self, window: WindowRef) -> ClientSize: ...

    def root_client_size(self, window: WindowRef) -> ClientSize | None: ...

    def inner_size(self, window: WindowRef) -> ClientSize: ...

    # Frame navigation
    def parent_window(self, window: WindowRef) -> WindowRef: ...

    def top_window(self, window: WindowRef) -> WindowRef: ...

    def hosting_frame_element(self, window: WindowRef) -> ElementRef: ...
