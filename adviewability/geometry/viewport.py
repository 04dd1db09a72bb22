"""
Viewport size resolution for a single window.
"""

import math
from dataclasses import dataclass

from adviewability.host.base import ClientSize, HostEnvironment, WindowRef


@dataclass
class ViewportSize:
    """Visible rendering area of one window. Infinite area means unresolved."""
    width: float = math.inf
    height: float = math.inf
    area: float = math.inf

    @classmethod
    def unresolved(cls) -> "ViewportSize":
        return cls()

    @property
    def is_resolved(self) -> bool:
        return math.isfinite(self.area)


def _usable(value: float | None) -> bool:
    return value is not None and not math.isnan(value)


def resolve_viewport_size(host: HostEnvironment, window: WindowRef) -> ViewportSize:
    """
    Resolve a window's viewport from the host's size sources.

    Precedence:
    1. document body client size, when positive
    2. document root client size, when nonzero; overwrites the body value
    3. window inner size, when nonzero; can only shrink the candidate

    The root source overwrites the body value instead of taking the minimum
    with it.
    """
    viewport = ViewportSize.unresolved()

    body = host.body_client_size(window)
    if _usable(body.width) and math.isfinite(body.width) and body.width > 0:
        viewport.width = body.width
    if _usable(body.height) and math.isfinite(body.height) and body.height > 0:
        viewport.height = body.height

    root: ClientSize | None = host.root_client_size(window)
    if root is not None:
        if _usable(root.width) and math.isfinite(root.width) and root.width != 0:
            viewport.width = root.width
        if _usable(root.height) and math.isfinite(root.height) and root.height != 0:
            viewport.height = root.height

    inner = host.inner_size(window)
    if _usable(inner.width) and math.isfinite(inner.width) and inner.width != 0:
        viewport.width = min(viewport.width, inner.width)
    if _usable(inner.height) and math.isfinite(inner.height) and inner.height != 0:
        viewport.height = min(viewport.height, inner.height)

    if math.isinf(viewport.width) or math.isinf(viewport.height):
        viewport.area = math.inf
    else:
        viewport.area = viewport.width * viewport.height
    return viewport
