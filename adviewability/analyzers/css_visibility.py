"""
CSS visibility filter.

`visibility` and `display` are resolved by the host's computed style, which
already applies inheritance inside the element's own document. Hidden
ancestor documents are not inspected here; they show up through the
geometry and occlusion checks instead.
"""

from adviewability.host.base import ElementRef, HostEnvironment


def is_css_invisible(host: HostEnvironment, element: ElementRef) -> bool:
    """True when the element is `visibility: hidden` or `display: none`."""
    visibility = host.get_computed_style(element, "visibility")
    display = host.get_computed_style(element, "display")
    return visibility == "hidden" or display == "none"
