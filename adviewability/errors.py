"""
Exceptions raised by the viewability engine and its host adapters.
"""


class ViewabilityError(Exception):
    """Base class for engine errors."""


class CrossOriginAccessError(ViewabilityError):
    """The host denied access to a parent window, frame element or frame document."""

    def __init__(self, window_id: str | None = None, detail: str = "access denied"):
        self.window_id = window_id
        self.detail = detail
        super().__init__(f"Cross-origin access denied for window {window_id!r}: {detail}")


class FrameChainError(ViewabilityError):
    """The frame chain cannot be walked up to a top window."""


class UnknownReferenceError(ViewabilityError, KeyError):
    """A host was asked about an element or window it does not know."""

    def __str__(self) -> str:
        return Exception.__str__(self)
