"""Releasable resources and adapters.

A resource is anything with a ``release()`` method. Most Python objects
close through ``close()`` or a bare callable instead, so two small adapters
let those take part in a scope without changing them.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Releasable(Protocol):
    """Anything a ResourceRegistry can release."""

    def release(self) -> None:
        """Release the resource. May raise."""
        ...


class ClosingResource:
    """Adapts an object's ``close()`` method to ``release()``."""

    def __init__(self, target: Any) -> None:
        self.target = target

    def release(self) -> None:
        self.target.close()

    def __repr__(self) -> str:
        return f"ClosingResource({self.target!r})"


class CallbackResource:
    """Adapts a callable and its arguments to ``release()``.

    Example:
        >>> resource = CallbackResource(print, "released")
        >>> resource.release()
        released
    """

    def __init__(self, callback: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self.callback = callback
        self.args = args
        self.kwargs = kwargs

    def release(self) -> None:
        self.callback(*self.args, **self.kwargs)

    def __repr__(self) -> str:
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"CallbackResource({name})"


def is_releasable(value: Any) -> bool:
    """Return True if ``value`` exposes a callable ``release()``."""
    return isinstance(value, Releasable) and callable(value.release)
