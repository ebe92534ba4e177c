"""Suppressed-failure bookkeeping.

Python exceptions carry a cause and a context but no list of failures that
were swallowed while they propagated. This module keeps that list on the
exception object itself so it travels with the failure when it is raised.
"""

from ..config import get_settings

_SUPPRESSED_ATTR = "_tryscope_suppressed"


def _attach_notes() -> bool:
    # Recording a failure must never fail on a bad TRYSCOPE_ATTACH_NOTES value
    try:
        return get_settings().attach_notes
    except ValueError:
        return True


def add_suppressed(failure: BaseException, suppressed: BaseException) -> None:
    """Attach ``suppressed`` to ``failure`` as contextual history.

    Attachments keep their order. Attaching a failure to itself is ignored.

    Args:
        failure: The failure that will be raised
        suppressed: The failure recorded alongside it
    """
    if suppressed is failure:
        return

    history: list[BaseException] | None = getattr(failure, _SUPPRESSED_ATTR, None)
    if history is None:
        history = []
        setattr(failure, _SUPPRESSED_ATTR, history)
    history.append(suppressed)

    if _attach_notes():
        failure.add_note(f"Suppressed: {type(suppressed).__name__}: {suppressed}")


def get_suppressed(failure: BaseException) -> tuple[BaseException, ...]:
    """Return the failures suppressed on ``failure``, oldest first."""
    return tuple(getattr(failure, _SUPPRESSED_ATTR, ()))
