"""Typed recovery chain with a mandatory finally step.

This module provides the RecoveryChain class, which takes the outcome of a
scoped body and offers it to a sequence of typed catch handlers before a
finally block decides what, if anything, is raised.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from ..exceptions import ChainConsumedError, InvalidCatchTypeError
from ..logging import get_logger
from .resource_registry import ScopeOutcome
from .suppression import add_suppressed

logger = get_logger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)

CatchType = Union[type[E], tuple[type[E], ...]]


class ChainStage(str, Enum):
    """Lifecycle of a single chain value."""

    CREATED = "created"
    CATCHING = "catching"
    CONSUMED = "consumed"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class ChainState:
    """Failures still outstanding in a chain.

    Attributes:
        primary: Failure not yet handled by any catch step
        secondary: Failure raised by the handler that matched primary
    """

    primary: BaseException | None = None
    secondary: BaseException | None = None


def resolve_failures(
    primary: BaseException | None,
    secondary: BaseException | None,
    finalizer_failure: BaseException | None,
) -> BaseException | None:
    """Pick the failure to raise once the finally block has run.

    An unhandled primary failure wins over a handler failure. A failure from
    the finally block is suppressed on whichever failure is chosen and only
    raised itself when nothing else is outstanding.

    Args:
        primary: Unhandled body or release failure
        secondary: Failure raised by a matching catch handler
        finalizer_failure: Failure raised by the finally block

    Returns:
        The failure to raise, or None to return normally
    """
    if primary is not None:
        if secondary is not None:
            add_suppressed(primary, secondary)
        if finalizer_failure is not None:
            add_suppressed(primary, finalizer_failure)
        return primary

    if secondary is not None:
        if finalizer_failure is not None:
            add_suppressed(secondary, finalizer_failure)
        return secondary

    return finalizer_failure


def _check_catch_type(exc_type: Any) -> None:
    def is_exception_class(candidate: Any) -> bool:
        return isinstance(candidate, type) and issubclass(candidate, BaseException)

    if isinstance(exc_type, tuple):
        if exc_type and all(is_exception_class(item) for item in exc_type):
            return
    elif is_exception_class(exc_type):
        return
    raise InvalidCatchTypeError(exc_type)


def _type_name(exc_type: Any) -> str:
    if isinstance(exc_type, tuple):
        return "(" + ", ".join(item.__name__ for item in exc_type) + ")"
    return str(exc_type.__name__)


class RecoveryChain(Generic[T]):
    """Typed catch steps followed by one finally step.

    Each ``catch`` hands the chain's state to a new chain value and returns
    it, so a chain value is used once. The first catch whose type matches
    the outstanding failure consumes it; later catch steps never see it,
    even when the matching handler itself raises.

    Example:
        >>> (
        ...     run_scoped(load_rows)
        ...     .catch(KeyError, log_missing)
        ...     .catch(OSError, log_io)
        ...     .finally_(lambda: None)
        ... )
    """

    def __init__(
        self,
        outcome: ScopeOutcome[T],
        state: ChainState | None = None,
        stage: ChainStage = ChainStage.CREATED,
    ) -> None:
        """Initialize the chain.

        Args:
            outcome: Outcome of the scoped body
            state: Outstanding failures; seeded from the outcome when omitted
            stage: Lifecycle stage of this chain value
        """
        self.outcome = outcome
        self.state = state if state is not None else ChainState(primary=outcome.failure)
        self._stage = stage

    @property
    def stage(self) -> ChainStage:
        """Current lifecycle stage of this chain value."""
        return self._stage

    def catch(self, exc_type: CatchType[E], handler: Callable[[E], Any]) -> "RecoveryChain[T]":
        """Offer the outstanding failure to ``handler`` if it matches.

        Args:
            exc_type: Exception class, or tuple of classes, to match with
                isinstance
            handler: Called with the failure when it matches

        Returns:
            The next chain value

        Raises:
            InvalidCatchTypeError: If exc_type is not an exception class
            ChainConsumedError: If this chain value was already used
        """
        _check_catch_type(exc_type)
        self._consume("catch", ChainStage.CONSUMED)

        primary = self.state.primary
        if primary is None or not isinstance(primary, exc_type):
            return self._successor(self.state)

        logger.debug(
            "catch_matched",
            catch_type=_type_name(exc_type),
            error_type=type(primary).__name__,
        )

        secondary: BaseException | None = None
        try:
            handler(primary)
        except BaseException as e:
            if e is not primary and e.__context__ is None:
                e.__context__ = primary
            secondary = e
            logger.debug(
                "catch_handler_failed",
                catch_type=_type_name(exc_type),
                error_type=type(e).__name__,
                error=str(e),
            )

        # A match consumes the failure even when the handler raised
        return self._successor(ChainState(primary=None, secondary=secondary))

    def finally_(self, block: Callable[[], Any]) -> T | None:
        """Run ``block`` and raise whatever is still outstanding.

        Args:
            block: Cleanup callable, always run exactly once

        Returns:
            The body's return value when nothing is raised

        Raises:
            BaseException: The unhandled body or release failure, else the
                handler failure, else the block's own failure
            ChainConsumedError: If this chain value was already used
        """
        self._consume("finally_", ChainStage.FINALIZED)

        finalizer_failure: BaseException | None = None
        try:
            block()
        except BaseException as e:
            finalizer_failure = e

        failure = resolve_failures(self.state.primary, self.state.secondary, finalizer_failure)

        if failure is None:
            logger.debug("chain_finalized", raised=False)
            return self.outcome.result

        logger.debug(
            "chain_finalized",
            raised=True,
            error_type=type(failure).__name__,
            finalizer_failed=finalizer_failure is not None,
        )
        raise failure

    def _consume(self, step: str, next_stage: ChainStage) -> None:
        if self._stage in (ChainStage.CONSUMED, ChainStage.FINALIZED):
            raise ChainConsumedError(step, self._stage.value)
        self._stage = next_stage

    def _successor(self, state: ChainState) -> "RecoveryChain[T]":
        return RecoveryChain(self.outcome, state=state, stage=ChainStage.CATCHING)
