"""Raised when a recovery chain value is used after it was consumed."""

from ..base_exceptions import TryscopeException


class ChainConsumedError(TryscopeException, RuntimeError):
    """A recovery chain was reused after handing its state on.

    Every ``catch`` step consumes the chain it was called on and returns a
    successor, and ``finally_`` consumes the chain for good. Calling either
    method on a chain that has already been consumed raises this error.
    """

    def __init__(self, step: str, chain_state: str) -> None:
        """Initialize the exception.

        Args:
            step: Name of the step that was attempted ("catch" or "finally_")
            chain_state: Lifecycle state of the chain at the time
        """
        super().__init__(
            f"Cannot call {step}() on a recovery chain that is already {chain_state}",
            error_code="CHAIN_CONSUMED",
            context={"step": step, "chain_state": chain_state},
        )
        self.step = step
        self.chain_state = chain_state
