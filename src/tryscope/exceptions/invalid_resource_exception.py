"""Usage errors raised for values the combinator cannot work with."""

from typing import Any

from ..base_exceptions import TryscopeException


class InvalidResourceError(TryscopeException, TypeError):
    """An object without a callable ``release()`` was registered."""

    def __init__(self, resource: Any) -> None:
        """Initialize the exception.

        Args:
            resource: The object that was refused
        """
        super().__init__(
            f"{type(resource).__name__} has no callable release(); "
            "wrap it with register_closing() or register_callback()",
            error_code="INVALID_RESOURCE",
            context={"resource_type": type(resource).__name__},
        )
        self.resource = resource


class InvalidCatchTypeError(TryscopeException, TypeError):
    """``catch`` was given something other than exception classes."""

    def __init__(self, exc_type: Any) -> None:
        """Initialize the exception.

        Args:
            exc_type: The value passed as the catch type
        """
        super().__init__(
            f"catch() expects an exception class or a tuple of them, got {exc_type!r}",
            error_code="INVALID_CATCH_TYPE",
            context={"exc_type": repr(exc_type)},
        )
        self.exc_type = exc_type
