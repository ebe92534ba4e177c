"""Exceptions package.

Usage errors raised by the combinator itself. Failures coming from scoped
bodies, resources and handlers are never wrapped in these.
"""

from .chain_consumed_exception import ChainConsumedError
from .invalid_resource_exception import InvalidCatchTypeError, InvalidResourceError
from .registry_closed_exception import RegistryClosedError

__all__ = [
    "ChainConsumedError",
    "InvalidCatchTypeError",
    "InvalidResourceError",
    "RegistryClosedError",
]
