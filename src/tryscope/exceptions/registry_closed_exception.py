"""Raised when a resource is registered after release has started."""

from typing import Any

from ..base_exceptions import TryscopeException


class RegistryClosedError(TryscopeException, RuntimeError):
    """A resource was registered once the registry stopped accepting them.

    Resources registered after ``release_all`` began would never be released,
    so the registry refuses them instead of leaking them silently.
    """

    def __init__(self, resource: Any) -> None:
        """Initialize the exception.

        Args:
            resource: The resource that was refused
        """
        super().__init__(
            f"Cannot register {type(resource).__name__}: registry has already been released",
            error_code="REGISTRY_CLOSED",
            context={"resource_type": type(resource).__name__},
        )
        self.resource = resource
