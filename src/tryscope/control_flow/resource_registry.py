"""Resource registry for scoped bodies.

This module provides the ResourceRegistry class, which runs a body, records
how it ended, and then releases every resource the body registered. The
registry never raises what the body or a resource raised; it records the
failure in a ScopeOutcome for the recovery chain to deal with.
"""

import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..config import ReleaseOrder
from ..exceptions import InvalidResourceError, RegistryClosedError
from ..logging import LogContext, get_logger
from .resources import CallbackResource, ClosingResource, Releasable, is_releasable
from .suppression import add_suppressed

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class ScopeOutcome(Generic[T]):
    """How a scoped body ended once its resources were released.

    Attributes:
        failure: The body failure, or the first release failure if the body
            succeeded. Later release failures are suppressed on it.
        result: The body's return value, None if it failed
        released: Resources in the order release() was attempted
    """

    failure: BaseException | None = None
    result: T | None = None
    released: tuple[Releasable, ...] = ()

    @property
    def failed(self) -> bool:
        """True if the body or any release failed."""
        return self.failure is not None


class ResourceRegistry(Generic[T]):
    """Owns the resources of one scoped body and releases them.

    Resources are released in registration order unless the registry was
    created with ``ReleaseOrder.LIFO``. Every resource is attempted even when
    earlier ones fail.

    Registration is safe from several threads at once; releasing happens on
    the calling thread after the body has returned.

    Example:
        >>> registry = ResourceRegistry()
        >>> registry.run(lambda scope: scope.register(Connection()).query())
        >>> registry.release_all()
        >>> registry.outcome().failed
        False
    """

    def __init__(self, order: ReleaseOrder = ReleaseOrder.FIFO) -> None:
        """Initialize an empty registry.

        Args:
            order: Release order; LIFO only when passed explicitly
        """
        self.order = order
        self.scope_id = uuid.uuid4().hex[:12]

        self._resources: list[Releasable] = []
        self._lock = threading.Lock()
        self._closed = False
        self._failure: BaseException | None = None
        self._result: T | None = None
        self._released: tuple[Releasable, ...] = ()

    # ========================================================================
    # Registration
    # ========================================================================

    def register(self, resource: R) -> R:
        """Register a resource and return it unchanged.

        Args:
            resource: Object exposing ``release()``

        Returns:
            The same object, so callers can register while binding

        Raises:
            InvalidResourceError: If the object has no callable release()
            RegistryClosedError: If release_all() has already started
        """
        if not is_releasable(resource):
            raise InvalidResourceError(resource)

        with self._lock:
            if self._closed:
                raise RegistryClosedError(resource)
            self._resources.append(resource)  # type: ignore[arg-type]
            position = len(self._resources)

        logger.debug(
            "resource_registered",
            scope_id=self.scope_id,
            resource_type=type(resource).__name__,
            position=position,
        )
        return resource

    def register_closing(self, target: R) -> R:
        """Register an object that cleans up through ``close()``.

        Returns:
            The object itself, not the adapter
        """
        self.register(ClosingResource(target))
        return target

    def register_callback(
        self, callback: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> Callable[..., Any]:
        """Register ``callback(*args, **kwargs)`` to run at release time.

        Returns:
            The callback, unchanged
        """
        self.register(CallbackResource(callback, *args, **kwargs))
        return callback

    @property
    def resources(self) -> tuple[Releasable, ...]:
        """Registered resources in registration order."""
        with self._lock:
            return tuple(self._resources)

    # ========================================================================
    # Body execution and release
    # ========================================================================

    def run(self, body: Callable[["ResourceRegistry[T]"], T]) -> None:
        """Run ``body`` with this registry and record how it ended.

        Whatever the body raises, including KeyboardInterrupt and SystemExit,
        is recorded rather than propagated so that resources are still
        released. It comes back out of the recovery chain at finally time.

        Args:
            body: Callable receiving this registry
        """
        with LogContext(logger, scope_id=self.scope_id) as log:
            log.debug("scope_body_started")
            try:
                self._result = body(self)
            except BaseException as e:
                self._failure = e
                log.debug("scope_body_failed", error_type=type(e).__name__, error=str(e))
            else:
                log.debug("scope_body_completed")

    def release_all(self) -> None:
        """Release every registered resource exactly once.

        A release failure becomes the outcome failure when none is recorded
        yet, otherwise it is suppressed on the recorded one. Calling this a
        second time does nothing.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._resources)

        if self.order is ReleaseOrder.LIFO:
            pending.reverse()

        with LogContext(logger, scope_id=self.scope_id) as log:
            log.debug("releasing_resources", count=len(pending), order=self.order.value)

            for index, resource in enumerate(pending):
                try:
                    resource.release()
                except BaseException as e:
                    log.warning(
                        "resource_release_failed",
                        index=index,
                        resource_type=type(resource).__name__,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    if self._failure is None:
                        self._failure = e
                    else:
                        add_suppressed(self._failure, e)
                else:
                    log.debug(
                        "resource_released",
                        index=index,
                        resource_type=type(resource).__name__,
                    )

        self._released = tuple(pending)

    def outcome(self) -> ScopeOutcome[T]:
        """Return the merged outcome. Meaningful after release_all()."""
        return ScopeOutcome(
            failure=self._failure,
            result=None if self._failure is not None else self._result,
            released=self._released,
        )
