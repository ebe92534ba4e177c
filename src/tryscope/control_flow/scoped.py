"""Entry point combining the resource registry and the recovery chain."""

from collections.abc import Callable
from typing import TypeVar

from ..config import ReleaseOrder
from .recovery_chain import RecoveryChain
from .resource_registry import ResourceRegistry

T = TypeVar("T")


def run_scoped(
    body: Callable[[ResourceRegistry[T]], T], order: ReleaseOrder = ReleaseOrder.FIFO
) -> RecoveryChain[T]:
    """Run ``body``, release what it registered, and start a recovery chain.

    Nothing is raised here. Failures from the body or from releasing its
    resources come out of the returned chain's ``finally_`` unless a catch
    step handles them.

    Args:
        body: Callable receiving the registry; registers resources through it
        order: Release order for this scope only

    Returns:
        A RecoveryChain seeded with the scope's outcome

    Example:
        >>> def body(scope):
        ...     conn = scope.register(open_connection())
        ...     return conn.query("select 1")
        >>> rows = run_scoped(body).catch(TimeoutError, report).finally_(lambda: None)
    """
    registry: ResourceRegistry[T] = ResourceRegistry(order=order)
    registry.run(body)
    registry.release_all()
    return RecoveryChain(registry.outcome())


using = run_scoped
