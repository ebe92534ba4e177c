"""Tests for ResourceRegistry.

Covers registration, release ordering, release-failure folding, and the
recorded outcome of the scoped body.
"""

import threading

import pytest

from tryscope.config import ReleaseOrder
from tryscope.control_flow import (
    CallbackResource,
    ClosingResource,
    ResourceRegistry,
    get_suppressed,
)
from tryscope.exceptions import InvalidResourceError, RegistryClosedError


class SuperSecretError(Exception):
    pass


class AnotherSecretError(Exception):
    pass


# ============================================================================
# Registration
# ============================================================================


def test_register_returns_resource_unchanged(connection):
    """register() passes the resource straight through."""
    registry = ResourceRegistry()

    assert registry.register(connection) is connection
    assert registry.resources == (connection,)


def test_register_rejects_object_without_release():
    """Objects without release() are refused with a TypeError."""
    registry = ResourceRegistry()

    with pytest.raises(InvalidResourceError) as exc_info:
        registry.register(object())

    assert isinstance(exc_info.value, TypeError)
    assert exc_info.value.error_code == "INVALID_RESOURCE"
    assert registry.resources == ()


def test_register_after_release_is_refused(connection):
    """Resources registered after release_all would leak, so they are refused."""
    registry = ResourceRegistry()
    registry.release_all()

    with pytest.raises(RegistryClosedError):
        registry.register(connection)

    assert connection.released is False


def test_register_closing_adapts_close(release_log):
    """register_closing() releases through close() and returns the target."""

    class Handle:
        closed = False

        def close(self):
            self.closed = True

    registry = ResourceRegistry()
    handle = Handle()

    assert registry.register_closing(handle) is handle
    assert isinstance(registry.resources[0], ClosingResource)

    registry.release_all()

    assert handle.closed is True


def test_register_callback_runs_with_arguments():
    """register_callback() calls the callback with its arguments at release."""
    calls = []
    registry = ResourceRegistry()

    def record(name, *, flag):
        calls.append((name, flag))

    assert registry.register_callback(record, "cache", flag=True) is record
    assert isinstance(registry.resources[0], CallbackResource)

    registry.release_all()

    assert calls == [("cache", True)]


def test_concurrent_registration_keeps_every_resource(closed, release_log):
    """Registration from several threads loses nothing."""
    registry = ResourceRegistry()

    def body(scope):
        def worker():
            for _ in range(50):
                scope.register(closed())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    registry.run(body)
    registry.release_all()

    assert len(registry.resources) == 400
    assert len(release_log) == 400
    assert all(resource.release_count == 1 for resource in registry.resources)


# ============================================================================
# Release ordering
# ============================================================================


def test_release_all_releases_in_registration_order(closed, release_log):
    """Resources are released first-registered first."""
    registry = ResourceRegistry()
    resources = [registry.register(closed()) for _ in range(5)]

    registry.release_all()

    assert release_log == resources
    assert registry.outcome().released == tuple(resources)


def test_release_all_is_idempotent(connection):
    """A second release_all() call releases nothing again."""
    registry = ResourceRegistry()
    registry.register(connection)

    registry.release_all()
    registry.release_all()

    assert connection.release_count == 1


def test_lifo_order_is_opt_in(closed, release_log):
    """LIFO only applies when requested."""
    registry = ResourceRegistry(order=ReleaseOrder.LIFO)
    resources = [registry.register(closed()) for _ in range(3)]

    registry.release_all()

    assert release_log == list(reversed(resources))


def test_release_order_not_taken_from_environment(closed, release_log, monkeypatch):
    """No environment switch turns every scope in the process to LIFO."""
    monkeypatch.setenv("TRYSCOPE_RELEASE_ORDER", "lifo")
    registry = ResourceRegistry()
    first = registry.register(closed())
    second = registry.register(closed())

    registry.release_all()

    assert registry.order is ReleaseOrder.FIFO
    assert release_log == [first, second]


# ============================================================================
# Outcome
# ============================================================================


def test_run_records_body_result(sql_body):
    """A successful body leaves no failure and keeps its return value."""
    registry = ResourceRegistry()

    registry.run(sql_body())
    registry.release_all()
    outcome = registry.outcome()

    assert outcome.failed is False
    assert outcome.failure is None
    assert outcome.result is registry.resources[2]


def test_run_never_propagates_body_failure(sql_body, release_log):
    """Body failures are recorded, and resources are still released."""
    error = SuperSecretError()
    registry = ResourceRegistry()

    registry.run(sql_body(error))
    registry.release_all()
    outcome = registry.outcome()

    assert outcome.failure is error
    assert outcome.result is None
    assert len(release_log) == 3
    assert all(resource.released for resource in registry.resources)


def test_run_records_base_exceptions():
    """KeyboardInterrupt and friends are recorded too."""
    interrupt = KeyboardInterrupt()
    registry = ResourceRegistry()

    def body(scope):
        raise interrupt

    registry.run(body)
    registry.release_all()

    assert registry.outcome().failure is interrupt


def test_first_release_failure_becomes_outcome(connection, failing_resource):
    """With no body failure, the first release failure is the outcome."""
    error = SuperSecretError()
    registry = ResourceRegistry()
    registry.register(failing_resource(error))
    registry.register(connection)

    registry.release_all()

    assert registry.outcome().failure is error
    assert connection.released is True


def test_release_failures_fold_in_order(failing_resource):
    """R1's failure is raised with R2..Rk suppressed on it, in order."""
    errors = [SuperSecretError("r1"), AnotherSecretError("r2"), ValueError("r3")]
    registry = ResourceRegistry()
    for error in errors:
        registry.register(failing_resource(error))

    registry.release_all()
    failure = registry.outcome().failure

    assert failure is errors[0]
    assert get_suppressed(failure) == (errors[1], errors[2])


def test_release_failures_suppressed_on_body_failure(sql_body, failing_resource):
    """A body failure stays primary; release failures are suppressed on it."""
    body_error = SuperSecretError("body")
    release_error = AnotherSecretError("release")
    registry = ResourceRegistry()

    def body(scope):
        scope.register(failing_resource(release_error))
        sql_body(body_error)(scope)

    registry.run(body)
    registry.release_all()
    failure = registry.outcome().failure

    assert failure is body_error
    assert get_suppressed(failure) == (release_error,)
    assert all(resource.released for resource in registry.resources)


def test_registration_failure_inside_body_is_recorded():
    """Registering an invalid object from the body fails the body."""
    registry = ResourceRegistry()

    registry.run(lambda scope: scope.register("not a resource"))
    registry.release_all()

    assert isinstance(registry.outcome().failure, InvalidResourceError)
