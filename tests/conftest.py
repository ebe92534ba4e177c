"""Pytest configuration and fixtures.

The mock resources mirror a typical connection -> statement -> result set
acquisition path so scoped bodies look like real resource-owning code.
"""

import pytest

from tryscope.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings."""
    for name in ("LOG_LEVEL", "STRUCTURED_LOGS", "LOG_FILE", "ATTACH_NOTES"):
        monkeypatch.delenv(f"TRYSCOPE_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()


class Closed:
    """Resource that records when it is released."""

    def __init__(self, release_log: list | None = None) -> None:
        self.release_log = release_log
        self.released = False
        self.release_count = 0

    def release(self) -> None:
        self.released = True
        self.release_count += 1
        if self.release_log is not None:
            self.release_log.append(self)


class Connection(Closed):
    def prepare_statement(self) -> "PreparedStatement":
        return PreparedStatement(self.release_log)


class PreparedStatement(Closed):
    def execute_query(self) -> "ResultSet":
        return ResultSet(self.release_log)


class ResultSet(Closed):
    def next(self) -> bool:
        return True


class FailingResource(Closed):
    """Resource whose release() raises the given error after recording."""

    def __init__(self, error: BaseException, release_log: list | None = None) -> None:
        super().__init__(release_log)
        self.error = error

    def release(self) -> None:
        super().release()
        raise self.error


@pytest.fixture
def release_log() -> list:
    """Resources in the order their release() was called."""
    return []


@pytest.fixture
def connection(release_log) -> Connection:
    return Connection(release_log)


@pytest.fixture
def failing_resource(release_log):
    """Factory for resources whose release fails."""

    def make(error: BaseException) -> FailingResource:
        return FailingResource(error, release_log)

    return make


@pytest.fixture
def sql_body(release_log):
    """Factory for a body acquiring connection, statement and result set.

    The body returns the result set, or raises ``error`` after acquiring all
    three resources when one is given.
    """

    def make(error: BaseException | None = None):
        def body(scope):
            connection = scope.register(Connection(release_log))
            statement = scope.register(connection.prepare_statement())
            result_set = scope.register(statement.execute_query())
            result_set.next()
            if error is not None:
                raise error
            return result_set

        return body

    return make


@pytest.fixture
def closed(release_log):
    """Factory for plain resources sharing the release log."""

    def make() -> Closed:
        return Closed(release_log)

    return make
