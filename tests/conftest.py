"""Shared fixtures: an in-memory stand-in for PostgresPool."""
from contextlib import asynccontextmanager

import pytest

from db.connection import RowSet
from db.query import Database


class FakeConnection:
    """Records every statement and answers with the pool's scripted results."""

    def __init__(self, pool):
        self.pool = pool

    async def execute(self, sql, params=()):
        self.pool.executed.append((sql, list(params)))
        if self.pool.gate is not None:
            await self.pool.gate.wait()
        if self.pool.errors:
            error = self.pool.errors.pop(0)
            if error is not None:
                raise error
        return self.pool.results.pop(0) if self.pool.results else RowSet()


class FakePool:
    """Counts acquisitions and releases so tests can check nothing leaks."""

    def __init__(self):
        self.results = []
        self.errors = []
        self.executed = []
        self.acquire_error = None
        self.gate = None
        self.acquired = 0
        self.released = 0
        self.open_error = None
        self.opened = False
        self.closed = False

    @property
    def in_use(self):
        return self.acquired - self.released

    def queue(self, rows=None, rowcount=None):
        rows = rows or []
        self.results.append(RowSet(rows=rows, rowcount=len(rows) if rowcount is None else rowcount))

    async def open(self):
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    async def close(self):
        self.closed = True

    @asynccontextmanager
    async def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        try:
            yield FakeConnection(self)
        finally:
            self.released += 1


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def db(fake_pool):
    return Database(fake_pool)
